## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# ember — A tiny expression language with a staged command line and lazy sequence engine.
#

import sys
import itertools

import click

from .options import Config, process_argv
from .runtime import Runtime
from .dispatcher import process_commands
from .formatting import write_without_ansi
from .runner import run


# Flags handled by click itself, only recognized before any other token.
GLOBAL_FLAGS = ('--plain', '--help')


def _execute(config: Config, runtime: Runtime) -> int | None:
    if errors := process_commands(config, runtime):
        for msg in errors:
            print(msg, file=sys.stderr)
        return 1
    return None


@click.command(context_settings={'ignore_unknown_options': True, 'allow_extra_args': True})
@click.option('--plain', is_flag=True, help='Strip ANSI color codes from all output.')
@click.argument('tokens', nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def cli(ctx: click.Context, plain: bool, tokens: tuple[str, ...]) -> None:
    """Run ember scripts, evaluate expressions, or compile sources.

    \b
      -e EXPR          evaluate an expression
      -r PATTERN       require matching files
      -pr PATTERN      require matching files in parallel
      -pa PATH         prepend PATH to the load path
      -pz PATH         append PATH to the load path
      -S NAME          require an executable found on PATH
      --app NAME       start an application
      --no-halt        do not exit when done
      -v               print the version
      --compile [-o DIR] [--no-docs] [--no-debug-info] [--ignore-module-conflict] FILES...
    """
    if plain:
        sys.stdout.write = write_without_ansi(sys.stdout.write)
        sys.stderr.write = write_without_ansi(sys.stderr.write)

    config, argv = process_argv(list(tokens))
    runtime = Runtime(load_path=config.load_path, argv=argv)
    status = run(lambda: _execute(config, runtime), runtime, halt=config.halt)
    if status is not None:
        ctx.exit(status)


def main(argv: list[str] | None = None) -> None:
    a = list(sys.argv[1:] if argv is None else argv)
    g = list(itertools.takewhile(lambda t: t in GLOBAL_FLAGS, a))
    # Everything else goes through `--` so that click passes it on untouched, including `--`.
    cli.main(args=[*g, '--', *a[len(g):]], prog_name='ember')


if __name__ == "__main__":
    main()
