## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from . import sequences as S
from .paths import wildcard, is_regular, mkdir_p
from .errors import EmberAppError
from .options import Config, Command, Require, ParallelRequire, Eval, App, Compile
from .compiler import files_to_path


def process_command(command: Command, config: Config, runtime) -> str | None:
    """Execute one queued command; returns an error message, or None on success.

    Faults raised by evaluating, loading or compiling are not caught here."""
    match command:
        case Eval(expr):
            runtime.eval_string(expr)

        case App(name):
            try:
                runtime.start_app(name)
            except EmberAppError as exc:
                return f"--app : Could not start application {name}: {exc.reason}"

        case Require(path):
            if not is_regular(path):
                return f"-r : No file named {path}"
            runtime.require_file(path)

        case ParallelRequire(pattern):
            files = S.filter(S.uniq(wildcard(pattern)), is_regular)
            if not files:
                return f"-pr : No files matched pattern {pattern}"
            runtime.parallel_require(files)

        case Compile(patterns):
            mkdir_p(config.output)
            files = S.filter(S.uniq(S.concat(S.map(patterns, wildcard))), is_regular)
            if not files:
                return f"--compile : No files matched patterns {S.join(patterns, ' ')}"
            runtime.compiler_options.update(config.compiler_options)
            files_to_path(files, config.output, runtime, on_compiled=lambda f: print(f"Compiled {f}"))

        case _:
            raise NotImplementedError(f"Unknown command {command!r}.")
    return None


def process_commands(config: Config, runtime) -> list[str]:
    """Run every queued command in order, returning parse errors followed by command errors."""
    results = S.map(config.commands, lambda cmd: process_command(cmd, config, runtime))
    return [*config.errors, *S.filter(results, lambda msg: msg is not None)]
