## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# Command-line processing in three phases: shared options valid anywhere, top-level options,
# and compiler options after `--compile`. Each phase reads from the head of the argument list
# and queues commands on the config; nothing is executed until the dispatcher runs.
#

from dataclasses import dataclass, field

from . import __version__
from .paths import LoadPath, expand, wildcard, find_executable, is_dir, source_pattern


@dataclass(frozen=True)
class Require:
    path: str

@dataclass(frozen=True)
class ParallelRequire:
    pattern: str

@dataclass(frozen=True)
class Eval:
    expr: str

@dataclass(frozen=True)
class App:
    name: str

@dataclass(frozen=True)
class Compile:
    patterns: tuple[str, ...]


Command = Require | ParallelRequire | Eval | App | Compile


@dataclass
class Config:
    commands: list[Command] = field(default_factory=list)     # In encounter order.
    output: str = '.'
    compile: list[str] = field(default_factory=list)
    halt: bool = True
    compiler_options: dict[str, bool] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)           # In encounter order, never cleared.
    load_path: LoadPath = field(default_factory=LoadPath.from_env)


class _NotRecognized:
    __slots__ = ()
    def __repr__(self): return "NOT_RECOGNIZED"

NOT_RECOGNIZED = _NotRecognized()

# Virtual machine tuning flags, accepted with their value and otherwise ignored.
PASSTHROUGH_FLAGS = ('--vm', '--sname', '--name', '--remsh')


# Shared ──────────────────────────────────────────────────────────────────────────────────
def process_shared(args: list[str], config: Config) -> tuple[list[str], Config] | _NotRecognized:
    """Consume as many shared options as possible from the head of `args`.

    Returns `NOT_RECOGNIZED` if the very first token is not a shared option (or lacks its
    value), so the caller can tell an unknown option apart from progress."""
    consumed = False
    while args:
        match args:
            case ['-v', *rest]:
                print(f"ember {__version__}")
            case ['--app', name, *rest]:
                config.commands.append(App(name))
            case ['--no-halt', *rest]:
                config.halt = False
            case ['-e', expr, *rest]:
                config.commands.append(Eval(expr))
            case ['-pa', path, *rest]:
                for entry in wildcard(expand(path)):
                    config.load_path.prepend(entry)
            case ['-pz', path, *rest]:
                for entry in wildcard(expand(path)):
                    config.load_path.append(entry)
            case ['-r', pattern, *rest]:
                if files := wildcard(pattern):
                    config.commands.extend(Require(f) for f in files)
                else:
                    config.errors.append(f"-r : No files matched pattern {pattern}")
            case ['-pr', pattern, *rest]:
                config.commands.append(ParallelRequire(pattern))
            case [flag, _, *rest] if flag in PASSTHROUGH_FLAGS:
                pass
            case _:
                break
        args, consumed = rest, True
    return (args, config) if consumed else NOT_RECOGNIZED


def _shared_option(args: list[str], config: Config) -> list[str]:
    if (result := process_shared(args, config)) is NOT_RECOGNIZED:
        config.errors.append(f"Unknown option {args[0]}")
        return args[1:]
    remaining, _ = result
    return remaining


# Top-level ───────────────────────────────────────────────────────────────────────────────
def process_argv(args: list[str], config: Config | None = None) -> tuple[Config, list[str]]:
    """Parse the whole command line, returning the config and the trailing program argv."""
    config = Config() if config is None else config
    args = list(args)
    while args:
        match args:
            case ['--', *rest]:
                return config, rest
            case ['--compile', *rest]:
                return process_compiler(rest, config)
            case ['-S', name, *rest]:
                if exe := find_executable(name):
                    config.commands.append(Require(exe))
                else:
                    config.errors.append(f"-S : Could not find executable {name}")
                return config, rest
            case [option, *_] if option.startswith('-'):
                args = _shared_option(args, config)
            case [script, *rest]:
                # The first plain token is the script; what follows belongs to it.
                config.commands.append(Require(script))
                return config, rest
    return config, []


# Compiler ────────────────────────────────────────────────────────────────────────────────
def process_compiler(args: list[str], config: Config) -> tuple[Config, list[str]]:
    """Gather compile patterns and options; the Compile command is queued only once the tokens run out."""
    while args:
        match args:
            case ['--', *trailing]:
                return config, trailing
            case ['-o', output, *rest]:
                config.output = output
            case ['--no-docs', *rest]:
                config.compiler_options['docs'] = False
            case ['--no-debug-info', *rest]:
                config.compiler_options['debug_info'] = False
            case ['--ignore-module-conflict', *rest]:
                config.compiler_options['ignore_module_conflict'] = True
            case [option, *_] if option.startswith('-'):
                rest = _shared_option(args, config)
            case [pattern, *rest]:
                config.compile.append(source_pattern(pattern) if is_dir(pattern) else pattern)
        args = rest

    config.commands.append(Compile(tuple(config.compile)))
    return config, []
