## ember — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import os
import sys
import threading
from typing import Any, Callable
from collections import ChainMap
from concurrent.futures import ThreadPoolExecutor, as_completed

from .paths import LoadPath
from .parser import parse
from .errors import EmberNameError, EmberModuleConflict, EmberAppError, EmberLoadError
from .builtins import load_builtins
from .interpreter import Module, execute
from .compiler import load_artifact


DEFAULT_COMPILER_OPTIONS = {'docs': True, 'debug_info': True, 'ignore_module_conflict': False}


def _debug(message: str) -> None:
    if os.environ.get('EMBER_DEBUG'): print(f"\033[90m{message}\033[0m", file=sys.stderr)


def camelize(name: str) -> str:
    return ''.join(part[:1].upper() + part[1:] for part in name.split('_'))


class Runtime:
    """Loading, evaluation and process-wide state shared by all commands of one invocation."""

    def __init__(self, load_path: LoadPath | None = None, argv=(), compiler_options: dict | None = None):
        self.load_path = LoadPath.from_env() if load_path is None else load_path
        self.argv = list(argv)
        self.compiler_options = {**DEFAULT_COMPILER_OPTIONS, **(compiler_options or {})}
        self.modules: dict[str, Module] = {}
        self.required: set[str] = set()
        self.started: set[str] = set()
        self.builtins = load_builtins(self)

        self._hooks: list[Callable[[int], Any]] = []
        self._lock = threading.RLock()

    # Evaluation ──────────────────────────────────────────────────────────────────────────────
    def eval_string(self, source: str, filename: str = '<EVAL>', bindings: dict | None = None):
        return execute(parse(source, filename=filename), self, filename=filename, scope=ChainMap(dict(bindings or {})))

    def load_file(self, path: str):
        _debug(f"loading {path}")
        try:
            with open(path, 'r', encoding='utf-8') as f:
                source = f.read()
        except OSError as exc:
            raise EmberLoadError(f"Could not read `{path}`: {exc.strerror}.", filename=path) from exc
        return execute(parse(source, filename=path), self, filename=path)

    def require_file(self, path: str) -> bool:
        """Load `path` unless it was already required. Returns True when it was loaded now."""
        key = os.path.abspath(path)
        with self._lock:
            if key in self.required: return False
            self.required.add(key)
        self.load_file(path)
        return True

    def parallel_require(self, files: list[str], max_workers: int | None = None) -> list[str]:
        """Require all `files` concurrently, blocking until every one finished; the first fault is re-raised."""
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            futures = [pool.submit(self.require_file, f) for f in files]
            for future in as_completed(futures):
                future.result()
        return list(files)

    # Modules ─────────────────────────────────────────────────────────────────────────────────
    def define_module(self, module: Module) -> None:
        with self._lock:
            existing = self.modules.get(module.name)
            if existing is not None and existing.filename != module.filename and not self.compiler_options['ignore_module_conflict']:
                raise EmberModuleConflict(
                    f"Module `{module.name}` from `{module.filename}` conflicts with the one already defined in `{existing.filename}`.",
                    module=module.name, filename=module.filename, previous=existing.filename)
            self.modules[module.name] = module

    def find_module(self, name: str) -> Module | None:
        if (module := self.modules.get(name)) is not None: return module
        for candidate in self.load_path.candidates(name):
            if not candidate.is_file(): continue
            _debug(f"loading {candidate}")
            module = load_artifact(str(candidate), self)
            with self._lock:
                return self.modules.setdefault(module.name, module)
        return None

    def lookup(self, qualified: str):
        module_name, _, fn_name = qualified.rpartition('.')
        if (module := self.find_module(module_name)) is None:
            raise EmberNameError(f"Module `{module_name}` is not available.", token=qualified)
        if (fn := module.functions.get(fn_name)) is None:
            raise EmberNameError(f"Function `{fn_name}` is undefined in module `{module_name}`.", token=qualified)
        return fn

    # Applications ────────────────────────────────────────────────────────────────────────────
    def start_app(self, name: str) -> None:
        """Start an application: its module (`my_app` is module `MyApp`) must define `start()`."""
        if name in self.started: return
        module = self.find_module(name) or self.find_module(camelize(name))
        if module is None:
            raise EmberAppError(name, "not_found")
        if (start := module.functions.get('start')) is None or start.arity != 0:
            raise EmberAppError(name, f"{module.name}.start/0 is undefined")
        if start() is False:
            raise EmberAppError(name, "start returned false")
        self.started.add(name)

    # Exit hooks ──────────────────────────────────────────────────────────────────────────────
    def at_exit(self, hook: Callable[[int], Any]) -> None:
        with self._lock:
            self._hooks.append(hook)

    def flush_at_exit(self) -> list[Callable[[int], Any]]:
        """Hand over all registered hooks and clear the registry."""
        with self._lock:
            hooks, self._hooks = self._hooks, []
        return hooks
