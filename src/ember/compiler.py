## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# Compiling a source file runs it (which defines its modules) then stores each module it
# defined as a JSON artifact `<output>/<Module>.emc` that can be loaded from the load path.
#

import os
import sys
import json
from pathlib import Path
from typing import Callable
from concurrent.futures import ThreadPoolExecutor, as_completed

from .paths import ARTIFACT_SUFFIX, mkdir_p
from .parser import parse
from .errors import EmberLoadError
from .interpreter import Module, Function, execute

ARTIFACT_VERSION = 1


def compile_file(path: str, runtime) -> list[dict]:
    """Run `path` and return one artifact per module it defines, honoring the compiler options."""
    options = runtime.compiler_options
    with open(path, 'r', encoding='utf-8') as f:
        source = f.read()
    statements = list(parse(source, filename=path))
    execute(statements, runtime, filename=path)

    artifacts = []
    for name in [s['name'] for s in statements if s['kind'] == 'module']:
        module = runtime.modules[name]
        artifact = {
            'version': ARTIFACT_VERSION,
            'module': module.name,
            'functions': {fn.name: {'params': fn.params, 'body': fn.body} for fn in module.functions.values()},
        }
        if options['docs']:
            artifact['moduledoc'] = module.moduledoc
            artifact['docs'] = dict(module.docs)
        if options['debug_info']:
            artifact['file'] = path
            artifact['lines'] = {fn.name: fn.line for fn in module.functions.values()}
        artifacts.append(artifact)
    return artifacts


def write_artifact(artifact: dict, output: str) -> str:
    target = os.path.join(output, artifact['module'] + ARTIFACT_SUFFIX)
    Path(target).write_text(json.dumps(artifact, indent=1), encoding='utf-8')
    return target


def load_artifact(path: str, runtime) -> Module:
    try:
        artifact = json.loads(Path(path).read_text(encoding='utf-8'))
    except (OSError, ValueError) as exc:
        raise EmberLoadError(f"Could not load compiled module `{path}`: {exc}", filename=path) from exc
    if artifact.get('version') != ARTIFACT_VERSION:
        raise EmberLoadError(f"Compiled module `{path}` has unsupported version {artifact.get('version')!r}.", filename=path)

    module = Module(artifact['module'], filename=artifact.get('file', path),
                    docs=artifact.get('docs') or {}, moduledoc=artifact.get('moduledoc'))
    lines = artifact.get('lines', {})
    for name, fn in artifact['functions'].items():
        module.functions[name] = Function(name, fn['params'], fn['body'], runtime=runtime, module=module,
                                          filename=module.filename, line=lines.get(name))
    return module


def files_to_path(files: list[str], output: str, runtime, on_compiled: Callable[[str], None] | None = None,
                  max_workers: int | None = None) -> list[str]:
    """Compile `files` concurrently into `output`; blocks until done and re-raises the first fault."""
    mkdir_p(output)

    def _compile(path: str) -> list[str]:
        if os.environ.get('EMBER_DEBUG'): print(f"\033[90mcompiling {path}\033[0m", file=sys.stderr)
        return [write_artifact(a, output) for a in compile_file(path, runtime)]

    written = []
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures = {pool.submit(_compile, f): f for f in files}
        for future in as_completed(futures):
            written.extend(future.result())
            if on_compiled is not None: on_compiled(futures[future])
    return sorted(written)
