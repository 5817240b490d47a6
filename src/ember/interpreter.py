## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from collections import ChainMap
from dataclasses import dataclass, field

from .errors import EmberNameError, EmberRuntimeError, EmberArgumentError


@dataclass
class Module:
    name: str
    filename: str | None = None
    functions: dict[str, "Function"] = field(default_factory=dict)
    docs: dict[str, str] = field(default_factory=dict)
    moduledoc: str | None = None


class Function:
    """User-defined function or lambda, callable from Python so the sequence engine can apply it."""

    def __init__(self, name, params, body, *, runtime, module=None, scope=None, filename=None, line=None):
        self.name = name
        self.params = list(params)
        self.body = body
        self.runtime = runtime
        self.module = module
        self.scope = ChainMap() if scope is None else scope
        self.filename = filename
        self.line = line

    @property
    def arity(self) -> int:
        return len(self.params)

    def __call__(self, *args):
        if len(args) != len(self.params):
            raise EmberArgumentError(f"{self.name}/{self.arity} called with {len(args)} argument(s).", token=self.name)
        try:
            scope = self.scope.new_child(dict(zip(self.params, args)))
            return evaluate(self.body, scope, self.runtime, self.module)
        except Exception as exc:
            _add_frame(exc, self.filename, self.line, self.qualified_name)
            raise

    @property
    def qualified_name(self) -> str:
        return f"{self.module.name}.{self.name}" if self.module else self.name

    def __repr__(self):
        return f"#Function<{self.qualified_name}/{self.arity}>"


def _add_frame(exc: Exception, filename, line, name) -> None:
    if not hasattr(exc, 'ember_trace'): exc.ember_trace = []
    exc.ember_trace.append((filename, line, name))


def resolve(name: str, scope, runtime, module: Module | None):
    if name in scope: return scope[name]
    if '.' in name: return runtime.lookup(name)
    if module is not None and name in module.functions: return module.functions[name]
    if name in runtime.builtins: return runtime.builtins[name]
    raise EmberNameError(f"Undefined name `{name}`.", token=name)


def _binary(op: str, lhs, rhs):
    match op:
        case '+': return lhs + rhs
        case '-': return lhs - rhs
        case '*': return lhs * rhs
        case '/':
            if rhs == 0: raise EmberRuntimeError("Division by zero.", token='/')
            return lhs / rhs
        case '++':
            if not (isinstance(lhs, (list, str)) and type(lhs) is type(rhs)):
                raise EmberArgumentError(f"`++` expects two lists or two strings, got {type(lhs).__name__} and {type(rhs).__name__}.", token='++')
            return lhs + rhs
        case '==': return lhs == rhs
        case '!=': return lhs != rhs
        case '<': return lhs < rhs
        case '>': return lhs > rhs
        case '<=': return lhs <= rhs
        case '>=': return lhs >= rhs
    raise NotImplementedError(op)


def evaluate(node: list, scope, runtime, module: Module | None = None):
    match node:
        case ['lit', value]:
            return value
        case ['var', name]:
            return resolve(name, scope, runtime, module)
        case ['list', items]:
            return [evaluate(i, scope, runtime, module) for i in items]
        case ['neg', operand]:
            return -evaluate(operand, scope, runtime, module)
        case ['op', op, lhs, rhs]:
            return _binary(op, evaluate(lhs, scope, runtime, module), evaluate(rhs, scope, runtime, module))
        case ['fn', params, body]:
            return Function('fn', params, body, runtime=runtime, module=module, scope=scope)
        case ['call', name, args]:
            fn = resolve(name, scope, runtime, module)
            if not callable(fn):
                raise EmberRuntimeError(f"`{name}` is not a function.", token=name)
            return fn(*[evaluate(a, scope, runtime, module) for a in args])
    raise NotImplementedError(f"Unknown node {node!r}.")


def execute(statements, runtime, *, filename=None, scope=None):
    """Run statements in order, defining modules and functions as they appear.

    Returns the value of the last statement, or None (`nil`) when there is none."""
    scope = ChainMap() if scope is None else scope
    module, pending_doc, out = None, None, None

    for stmt in statements:
        try:
            match stmt['kind']:
                case 'module':
                    module = Module(stmt['name'], filename=filename, moduledoc=pending_doc)
                    runtime.define_module(module)
                    pending_doc, out = None, None
                case 'doc':
                    pending_doc = stmt['text']
                case 'def':
                    fn = Function(stmt['name'], stmt['params'], stmt['body'], runtime=runtime, module=module,
                                  scope=scope, filename=filename, line=stmt['line'])
                    if module is not None:
                        module.functions[fn.name] = fn
                        if pending_doc is not None: module.docs[fn.name] = pending_doc
                    else:
                        scope[fn.name] = fn
                    pending_doc, out = None, fn
                case 'assign':
                    out = scope[stmt['name']] = evaluate(stmt['value'], scope, runtime, module)
                case 'expr':
                    out = evaluate(stmt['value'], scope, runtime, module)
        except Exception as exc:
            _add_frame(exc, filename, stmt.get('line'), module.name if module else '(file)')
            raise
    return out
