## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import lark


class EmberError(Exception):
    def __init__(self, message: str = "", *, filename=None, token=None):
        """Base class for all ember-raised errors."""
        super().__init__(message)
        self.filename: str = filename
        self.token: str = token

class EmberParseError(EmberError):
    def __init__(self, message, *, filename=None, line=None, column=None, token=None):
        super().__init__(message, filename=filename, token=token)
        self.line = line
        self.column = column

class EmberIncompleteParse(EmberParseError, lark.exceptions.ParseError):
    pass

class EmberNameError(EmberError, NameError):
    pass

class EmberRuntimeError(EmberError, RuntimeError):
    pass

class EmberArgumentError(EmberError, TypeError):
    pass


class EmberProtocolError(EmberError, TypeError):
    """Container has no implementation of the iterator protocol."""
    def __init__(self, container):
        super().__init__(f"Protocol `iterator` not implemented for {type(container).__name__}: {container!r}")
        self.container = container


class EmberLoadError(EmberError, ImportError):
    pass

class EmberModuleConflict(EmberLoadError):
    def __init__(self, message, *, module=None, filename=None, previous=None):
        super().__init__(message, filename=filename, token=module)
        self.module = module
        self.previous = previous


class EmberAppError(EmberError):
    def __init__(self, name: str, reason: str):
        super().__init__(f"{name}: {reason}", token=name)
        self.name = name
        self.reason = reason
