class TankError(Exception):
    """Base class for all tank errors"""
    def __init__(self, message=None):
        Exception.__init__(self, message)

    @property
    def message(self):
        if self.args:
            message = self.args[0]
            if message is not None:
                return message


class ParseError(TankError):
    """A token did not fit the grammar. Carries the offending token's position."""
    def __init__(self, message, line=0, column=0):
        TankError.__init__(self, message)
        self.line = line
        self.column = column

    @classmethod
    def at(cls, message, token):
        return cls(message, token.line, token.column)

    def __str__(self):
        return 'Parse error at line %d, pos %d - %s' % (self.line, self.column, self.message)


class SymbolError(TankError):
    """Redeclared, untyped or undefined variables."""


class EvalError(TankError):
    """A comparison could not be evaluated."""


class GenError(TankError):
    """The generator found a tree it cannot turn into html."""


class IncludeError(TankError):
    """An included template is missing or includes itself."""


class ConfigError(TankError):
    """The variables file is unreadable or not a flat mapping."""


class CompileError(TankError):
    """Raised at a phase boundary when errors were collected during that phase."""
    def __init__(self, diagnostics):
        TankError.__init__(self, '\n'.join(diagnostics.errors))
        self.diagnostics = diagnostics
