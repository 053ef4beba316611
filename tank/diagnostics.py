import sys
from typing import List

from .exceptions import CompileError, ParseError

PREFIX = 'tank'


class Diagnostics:
    """
    Collects the errors and warnings of one compilation.

    Phases record into the collector as they go and call `check()` when they
    finish; any recorded error aborts the compilation at that point. Warnings
    are reported but never abort.
    """

    def __init__(self):
        self.errors: List[str] = []
        self.warnings: List[str] = []

    @property
    def is_err(self) -> bool:
        return bool(self.errors)

    @property
    def is_warn(self) -> bool:
        return bool(self.warnings)

    @property
    def has_diag(self) -> bool:
        return self.is_err or self.is_warn

    def parse_error(self, message: str, line: int, column: int):
        self.errors.append(f"{PREFIX}: Parse error at line {line}, pos {column} - {message}")

    def record(self, error: Exception):
        """Records a raised tank error using the format of its phase."""
        if isinstance(error, ParseError):
            self.parse_error(error.message, error.line, error.column)
        elif isinstance(error, CompileError):
            self.merge(error.diagnostics)
        else:
            self.error(str(error))

    def error(self, message: str):
        self.errors.append(f"{PREFIX}: {message}")

    def warning(self, message: str):
        self.warnings.append(f"{PREFIX}: {message}")

    def merge(self, other: 'Diagnostics'):
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)

    def check(self):
        if self.errors:
            raise CompileError(self)

    def lines(self) -> List[str]:
        return self.errors + self.warnings

    def print_diag(self, file=None):
        file = file or sys.stdout
        for line in self.lines():
            print(line, file=file)
        # An extra line keeps the messages readable before exiting.
        print(file=file)
