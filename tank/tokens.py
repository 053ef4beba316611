from dataclasses import dataclass
from enum import Enum


class TokenKind(Enum):
    LBRACE = '{'
    RBRACE = '}'
    LPAREN = '('
    RPAREN = ')'
    COLON = ':'
    EQUALS = '='
    EQUALS_EQUALS = '=='
    NOT_EQUALS = '!='
    GT = '>'
    GT_EQUALS = '>='
    LT = '<'
    LT_EQUALS = '<='
    ARROW = '->'
    PLUS = '+'
    MINUS = '-'
    AMPERSAND = '&'
    IDENT = 'ident'
    NUMBER = 'number'
    INVALID = 'invalid'
    EOF = 'eof'


# Operator text -> token kind. Two-char operators are tried before one-char ones.
operators = {
    kind.value: kind for kind in TokenKind
    if kind not in (TokenKind.IDENT, TokenKind.NUMBER, TokenKind.INVALID, TokenKind.EOF)
}

# keywords
LET = 'let'
IF = 'if'
FOR = 'for'
IN = 'in'
INCLUDE = 'include'

# Words that start a construct when they appear where an element is expected.
STATEMENT_KEYWORDS = frozenset([LET, IF, FOR, INCLUDE])

INT = 'int'
BOOL = 'bool'
STRING = 'string'
TYPE_NAMES = (INT, BOOL, STRING)

RESERVED_WORDS = frozenset([LET, IF, FOR, IN, INCLUDE]) | frozenset(TYPE_NAMES)


def is_reserved(word: str) -> bool:
    return word in RESERVED_WORDS


@dataclass
class Token:
    """A single lexed token with its 1-based source position."""
    kind: TokenKind
    value: str = ''
    line: int = 1
    column: int = 1
    reserved: bool = False

    def test(self, kind: TokenKind, value: str = None) -> bool:
        """Compares the token against a kind and, optionally, its literal text."""
        if value is not None and self.value != value:
            return False
        return self.kind is kind

    def describe(self) -> str:
        if self.kind is TokenKind.INVALID:
            return f"character '{self.value}'"
        if self.kind in (TokenKind.IDENT, TokenKind.NUMBER):
            return f"{self.kind.name} '{self.value}'"
        return self.kind.name
