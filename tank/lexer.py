import re
from typing import Iterator, Tuple

from .tokens import Token, TokenKind, is_reserved, operators

# an alphabetic char followed by alphanumerics; ':', '(' and ')' end a name
name_re = re.compile(r'[^\W\d_][^\W_]*')
number_re = re.compile(r'[0-9]+')

word_rules = (
    (name_re, TokenKind.IDENT),
    (number_re, TokenKind.NUMBER),
)


class Lexer:
    """
    Pull lexer for tank source.

    Every call to `lex()` scans the next token and stores it as `current`.
    Whitespace between tokens is skipped, newlines bump the line counter and
    reset the column. A character no rule accepts becomes an INVALID token so
    the parser can report it at its real position instead of treating it as
    the end of input.
    """

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1
        self.current: Token = Token(TokenKind.EOF)

    def lex(self) -> Token:
        """Advances to the next token and returns it."""
        self._skip_whitespace()
        self.current = self._scan()
        return self.current

    def peek(self) -> Token:
        """Returns the token after `current` without consuming anything."""
        state = self._save()
        try:
            return self.lex()
        finally:
            self._restore(state)

    def tokenize(self) -> Iterator[Token]:
        """Yields every remaining token, ending with EOF."""
        while True:
            token = self.lex()
            yield token
            if token.kind is TokenKind.EOF:
                return

    def _save(self) -> Tuple[int, int, int, Token]:
        return self.pos, self.line, self.column, self.current

    def _restore(self, state: Tuple[int, int, int, Token]):
        self.pos, self.line, self.column, self.current = state

    def _skip_whitespace(self):
        source = self.source
        while self.pos < len(source) and source[self.pos].isspace():
            if source[self.pos] == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def _scan(self) -> Token:
        if self.pos >= len(self.source):
            return Token(TokenKind.EOF, '', self.line, self.column)

        # longest match first: '==' before '=', '->' before '-'
        for length in (2, 1):
            text = self.source[self.pos:self.pos + length]
            kind = operators.get(text)
            if kind is not None and len(text) == length:
                return self._take(kind, text)

        for regex, kind in word_rules:
            m = regex.match(self.source, self.pos)
            if m:
                return self._take(kind, m.group())

        # a lone '!' lands here too, there is no negation operator
        return self._take(TokenKind.INVALID, self.source[self.pos])

    def _take(self, kind: TokenKind, text: str) -> Token:
        token = Token(kind, text, self.line, self.column,
                      reserved=kind is TokenKind.IDENT and is_reserved(text))
        self.pos += len(text)
        self.column += len(text)
        return token
