from typing import List, Optional

from .diagnostics import Diagnostics
from .exceptions import ParseError, SymbolError
from .lexer import Lexer
from .nodes import Node, NodeType
from .symbols import SymbolTable
from .tokens import (FOR, IF, IN, INCLUDE, LET, STATEMENT_KEYWORDS, TYPE_NAMES,
                     Token, TokenKind)

comparison_tokens = {
    TokenKind.GT: NodeType.GT,
    TokenKind.GT_EQUALS: NodeType.GT_EQUALS,
    TokenKind.LT: NodeType.LT,
    TokenKind.LT_EQUALS: NodeType.LT_EQUALS,
    TokenKind.EQUALS_EQUALS: NodeType.EQUALS_EQUALS,
    TokenKind.NOT_EQUALS: NodeType.NOT_EQUALS,
}

arithmetic_tokens = {
    TokenKind.PLUS: NodeType.PLUS,
    TokenKind.MINUS: NodeType.MINUS,
}

# tokens that close an element list
list_end_tokens = (TokenKind.EOF, TokenKind.RBRACE)


class Parser:
    """
    Recursive descent parser producing a Template tree.

    Sibling elements are flattened into the Template in source order, each
    list of elements (the template itself or an if-block) ends with an Eof
    node. Declarations go into the shared symbol table as soon as they are
    parsed.

    A token that does not fit the grammar aborts the parse; symbol errors
    are collected and parsing carries on. Either way `parse()` raises a
    CompileError at the end when anything went wrong.
    """

    def __init__(self, source: str, symbol_table: Optional[SymbolTable] = None,
                 diagnostics: Optional[Diagnostics] = None):
        self.lexer = Lexer(source)
        self.symbol_table = symbol_table if symbol_table is not None else SymbolTable()
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.root = Node(NodeType.TEMPLATE)
        self.lexer.lex()

    @property
    def current(self) -> Token:
        return self.lexer.current

    def parse(self) -> Node:
        try:
            if self.current.kind is TokenKind.EOF:
                raise ParseError.at("End of input reached, nothing to parse!", self.current)
            self.root.children.extend(self.element_list())
            if self.current.kind is not TokenKind.EOF:
                raise self.unexpected(self.current)
        except ParseError as e:
            self.diagnostics.record(e)
        self.diagnostics.check()
        return self.root

    def element_list(self) -> List[Node]:
        """Parses elements until EOF or a closing brace. The last node is always Eof."""
        elements = []
        while True:
            node = self.element()
            elements.append(node)
            if node.type is NodeType.EOF:
                return elements

    def element(self) -> Node:
        token = self.current
        if token.kind is TokenKind.IDENT:
            if token.value == LET:
                return self.parse_let()
            if token.value == IF:
                return self.parse_if()
            if token.value == FOR:
                return self.parse_for()
            if token.value == INCLUDE:
                return self.parse_include()
            return self.parse_markup()
        if token.kind in list_end_tokens:
            return Node.at(NodeType.EOF, token, '')
        raise self.unexpected(token)

    def parse_let(self) -> Node:
        let_token = self.next_token()
        assign = self.expr()
        if assign.type is not NodeType.ASSIGN_EXPR:
            raise ParseError.at("Expected a declaration of the form 'let name: type = value'",
                                let_token)

        # Redeclarations surface from the symbol table, not from the grammar.
        try:
            self.symbol_table.insert(assign)
        except SymbolError as e:
            self.diagnostics.parse_error(e.message, assign.line, assign.column)

        element = Node.at(NodeType.ELEMENT, let_token, '')
        return element.add(assign)

    def parse_if(self) -> Node:
        if_token = self.next_token()
        node = Node.at(NodeType.IF_EXPR, if_token, '')
        node.add(self.expr())
        self.expect(TokenKind.LBRACE)
        node.children.extend(self.element_list())
        self.expect(TokenKind.RBRACE)
        return node

    def parse_for(self) -> Node:
        for_token = self.next_token()
        node = Node.at(NodeType.FOR_EXPR, for_token, '')

        var = self.expect_ident_term('loop variable')
        if not self.current.test(TokenKind.IDENT, IN):
            raise ParseError.at("Expected 'in' at for loop, found %s" % self.current.describe(),
                                self.current)
        self.next_token()
        source = self.expect_ident_term('loop source')
        node.add(var).add(source)

        # The loop source has to be known before anything is generated.
        bound = False
        symbol = self.symbol_table.get(source.value)
        if symbol is None:
            self.diagnostics.parse_error(f"Variable {source.value} is undefined",
                                         source.line, source.column)
        else:
            try:
                self.symbol_table.insert_for_binding(var, symbol.value, symbol.var_type)
                bound = True
            except SymbolError as e:
                self.diagnostics.parse_error(e.message, var.line, var.column)

        try:
            if self.current.kind not in list_end_tokens:
                node.add(self.element())
        finally:
            if bound:
                self.symbol_table.release(var.value)
        return node

    def parse_include(self) -> Node:
        self.next_token()
        name = self.expect(TokenKind.IDENT)
        return Node.at(NodeType.INCLUDE, name)

    def parse_markup(self) -> Node:
        """Term AttrList? (Element | Include | Content)"""
        name_token = self.current
        element = Node.at(NodeType.ELEMENT, name_token, '')
        element.add(self.term())

        if self.current.kind is TokenKind.LPAREN:
            element.add(self.attr_list())
        else:
            element.add(Node.at(NodeType.ATTR_LIST, self.current, ''))

        element.add(self.element_body())
        return element

    def element_body(self) -> Node:
        token = self.current
        if token.test(TokenKind.IDENT, INCLUDE):
            return self.parse_include()
        if self.starts_nested_element():
            return self.parse_markup()
        if self.starts_content():
            return self.content()
        # nothing inside, e.g. "br() ->" at the end of a block
        return Node.at(NodeType.EOF, token, '')

    def starts_nested_element(self) -> bool:
        token = self.current
        return (token.kind is TokenKind.IDENT
                and token.value not in STATEMENT_KEYWORDS
                and self.lexer.peek().kind is TokenKind.LPAREN)

    def starts_content(self) -> bool:
        token = self.current
        if token.kind in (TokenKind.NUMBER, TokenKind.AMPERSAND):
            return True
        return (token.kind is TokenKind.IDENT
                and token.value not in STATEMENT_KEYWORDS
                and self.lexer.peek().kind is not TokenKind.LPAREN)

    def content(self) -> Node:
        """Words of an element body, up to a keyword or the start of the next element."""
        node = Node.at(NodeType.CONTENT, self.current, '')
        while self.starts_content():
            token = self.current
            if token.kind is TokenKind.AMPERSAND:
                self.next_token()
                name = self.expect(TokenKind.IDENT)
                node.add(Node.at(NodeType.VAR_REF, name))
            elif token.kind is TokenKind.NUMBER:
                node.add(Node.at(NodeType.NUMBER, self.next_token()))
            else:
                node.add(Node.at(NodeType.IDENT, self.next_token()))
        return node

    def attr_list(self) -> Node:
        node = Node.at(NodeType.ATTR_LIST, self.current, '')
        self.expect(TokenKind.LPAREN)

        while self.current.kind is not TokenKind.RPAREN:
            if self.current.kind is TokenKind.EOF:
                raise self.mismatch(TokenKind.RPAREN)
            node.add(self.term())
            self.expect(TokenKind.COLON)
            node.add(self.term())

        self.expect(TokenKind.RPAREN)
        self.expect(TokenKind.ARROW)
        return node

    def expr(self) -> Node:
        """Op ( CmpOp Op | ':' Ident '=' Op )?"""
        left = self.op()
        token = self.current

        if token.kind in comparison_tokens:
            self.next_token()
            node = Node.at(comparison_tokens[token.kind], token, '')
            return node.add(left).add(self.op())

        if token.kind is TokenKind.COLON:
            if left.type is not NodeType.IDENT:
                raise ParseError.at("Expected an identifier before ':'", token)
            self.next_token()
            type_token = self.expect(TokenKind.IDENT)
            if type_token.value not in TYPE_NAMES:
                raise ParseError.at("Unknown type '%s', expected one of %s"
                                    % (type_token.value, ', '.join(TYPE_NAMES)), type_token)
            left.var_type = type_token.value
            self.expect(TokenKind.EQUALS)
            node = Node(NodeType.ASSIGN_EXPR, line=left.line, column=left.column)
            return node.add(left).add(self.op())

        return left

    def op(self) -> Node:
        node = self.term()
        while self.current.kind in arithmetic_tokens:
            token = self.next_token()
            parent = Node.at(arithmetic_tokens[token.kind], token, '')
            node = parent.add(node).add(self.term())
        return node

    def term(self) -> Node:
        token = self.current
        if token.kind is TokenKind.IDENT:
            # An identifier directly followed by '(' declares an element.
            if self.lexer.peek().kind is TokenKind.LPAREN:
                node_type = NodeType.ELEMENT_NAME
            else:
                node_type = NodeType.IDENT
            return Node.at(node_type, self.next_token())
        if token.kind is TokenKind.NUMBER:
            return Node.at(NodeType.NUMBER, self.next_token())
        if token.kind is TokenKind.MINUS and self.lexer.peek().kind is TokenKind.NUMBER:
            self.next_token()
            return Node.at(NodeType.NUMBER, token, '-' + self.next_token().value)
        if token.kind is TokenKind.EOF:
            return Node.at(NodeType.EOF, token, '')
        if token.kind is TokenKind.LPAREN:
            self.next_token()
            node = self.expr()
            self.expect(TokenKind.RPAREN)
            return node
        raise self.unexpected(token)

    def expect_ident_term(self, what: str) -> Node:
        node = self.term()
        if node.type is not NodeType.IDENT:
            raise ParseError("Expected an identifier as %s" % what, node.line, node.column)
        return node

    def expect(self, kind: TokenKind) -> Token:
        """Consumes the current token if it is of `kind`, fails otherwise."""
        if self.current.kind is not kind:
            raise self.mismatch(kind)
        return self.next_token()

    def next_token(self) -> Token:
        """Returns the current token and advances the lexer."""
        token = self.current
        self.lexer.lex()
        return token

    def mismatch(self, expected: TokenKind) -> ParseError:
        return ParseError.at("Expected %s, found %s" % (expected.name, self.current.describe()),
                             self.current)

    def unexpected(self, token: Token) -> ParseError:
        if token.kind is TokenKind.INVALID:
            return ParseError.at("Unexpected character '%s'" % token.value, token)
        return ParseError.at("Unexpected %s" % token.describe(), token)


def parse(source: str, symbol_table: Optional[SymbolTable] = None) -> Node:
    return Parser(source, symbol_table).parse()
