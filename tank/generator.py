import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, FrozenSet, List, Optional

from .diagnostics import Diagnostics
from .emitter import Emitter
from .evaluator import Evaluator
from .exceptions import GenError, IncludeError, TankError
from .nodes import Node, NodeType
from .symbols import SymbolTable

logger = logging.getLogger(__name__)

HTML_EXT = '.html'
TANK_EXT = '.tank'
INDENTATION_COUNT = 2

CONTENT_WORDS = (NodeType.IDENT, NodeType.NUMBER, NodeType.VAR_REF)


@dataclass
class Scope:
    indentation: int
    name: str


class Generator:
    """
    Walks a Template tree and writes html through an Emitter.

    Open elements are kept on `el_stack` together with their indentation.
    When the content of the innermost element is reached every open element
    is closed in reverse order, so each top-level item leaves the stack empty.

    Includes are resolved next to the including template: a `<name>.html`
    file is inlined as is, otherwise `<name>.tank` is compiled through
    `compile_include` first. `including` holds the templates currently being
    compiled up the call stack and is used to reject circular includes.
    """

    def __init__(self, symbol_table: SymbolTable, emitter: Optional[Emitter] = None,
                 diagnostics: Optional[Diagnostics] = None, directory='.',
                 including: FrozenSet[Path] = frozenset(),
                 compile_include: Optional[Callable[[Path], str]] = None):
        self.symbol_table = symbol_table
        self.emitter = emitter if emitter is not None else Emitter()
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.eval = Evaluator(symbol_table)
        self.el_stack: List[Scope] = []
        self.directory = Path(directory)
        self.including = including
        self.compile_include = compile_include

    def output(self, template: Node) -> str:
        """
        Generates html for a whole template and returns it.

        Errors inside one top-level item are recorded and generation moves on
        to the next item; a CompileError is raised at the end if any occurred.
        """
        if template.type is not NodeType.TEMPLATE:
            raise GenError(f"Invalid ast provided to generator. Found {template.type.value}, "
                           f"expected {NodeType.TEMPLATE.value}")
        if not template.children:
            raise GenError("Empty ast found, nothing to generate.")

        for node in template.children:
            # Top-level items never nest across each other.
            self.el_stack.clear()
            try:
                self.expr_or_element(node)
            except TankError as e:
                self.diagnostics.record(e)

        self.diagnostics.check()
        return self.emitter.getvalue()

    def expr_or_element(self, node: Node):
        if node.type is NodeType.ELEMENT:
            self.gen_element(node)
        elif node.type is NodeType.IF_EXPR:
            self.gen_if(node)
        elif node.type is NodeType.FOR_EXPR:
            self.gen_for(node)
        elif node.type is NodeType.INCLUDE:
            self.gen_include(node)
        else:
            self.gen_empty(node)

    def gen_element(self, node: Node):
        if node.type is not NodeType.ELEMENT:
            raise GenError(f"Invalid ast provided to generator. Found {node.type.value}, "
                           f"expected {NodeType.ELEMENT.value}")
        if not node.children:
            raise GenError("Invalid element found, no children present in ast")

        # Nothing to write for a declaration, its value is in the symbol table.
        if node.children[0].type is NodeType.ASSIGN_EXPR:
            return

        if len(node.children) != 3:
            raise GenError(f"Invalid Element ast found, expected 3 children, "
                           f"found {len(node.children)}")

        name, attributes, body = node.children
        self.gen_el_name(name)
        self.gen_attr_list(attributes)

        if body.type is NodeType.ELEMENT:
            self.gen_element(body)
        elif body.type is NodeType.CONTENT or body.type in CONTENT_WORDS:
            self.gen_el_contents(body)
        elif body.type is NodeType.INCLUDE:
            self.gen_include(body)
            self.close_scopes()
        elif body.type is NodeType.EOF:
            self.close_scopes()
        else:
            raise GenError(f"Unexpected ast type {body.type.value} found in element {name.value}")

    def gen_if(self, node: Node):
        # children: the comparison, then the elements of the block
        if len(node.children) < 2:
            raise GenError("Invalid ast found, missing condition or body in if expression")

        condition = node.children[0]
        if len(condition.children) < 2:
            raise GenError("Invalid expression ast found, not enough children in if expression")

        if self.eval.evaluate(condition):
            for child in node.children[1:]:
                self.expr_or_element(child)

    def gen_for(self, node: Node):
        if len(node.children) < 2:
            raise GenError("Invalid ast found, not enough children found in for expression")

        var, source = node.children[0], node.children[1]
        symbol = self.symbol_table.get(source.value)
        if symbol is None:
            raise GenError(f"Variable {source.value} is undefined.")

        if len(node.children) < 3:
            return

        # The body is generated once, with the loop variable bound to the
        # value of the source.
        self.symbol_table.insert_for_binding(var, symbol.value, symbol.var_type, shadow=True)
        try:
            self.expr_or_element(node.children[2])
        finally:
            self.symbol_table.release(var.value)

    def gen_include(self, node: Node):
        name = node.value
        html_path = self.directory / (name + HTML_EXT)
        tank_path = self.directory / (name + TANK_EXT)

        if tank_path.resolve() in self.including:
            raise IncludeError(f"Circular include of {tank_path}")

        if html_path.is_file():
            logger.debug("Inlining %s", html_path)
            try:
                self.emitter.emit(html_path.read_text(encoding="utf-8"))
            except (OSError, UnicodeDecodeError) as e:
                raise IncludeError(f"Unable to read file {html_path}: {e}") from e
        elif tank_path.is_file():
            if self.compile_include is None:
                raise IncludeError(f"Unable to compile included template {tank_path}")
            logger.debug("Compiling included template %s", tank_path)
            try:
                self.emitter.emit(self.compile_include(tank_path))
            except (OSError, UnicodeDecodeError) as e:
                raise IncludeError(f"Unable to open file {tank_path}: {e}") from e
        else:
            raise IncludeError(f"Unable to open file {tank_path}")

    def gen_el_name(self, node: Node):
        if node.type not in (NodeType.ELEMENT_NAME, NodeType.IDENT):
            raise GenError(f"Invalid element name, found {node.type.value}")

        indentation = len(self.el_stack) * INDENTATION_COUNT
        self.el_stack.append(Scope(indentation, node.value))

        self.emitter.space(indentation)
        self.emitter.left_angle_bracket()
        self.emitter.emit(node.value)

    def gen_attr_list(self, node: Node):
        """Writes `key="value"` pairs separated by single spaces, then the closing `>`."""
        if node.type is not NodeType.ATTR_LIST:
            raise GenError(f"Invalid ast type {node.type.value} found, expected "
                           f"{NodeType.ATTR_LIST.value}")

        attributes = node.children
        if len(attributes) % 2:
            raise GenError("Invalid attribute list found, attributes must come in key: value pairs")

        pairs = []
        for key, value in zip(attributes[::2], attributes[1::2]):
            for attr in (key, value):
                if attr.type is not NodeType.IDENT:
                    raise GenError(f"Wrong ast type found in attribute list, expected "
                                   f"{NodeType.IDENT.value}, found {attr.type.value}")
            pairs.append((key.value, value.value))

        for key, value in pairs:
            self.emitter.space(1)
            self.emitter.emit(key)
            self.emitter.equals()
            self.emitter.string(value)

        self.emitter.right_angle_bracket()
        self.emitter.newline()

    def gen_el_contents(self, node: Node):
        words = node.children if node.type is NodeType.CONTENT else [node]

        self.emitter.space(len(self.el_stack) * INDENTATION_COUNT)
        self.emitter.emit(' '.join(self._content_word(word) for word in words))
        self.emitter.newline()

        self.close_scopes()

    def _content_word(self, node: Node) -> str:
        if node.type is NodeType.VAR_REF:
            symbol = self.symbol_table.get(node.value)
            if symbol is None:
                # reported, but the rest of the content is still written
                self.diagnostics.error(f"Undefined variable {node.value}")
                return ''
            return symbol.value
        if node.type in (NodeType.IDENT, NodeType.NUMBER):
            return node.value
        raise GenError(f"Unexpected ast type {node.type.value} found in element content")

    def close_scopes(self):
        """Closes every open element, innermost first."""
        for scope in reversed(self.el_stack):
            self.emitter.space(scope.indentation)
            self.emitter.close_element(scope.name)
        self.el_stack.clear()

    def gen_empty(self, node: Node):
        if node.type not in (NodeType.EOF, NodeType.EMPTY):
            raise GenError(f"Unexpected ast type {node.type.value} found")
