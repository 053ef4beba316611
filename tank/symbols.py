from dataclasses import dataclass
from typing import Dict, Iterator, Mapping, Optional

from .exceptions import SymbolError
from .nodes import Node, NodeType
from .tokens import BOOL, INT, STRING, TYPE_NAMES

GLOBAL_SCOPE = 'global'
FOR_SCOPE = 'for'

BOOL_VALUES = ('true', 'false')


@dataclass
class Symbol:
    name: str
    var_type: str
    value: str
    scope: str = GLOBAL_SCOPE


class SymbolTable:
    """
    Maps variable names to their declared type and value for one compilation.

    Declarations come from `let` (global scope), from config seeding (global,
    typed as strings) and from for-loops (loop scope, released when the loop
    ends). A name is never declared twice while it is bound.
    """

    def __init__(self):
        self._table: Dict[str, Symbol] = {}
        self._shadowed: Dict[str, Symbol] = {}

    @classmethod
    def from_mapping(cls, variables: Optional[Mapping[str, str]]) -> 'SymbolTable':
        table = cls()
        if variables:
            table.seed(variables)
        return table

    def seed(self, variables: Mapping[str, str]):
        """Declares every key of `variables` as a global string."""
        for name, value in variables.items():
            self._declare(Symbol(name, STRING, str(value), GLOBAL_SCOPE))

    def insert(self, node: Node) -> Symbol:
        """
        Declares the target of an AssignExpr.

        The first child is the identifier carrying the declared type, the
        second the value term.
        """
        if node.type is not NodeType.ASSIGN_EXPR:
            raise SymbolError(f"Invalid ast type {node.type.value} found in symbol table")
        if len(node.children) != 2:
            raise SymbolError("Invalid declaration passed to symbol table")

        target, value = node.children
        if not target.var_type:
            raise SymbolError(f"Variable {target.value} declared without a type")
        if target.value in self._table:
            raise SymbolError(f"Redeclared symbol {target.value} found")
        if target.var_type not in TYPE_NAMES:
            raise SymbolError(f"Unknown type {target.var_type} for variable {target.value}")
        if value.type not in (NodeType.IDENT, NodeType.NUMBER):
            raise SymbolError(f"Unsupported value for variable {target.value}, "
                              f"expected a number or a word")

        if target.var_type == INT and value.type is not NodeType.NUMBER:
            raise SymbolError(f"Expected an integer value for {target.value}, found '{value.value}'")
        if target.var_type == BOOL and value.value not in BOOL_VALUES:
            raise SymbolError(f"Expected true or false for {target.value}, found '{value.value}'")

        return self._declare(Symbol(target.value, target.var_type, value.value, GLOBAL_SCOPE))

    def insert_for_binding(self, node: Node, value: str, var_type: str = STRING,
                           shadow: bool = False) -> Symbol:
        """
        Binds a for-loop variable, tagged with loop scope.

        With `shadow`, a global of the same name is hidden until the loop is
        released instead of being reported as a redeclaration.
        """
        if node.type is not NodeType.IDENT:
            raise SymbolError(f"Invalid ast type {node.type.value} found for loop variable")
        existing = self._table.get(node.value)
        if shadow and existing is not None and existing.scope == GLOBAL_SCOPE:
            self._shadowed[node.value] = self._table.pop(node.value)
        return self._declare(Symbol(node.value, var_type, value, FOR_SCOPE))

    def release(self, name: str):
        """Unbinds a loop variable once its loop has ended. Globals are kept."""
        symbol = self._table.get(name)
        if symbol is not None and symbol.scope == FOR_SCOPE:
            del self._table[name]
            if name in self._shadowed:
                self._table[name] = self._shadowed.pop(name)

    def get(self, name: str) -> Optional[Symbol]:
        return self._table.get(name)

    def _declare(self, symbol: Symbol) -> Symbol:
        if symbol.name in self._table:
            raise SymbolError(f"Redeclared symbol {symbol.name} found")
        self._table[symbol.name] = symbol
        return symbol

    def __contains__(self, name: str) -> bool:
        return name in self._table

    def __len__(self) -> int:
        return len(self._table)

    def __iter__(self) -> Iterator[Symbol]:
        return iter(list(self._table.values()))
