import re
from typing import Tuple

from .exceptions import EvalError
from .nodes import COMPARISONS, Node, NodeType
from .symbols import SymbolTable

integer_re = re.compile(r'[+-]?[0-9]+')


class Evaluator:
    """
    Evaluates the comparison of an if expression to a boolean.

    The left operand names a variable whose value is read as an integer, the
    right operand is an integer literal taken as written. Anything else is an
    error rather than a false result.
    """

    def __init__(self, symbol_table: SymbolTable):
        self.symbol_table = symbol_table
        self._predicates = {
            NodeType.GT: self.gt,
            NodeType.GT_EQUALS: self.gt_equals,
            NodeType.LT: self.lt,
            NodeType.LT_EQUALS: self.lt_equals,
            NodeType.EQUALS_EQUALS: self.equals_equals,
            NodeType.NOT_EQUALS: self.not_equals,
        }

    def evaluate(self, node: Node) -> bool:
        if node.type not in COMPARISONS:
            raise EvalError(f"Invalid comparison {node.type.value} found in if expression")
        return self._predicates[node.type](node)

    def gt(self, node: Node) -> bool:
        left, right = self._operands(node)
        return left > right

    def gt_equals(self, node: Node) -> bool:
        left, right = self._operands(node)
        return left >= right

    def lt(self, node: Node) -> bool:
        left, right = self._operands(node)
        return left < right

    def lt_equals(self, node: Node) -> bool:
        left, right = self._operands(node)
        return left <= right

    def equals_equals(self, node: Node) -> bool:
        left, right = self._operands(node)
        return left == right

    def not_equals(self, node: Node) -> bool:
        left, right = self._operands(node)
        return left != right

    def _operands(self, node: Node) -> Tuple[int, int]:
        if len(node.children) < 2:
            raise EvalError("Invalid expression ast found, not enough children")

        first, second = node.children[0], node.children[1]
        if first.type is not NodeType.IDENT:
            raise EvalError(f"Expected a variable on the left of the comparison, "
                            f"found {first.type.value}")

        symbol = self.symbol_table.get(first.value)
        if symbol is None:
            raise EvalError(f"Invalid expression found, could not find identifier {first.value}")

        # the right side is a literal, never looked up
        return to_int(symbol.value), to_int(second.value)


def to_int(text: str) -> int:
    if not integer_re.fullmatch(text.strip()):
        raise EvalError(f"Expected an integer, found '{text}'")
    return int(text)
