import copy
from enum import Enum
from typing import List, Optional, Tuple


class NodeType(Enum):
    TEMPLATE = 'Template'
    ELEMENT = 'Element'
    IDENT = 'Ident'
    ELEMENT_NAME = 'ElementName'
    NUMBER = 'Number'
    VAR_REF = 'VarRef'
    CONTENT = 'Content'
    INCLUDE = 'Include'
    ATTR_LIST = 'AttrList'
    IF_EXPR = 'IfExpr'
    FOR_EXPR = 'ForExpr'
    ASSIGN_EXPR = 'AssignExpr'
    PLUS = 'Plus'
    MINUS = 'Minus'
    EQUALS_EQUALS = 'EqualsEquals'
    NOT_EQUALS = 'NotEquals'
    GT = 'Gt'
    GT_EQUALS = 'GtEquals'
    LT = 'Lt'
    LT_EQUALS = 'LtEquals'
    EMPTY = 'Empty'
    EOF = 'Eof'


COMPARISONS = frozenset([
    NodeType.EQUALS_EQUALS,
    NodeType.NOT_EQUALS,
    NodeType.GT,
    NodeType.GT_EQUALS,
    NodeType.LT,
    NodeType.LT_EQUALS,
])


class Node:
    """
    A node of the template tree.

    `value` holds the literal text of identifiers, numbers and element names,
    `var_type` the declared type of a `let` target. The number and order of
    children is fixed per type, e.g. a markup Element always holds
    (name, attribute list, body) and an AssignExpr (target, value).
    """

    def __init__(self, type: NodeType, value: str = '', var_type: Optional[str] = None,
                 children: Optional[List['Node']] = None, line: int = 0, column: int = 0):
        self.type = type
        self.value = value
        self.var_type = var_type
        self.children: List[Node] = list(children) if children else []
        self.line = line
        self.column = column

    @classmethod
    def at(cls, type: NodeType, token, value: Optional[str] = None) -> 'Node':
        """Creates a node positioned at `token`, taking its text unless `value` is given."""
        return cls(type, token.value if value is None else value,
                   line=token.line, column=token.column)

    def add(self, child: 'Node') -> 'Node':
        self.children.append(child)
        return self

    def clone(self) -> 'Node':
        return copy.deepcopy(self)

    def shape(self) -> Tuple:
        """The (type, children shapes) structure of the subtree, ignoring values."""
        return (self.type, tuple(child.shape() for child in self.children))

    def __repr__(self):
        if self.var_type:
            head = f'{self.type.value}({self.value!r}: {self.var_type})'
        elif self.value:
            head = f'{self.type.value}({self.value!r})'
        else:
            head = self.type.value
        if not self.children:
            return head
        return '%s[%s]' % (head, ', '.join(repr(child) for child in self.children))
