"""AST node variants.

Each variant is a standalone frozen dataclass. Consumers dispatch on the
concrete type and treat anything else as an internal error.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class NumberLiteral:
    value: int

    @property
    def node_type(self) -> str:
        return "Number"


@dataclass(frozen=True)
class Identifier:
    name: str

    @property
    def node_type(self) -> str:
        return "Identifier"


@dataclass(frozen=True)
class StringLiteral:
    text: str

    @property
    def node_type(self) -> str:
        return "String"


@dataclass(frozen=True)
class BinaryOp:
    left: "Expression"
    operator: str
    right: "Expression"

    @property
    def node_type(self) -> str:
        return "BinaryOp"


Expression = Union[NumberLiteral, Identifier, StringLiteral, BinaryOp]


@dataclass(frozen=True)
class Print:
    expressions: Tuple[Expression, ...]
    line: Optional[int] = field(default=None, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "expressions", tuple(self.expressions))

    @property
    def node_type(self) -> str:
        return "Print"


@dataclass(frozen=True)
class ConstDecl:
    name: str
    value: Expression
    line: Optional[int] = field(default=None, compare=False)

    @property
    def node_type(self) -> str:
        return "Const"


@dataclass(frozen=True)
class LetDecl:
    name: str
    value: Expression
    line: Optional[int] = field(default=None, compare=False)

    @property
    def node_type(self) -> str:
        return "Let"


@dataclass(frozen=True)
class If:
    condition: Expression
    then_block: Tuple["Statement", ...]
    else_block: Optional[Tuple["Statement", ...]] = None
    line: Optional[int] = field(default=None, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "then_block", tuple(self.then_block))
        if self.else_block is not None:
            object.__setattr__(self, "else_block", tuple(self.else_block))

    @property
    def node_type(self) -> str:
        return "If"


@dataclass(frozen=True)
class While:
    condition: Expression
    body: Tuple["Statement", ...]
    line: Optional[int] = field(default=None, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "body", tuple(self.body))

    @property
    def node_type(self) -> str:
        return "While"


@dataclass(frozen=True)
class For:
    init: "Statement"
    condition: Expression
    update: Expression
    body: Tuple["Statement", ...]
    line: Optional[int] = field(default=None, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "body", tuple(self.body))

    @property
    def node_type(self) -> str:
        return "For"


Statement = Union[Print, ConstDecl, LetDecl, If, While, For]

DECLARATIONS = (ConstDecl, LetDecl)


def child_blocks(stmt):
    """Statement lists nested directly under `stmt`."""
    if isinstance(stmt, If):
        return [stmt.then_block] + ([stmt.else_block] if stmt.else_block is not None else [])
    if isinstance(stmt, (While, For)):
        return [stmt.body]
    return []


__all__ = [
    "NumberLiteral",
    "Identifier",
    "StringLiteral",
    "BinaryOp",
    "Expression",
    "Print",
    "ConstDecl",
    "LetDecl",
    "If",
    "While",
    "For",
    "Statement",
    "DECLARATIONS",
    "child_blocks",
]
