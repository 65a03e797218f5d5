"""
Defines the abstract syntax tree (AST) node structure for the IMP language.

Classes:
    ASTNode:
        A node in the syntax tree. Arithmetic expressions, boolean expressions
        and commands all share this one class and are told apart by `kind`.

    ASTDict:
        TypedDict representation for serializing ASTNode instances to plain
        Python dictionaries, suitable for JSON output or debugging.

Node kinds:
    Arithmetic (AExp):
        "var"     value=variable index
        "num"     value=integer literal
        "plus", "minus", "mult"
                  children=[left, right]
    Boolean (BExp):
        "true", "false"
        "eq", "le"  children=[left AExp, right AExp]
        "not"       children=[operand]
        "and"       children=[left, right]
    Command (Com):
        "skip"
        "assign"  value=variable index, children=[AExp]
        "seq"     children=[first, second]
        "if"      value=condition, children=[then], else_children=[else]
        "while"   value=condition, children=[body]

The lowercase constructor functions at the bottom of this module build each
kind with the right shape, e.g. `assign(0, plus(num(1), mult(num(2), num(3))))`.
"""

from typing import Any, TypedDict, Union

NodeValue = Union[int, "ASTNode", None]


class ASTDict(TypedDict, total=False):
    """
    TypedDict representation of an ASTNode used for serialization.

    Fields:
        kind (str): The type of AST node (e.g., "assign", "plus", "while").
        value (Any): Variable index, literal, nested ASTDict (conditions) or None.
        children (List[ASTDict]): Primary child nodes in the AST hierarchy.
        else_children (List[ASTDict]): The else branch of an "if" node.
    """

    kind: str
    value: Any
    children: list["ASTDict"]
    else_children: list["ASTDict"]


class ASTNode:
    """
    Represents a node in the abstract syntax tree (AST) for the IMP language.

    Nodes are built once by the parser and never mutated afterwards; each node
    owns its children.

    Args:
        kind (str): The type of node (e.g., "num", "and", "if").
        value (int | ASTNode, optional): Scalar payload or condition node.
        children (list[ASTNode], optional): Primary child nodes.
        else_children (list[ASTNode], optional): Alternate branch nodes.

    Methods:
        __repr__(): Returns a structured string representation for debugging.
        __eq__(other): Checks structural equality with another ASTNode.
        to_dict(): Converts the node (and all descendants) into a nested dictionary format.
    """

    def __init__(
        self,
        kind: str,
        value: NodeValue = None,
        children: list["ASTNode"] | None = None,
        else_children: list["ASTNode"] | None = None,
    ):
        self.kind = kind
        self.value = value
        self.children: list["ASTNode"] = children or []
        self.else_children: list["ASTNode"] = else_children or []

    def __repr__(self) -> str:
        parts = [f"{self.kind}"]
        if self.value is not None:
            parts.append(f"value={repr(self.value)}")
        if self.children:
            parts.append(f"children=[{', '.join(repr(c) for c in self.children)}]")
        if self.else_children:
            preview = ", ".join(repr(c) for c in self.else_children)
            parts.append(f"else_children=[{preview}]")
        return f"ASTNode({', '.join(parts)})"

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, ASTNode):
            return False
        return (
            self.kind == other.kind
            and self.value == other.value
            and self.children == other.children
            and self.else_children == other.else_children
        )

    def to_dict(self) -> ASTDict:
        val: Any = self.value
        if isinstance(val, ASTNode):
            val = val.to_dict()

        return {
            "kind": self.kind,
            "value": val,
            "children": [c.to_dict() for c in self.children],
            "else_children": [c.to_dict() for c in self.else_children],
        }


# Arithmetic expressions


def var(index: int) -> ASTNode:
    return ASTNode("var", index)


def num(n: int) -> ASTNode:
    return ASTNode("num", n)


def plus(left: ASTNode, right: ASTNode) -> ASTNode:
    return ASTNode("plus", children=[left, right])


def minus(left: ASTNode, right: ASTNode) -> ASTNode:
    return ASTNode("minus", children=[left, right])


def mult(left: ASTNode, right: ASTNode) -> ASTNode:
    return ASTNode("mult", children=[left, right])


# Boolean expressions


def btrue() -> ASTNode:
    return ASTNode("true")


def bfalse() -> ASTNode:
    return ASTNode("false")


def eq(left: ASTNode, right: ASTNode) -> ASTNode:
    return ASTNode("eq", children=[left, right])


def le(left: ASTNode, right: ASTNode) -> ASTNode:
    return ASTNode("le", children=[left, right])


def bnot(operand: ASTNode) -> ASTNode:
    return ASTNode("not", children=[operand])


def band(left: ASTNode, right: ASTNode) -> ASTNode:
    return ASTNode("and", children=[left, right])


# Commands


def skip() -> ASTNode:
    return ASTNode("skip")


def assign(index: int, expr: ASTNode) -> ASTNode:
    return ASTNode("assign", index, [expr])


def seq(first: ASTNode, second: ASTNode) -> ASTNode:
    return ASTNode("seq", children=[first, second])


def if_(cond: ASTNode, then: ASTNode, otherwise: ASTNode) -> ASTNode:
    return ASTNode("if", cond, [then], [otherwise])


def while_(cond: ASTNode, body: ASTNode) -> ASTNode:
    return ASTNode("while", cond, [body])
