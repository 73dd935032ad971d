"""Conversion of span-carrying parser nodes into the plain AST."""

from __future__ import annotations

from pestmeta import ast
from pestmeta import nodes
from pestmeta.nodes import ParserNode, ParserRule


def convert_rule(rule: ParserRule) -> ast.Rule:
    """Convert a parsed rule into an AST rule, dropping its span."""
    return ast.Rule(name=rule.name, ty=rule.ty, expr=convert_node(rule.node))


def _weight_or_default(node: ParserNode) -> int:
    weight = node.find_weight()
    return 1 if weight is None else weight


def convert_node(node: ParserNode) -> ast.Expr:
    """Convert a parser node and all its children into an AST expression.

    Choices receive their branch weights from ``find_weight`` on each branch,
    defaulting to 1; a sequence carrying more than one weight raises ValueError.
    """
    match node.expr:
        case nodes.Str(value):
            return ast.Str(value)
        case nodes.Insens(value):
            return ast.Insens(value)
        case nodes.Range(start, end):
            return ast.Range(start, end)
        case nodes.Ident(name):
            return ast.Ident(name)
        case nodes.PeekSlice(start, end):
            return ast.PeekSlice(start, end)
        case nodes.PosPred(inner):
            return ast.PosPred(convert_node(inner))
        case nodes.NegPred(inner):
            return ast.NegPred(convert_node(inner))
        case nodes.Seq(lhs, rhs):
            return ast.Seq(convert_node(lhs), convert_node(rhs))
        case nodes.Choice(lhs, rhs):
            weights = (_weight_or_default(lhs), _weight_or_default(rhs))
            return ast.Choice(convert_node(lhs), convert_node(rhs), weights)
        case nodes.Opt(inner):
            return ast.Opt(convert_node(inner))
        case nodes.Rep(inner):
            return ast.Rep(convert_node(inner))
        case nodes.RepOnce(inner):
            return ast.RepOnce(convert_node(inner))
        case nodes.RepExact(inner, count):
            return ast.RepExact(convert_node(inner), count)
        case nodes.RepMin(inner, minimum):
            return ast.RepMin(convert_node(inner), minimum)
        case nodes.RepMax(inner, maximum):
            return ast.RepMax(convert_node(inner), maximum)
        case nodes.RepMinMax(inner, minimum, maximum):
            return ast.RepMinMax(convert_node(inner), minimum, maximum)
        case nodes.Push(inner):
            return ast.Push(convert_node(inner))
        case nodes.NodeTag(inner, tag):
            return ast.NodeTag(convert_node(inner), tag)
        case nodes.Weight():
            return ast.Weight()
    raise TypeError(f"unsupported parser expression: {node.expr!r}")