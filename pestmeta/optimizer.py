"""The optimization pipeline turning AST rules into optimized rules."""

from __future__ import annotations

from collections.abc import Iterable

from pestmeta import ast
from pestmeta import optimized as opt
from pestmeta.optimized import OptimizedExpr, OptimizedRule, to_rule_map
from pestmeta.passes import concatenate, factor, listify, rotate, skip, unroll
from pestmeta.restorer import restore_on_err

_PASSES = (rotate, skip, unroll, concatenate, factor, listify)


def optimize(rules: Iterable[ast.Rule]) -> list[OptimizedRule]:
    """Run every optimization pass over ``rules`` and return the optimized rules."""
    optimized: list[OptimizedRule] = []
    for rule in rules:
        for rewrite in _PASSES:
            rule = rewrite(rule)
        optimized.append(to_optimized_rule(rule))

    rule_map = to_rule_map(optimized)
    return [restore_on_err(rule, rule_map) for rule in optimized]


def _to_optimized(expr: ast.Expr) -> OptimizedExpr:
    match expr:
        case ast.Str(value):
            return opt.Str(value)
        case ast.Insens(value):
            return opt.Insens(value)
        case ast.Range(start, end):
            return opt.Range(start, end)
        case ast.Ident(name):
            return opt.Ident(name)
        case ast.PeekSlice(start, end):
            return opt.PeekSlice(start, end)
        case ast.PosPred(inner):
            return opt.PosPred(_to_optimized(inner))
        case ast.NegPred(inner):
            return opt.NegPred(_to_optimized(inner))
        case ast.Seq(lhs, rhs):
            return opt.Seq(_to_optimized(lhs), _to_optimized(rhs))
        case ast.Choice(lhs, rhs, weights):
            return opt.Choice(_to_optimized(lhs), _to_optimized(rhs), weights)
        case ast.Opt(inner):
            return opt.Opt(_to_optimized(inner))
        case ast.Rep(inner):
            return opt.Rep(_to_optimized(inner))
        case ast.Skip(strings):
            return opt.Skip(strings)
        case ast.Push(inner):
            return opt.Push(_to_optimized(inner))
        case ast.NodeTag(inner, tag):
            return opt.NodeTag(_to_optimized(inner), tag)
        case ast.Weight():
            return opt.Weight()
        case ast.RepOnce() | ast.RepExact() | ast.RepMin() | ast.RepMax() | ast.RepMinMax():
            raise ValueError(
                f"repetition must be unrolled before optimization: {expr!r}"
            )
    raise TypeError(f"unsupported expression: {expr!r}")


def to_optimized_rule(rule: ast.Rule) -> OptimizedRule:
    """Convert an AST rule whose repetitions are already unrolled.

    Raises ValueError if a bounded or one-or-more repetition remains.
    """
    return OptimizedRule(name=rule.name, ty=rule.ty, expr=_to_optimized(rule.expr))