"""Wrapping of stack-modifying branches so that failures restore the stack."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping

from pestmeta.optimized import (
    Choice,
    Ident,
    OptimizedExpr,
    OptimizedRule,
    Opt,
    Push,
    Rep,
    RestoreOnErr,
)

_STACK_RULES = frozenset({"DROP", "POP"})


def restore_on_err(
    rule: OptimizedRule, rules: Mapping[str, OptimizedExpr]
) -> OptimizedRule:
    """Wrap branches of optionals, choices and repetitions that touch the stack.

    ``rules`` maps rule names to their expressions so that calls to other
    rules can be followed when deciding whether a branch modifies the stack.
    """
    expr = rule.expr.map_bottom_up(lambda expr: _wrap_branching_exprs(expr, rules))
    return dataclasses.replace(rule, expr=expr)


def _wrap_if_needed(
    expr: OptimizedExpr, rules: Mapping[str, OptimizedExpr]
) -> OptimizedExpr:
    if _child_modifies_state(expr, rules, {}):
        return RestoreOnErr(expr)
    return expr


def _wrap_branching_exprs(
    expr: OptimizedExpr, rules: Mapping[str, OptimizedExpr]
) -> OptimizedExpr:
    match expr:
        case Opt(inner):
            return Opt(_wrap_if_needed(inner, rules))
        case Choice(lhs, rhs, weights):
            return Choice(
                _wrap_if_needed(lhs, rules), _wrap_if_needed(rhs, rules), weights
            )
        case Rep(inner):
            return Rep(_wrap_if_needed(inner, rules))
    return expr


def _ident_modifies_state(
    name: str,
    rules: Mapping[str, OptimizedExpr],
    cache: dict[str, bool | None],
) -> bool:
    if name in cache:
        cached = cache[name]
        if cached is None:
            # The rule is being examined further up: treat the cycle as harmless.
            cache[name] = False
            return False
        return cached

    cache[name] = None
    target = rules.get(name)
    result = target is not None and _child_modifies_state(target, rules, cache)
    cache[name] = result
    return result


def _child_modifies_state(
    expr: OptimizedExpr,
    rules: Mapping[str, OptimizedExpr],
    cache: dict[str, bool | None],
) -> bool:
    for node in expr.iter_top_down():
        match node:
            case Push():
                return True
            case Ident(name) if name in _STACK_RULES:
                return True
            case Ident(name):
                if _ident_modifies_state(name, rules, cache):
                    return True
    return False