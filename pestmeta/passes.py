"""Rewriting passes applied to grammar rules before code generation."""

from __future__ import annotations

import dataclasses
from collections.abc import Sequence
from functools import reduce

from pestmeta.ast import (
    Choice,
    Expr,
    Ident,
    Insens,
    NegPred,
    Opt,
    Rep,
    RepExact,
    RepMax,
    RepMin,
    RepMinMax,
    RepOnce,
    Rule,
    RuleType,
    Seq,
    Skip,
    Str,
)


def _with_expr(rule: Rule, expr: Expr) -> Rule:
    return dataclasses.replace(rule, expr=expr)


def _right_fold(items: Sequence[Expr]) -> Expr:
    """Chain expressions into right-leaning sequences: ``a ~ (b ~ c)``."""
    if not items:
        raise ValueError("cannot build a sequence of zero expressions")
    return reduce(lambda rest, item: Seq(item, rest), reversed(items[:-1]), items[-1])


def _rotate_expr(expr: Expr) -> Expr:
    match expr:
        case Seq(Seq(ll, lr), rhs):
            return _rotate_expr(Seq(ll, Seq(lr, rhs)))
        case Choice(Choice(ll, lr, (wll, wlr)), rhs, (wlhs, wrhs)):
            changed = wrhs * (wll + wlr) // (wlhs + wrhs)
            return _rotate_expr(
                Choice(ll, Choice(lr, rhs, (wlr, changed)), (wll, wlr + changed))
            )
    return expr


def rotate(rule: Rule) -> Rule:
    """Make sequences and choices right-associative, rebalancing choice weights."""
    return _with_expr(rule, rule.expr.map_top_down(_rotate_expr))


def _skip_choices(expr: Expr) -> Skip | None:
    choices: list[str] = []
    while True:
        match expr:
            case Choice(Str(value), rhs):
                choices.append(value)
                expr = rhs
            case Str(value):
                choices.append(value)
                return Skip(tuple(choices))
            case _:
                return None


def _skip_expr(expr: Expr) -> Expr:
    match expr:
        case Rep(Seq(NegPred(inner), Ident("ANY"))):
            skipped = _skip_choices(inner)
            if skipped is not None:
                return skipped
    return expr


def skip(rule: Rule) -> Rule:
    """In atomic rules, turn ``(!("a" | "b") ~ ANY)*`` into a skip over strings."""
    if rule.ty is not RuleType.ATOMIC:
        return rule
    return _with_expr(rule, rule.expr.map_top_down(_skip_expr))


def _unroll_expr(expr: Expr) -> Expr:
    match expr:
        case RepOnce(inner):
            return Seq(inner, Rep(inner))
        case RepExact(inner, count):
            return _right_fold([inner] * count)
        case RepMin(inner, minimum):
            return _right_fold([inner] * minimum + [Rep(inner)])
        case RepMax(inner, maximum):
            return _right_fold([Opt(inner)] * maximum)
        case RepMinMax(inner, minimum, maximum):
            return _right_fold(
                [inner if i <= minimum else Opt(inner) for i in range(1, maximum + 1)]
            )
    return expr


def unroll(rule: Rule) -> Rule:
    """Expand bounded repetitions into sequences of plain, optional and repeated parts.

    Raises ValueError when a repetition would expand to nothing.
    """
    return _with_expr(rule, rule.expr.map_bottom_up(_unroll_expr))


def _concatenate_expr(expr: Expr) -> Expr:
    match expr:
        case Seq(Str(lhs), Str(rhs)):
            return Str(lhs + rhs)
        case Seq(Insens(lhs), Insens(rhs)):
            return Insens(lhs + rhs)
    return expr


def concatenate(rule: Rule) -> Rule:
    """In atomic rules, merge adjacent literal strings of the same kind."""
    if rule.ty is not RuleType.ATOMIC:
        return rule
    return _with_expr(rule, rule.expr.map_bottom_up(_concatenate_expr))


def factor(rule: Rule) -> Rule:
    """Pull common prefixes out of choices and drop branches that can never match."""
    atomic = rule.ty in (RuleType.ATOMIC, RuleType.COMPOUND_ATOMIC)

    def factor_expr(expr: Expr) -> Expr:
        match expr:
            case Choice(Seq(l1, r1), Seq(l2, r2), weights):
                if l1 == l2:
                    return Seq(l1, Choice(r1, r2, weights))
            case Choice(Seq(l1, l2), rhs) if atomic:
                # Implicit whitespace makes this unsafe outside atomic rules.
                if l1 == rhs:
                    return Seq(l1, Opt(l2))
            case Choice(lhs, Seq(r1, _)):
                # `rule ~ rest` never matches where `rule` alone did not.
                if lhs == r1:
                    return lhs
        return expr

    return _with_expr(rule, rule.expr.map_top_down(factor_expr))


def _list_expr(expr: Expr) -> Expr:
    match expr:
        case Seq(Rep(Seq(l1, l2)), rhs) if l1 == rhs:
            return Seq(l1, Rep(Seq(l2, rhs)))
    return expr


def listify(rule: Rule) -> Rule:
    """Turn ``(rule ~ rest)* ~ rule`` into ``rule ~ (rest ~ rule)*``."""
    return _with_expr(rule, rule.expr.map_bottom_up(_list_expr))