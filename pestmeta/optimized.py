"""Optimized grammar expressions produced by the optimizer."""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from typing import ClassVar

from pestmeta.ast import RuleType


class OptimizedExpr:
    """Base class of every optimized expression."""

    # Fields holding the sub-expressions that traversals descend into.
    _child_fields: ClassVar[tuple[str, ...]] = ()

    def children(self) -> tuple[OptimizedExpr, ...]:
        """Return the sub-expressions visited by traversals, left to right."""
        return tuple(getattr(self, name) for name in self._child_fields)

    def _map_children(
        self, fn: Callable[[OptimizedExpr], OptimizedExpr]
    ) -> OptimizedExpr:
        if not self._child_fields:
            return self
        mapped = {name: fn(getattr(self, name)) for name in self._child_fields}
        return dataclasses.replace(self, **mapped)

    def iter_top_down(self) -> Iterator[OptimizedExpr]:
        """Yield this expression and its descendants, parents first."""
        stack: list[OptimizedExpr] = [self]
        while stack:
            expr = stack.pop()
            yield expr
            stack.extend(reversed(expr.children()))

    def map_top_down(
        self, f: Callable[[OptimizedExpr], OptimizedExpr]
    ) -> OptimizedExpr:
        """Apply ``f`` to this expression, then to the children of its result."""
        expr = f(self)
        return expr._map_children(lambda child: child.map_top_down(f))

    def map_bottom_up(
        self, f: Callable[[OptimizedExpr], OptimizedExpr]
    ) -> OptimizedExpr:
        """Apply ``f`` to the children first, then to the rebuilt expression."""
        mapped = self._map_children(lambda child: child.map_bottom_up(f))
        return f(mapped)


@dataclass(frozen=True)
class Str(OptimizedExpr):
    """Matches an exact string."""

    value: str


@dataclass(frozen=True)
class Insens(OptimizedExpr):
    """Matches an exact string, ASCII case-insensitively."""

    value: str


@dataclass(frozen=True)
class Range(OptimizedExpr):
    """Matches one character in a range."""

    start: str
    end: str


@dataclass(frozen=True)
class Ident(OptimizedExpr):
    """Matches the rule with the given name."""

    name: str


@dataclass(frozen=True)
class PeekSlice(OptimizedExpr):
    """Matches a part of the stack."""

    start: int
    end: int | None = None


@dataclass(frozen=True)
class PosPred(OptimizedExpr):
    """Positive lookahead."""

    expr: OptimizedExpr
    _child_fields: ClassVar[tuple[str, ...]] = ("expr",)


@dataclass(frozen=True)
class NegPred(OptimizedExpr):
    """Negative lookahead."""

    expr: OptimizedExpr
    _child_fields: ClassVar[tuple[str, ...]] = ("expr",)


@dataclass(frozen=True)
class Seq(OptimizedExpr):
    """A sequence of two expressions."""

    lhs: OptimizedExpr
    rhs: OptimizedExpr
    _child_fields: ClassVar[tuple[str, ...]] = ("lhs", "rhs")


@dataclass(frozen=True)
class Choice(OptimizedExpr):
    """Either of two expressions, with branch weights."""

    lhs: OptimizedExpr
    rhs: OptimizedExpr
    weights: tuple[int, int] = (1, 1)
    _child_fields: ClassVar[tuple[str, ...]] = ("lhs", "rhs")


@dataclass(frozen=True)
class Opt(OptimizedExpr):
    """Optionally matches an expression."""

    expr: OptimizedExpr
    _child_fields: ClassVar[tuple[str, ...]] = ("expr",)


@dataclass(frozen=True)
class Rep(OptimizedExpr):
    """Matches an expression zero or more times."""

    expr: OptimizedExpr
    _child_fields: ClassVar[tuple[str, ...]] = ("expr",)


@dataclass(frozen=True)
class Skip(OptimizedExpr):
    """Consumes input until one of the strings is found."""

    strings: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "strings", tuple(self.strings))


@dataclass(frozen=True)
class Push(OptimizedExpr):
    """Matches an expression and pushes it to the stack."""

    expr: OptimizedExpr
    _child_fields: ClassVar[tuple[str, ...]] = ("expr",)


@dataclass(frozen=True)
class NodeTag(OptimizedExpr):
    """Matches an expression and labels it; traversals do not enter it."""

    expr: OptimizedExpr
    tag: str


@dataclass(frozen=True)
class RestoreOnErr(OptimizedExpr):
    """Restores the stack checkpoint if the expression fails."""

    expr: OptimizedExpr


@dataclass(frozen=True)
class Weight(OptimizedExpr):
    """Marks a weighted production."""


@dataclass(frozen=True)
class OptimizedRule:
    """A named rule with an optimized expression."""

    name: str
    ty: RuleType
    expr: OptimizedExpr


def to_rule_map(rules: Iterable[OptimizedRule]) -> dict[str, OptimizedExpr]:
    """Map each rule's name to its expression; later rules win on duplicates."""
    return {rule.name: rule.expr for rule in rules}