"""Abstract syntax tree for grammar rules."""

from __future__ import annotations

import dataclasses
import enum
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import ClassVar


class RuleType(enum.Enum):
    """How a rule behaves when it is run."""

    NORMAL = "normal"
    SILENT = "silent"
    ATOMIC = "atomic"
    COMPOUND_ATOMIC = "compound_atomic"
    NON_ATOMIC = "non_atomic"


class Expr:
    """Base class of every rule expression."""

    _child_fields: ClassVar[tuple[str, ...]] = ()

    def children(self) -> tuple[Expr, ...]:
        """Return the direct sub-expressions, left to right."""
        return tuple(getattr(self, name) for name in self._child_fields)

    def _map_children(self, fn: Callable[[Expr], Expr]) -> Expr:
        if not self._child_fields:
            return self
        mapped = {name: fn(getattr(self, name)) for name in self._child_fields}
        return dataclasses.replace(self, **mapped)

    def iter_top_down(self) -> Iterator[Expr]:
        """Yield this expression and all its descendants, parents first."""
        stack: list[Expr] = [self]
        while stack:
            expr = stack.pop()
            yield expr
            stack.extend(reversed(expr.children()))

    def map_top_down(self, f: Callable[[Expr], Expr]) -> Expr:
        """Apply ``f`` to this expression, then to the children of its result."""
        expr = f(self)
        return expr._map_children(lambda child: child.map_top_down(f))

    def map_bottom_up(self, f: Callable[[Expr], Expr]) -> Expr:
        """Apply ``f`` to the children first, then to the rebuilt expression."""
        mapped = self._map_children(lambda child: child.map_bottom_up(f))
        return f(mapped)


@dataclass(frozen=True)
class Str(Expr):
    """Matches an exact string, e.g. ``"a"``."""

    value: str


@dataclass(frozen=True)
class Insens(Expr):
    """Matches an exact string, ASCII case-insensitively, e.g. ``^"a"``."""

    value: str


@dataclass(frozen=True)
class Range(Expr):
    """Matches one character in a range, e.g. ``'a'..'z'``."""

    start: str
    end: str


@dataclass(frozen=True)
class Ident(Expr):
    """Matches the rule with the given name."""

    name: str


@dataclass(frozen=True)
class PeekSlice(Expr):
    """Matches a part of the stack, e.g. ``PEEK[..]``."""

    start: int
    end: int | None = None


@dataclass(frozen=True)
class PosPred(Expr):
    """Positive lookahead, e.g. ``&e``."""

    expr: Expr
    _child_fields: ClassVar[tuple[str, ...]] = ("expr",)


@dataclass(frozen=True)
class NegPred(Expr):
    """Negative lookahead, e.g. ``!e``."""

    expr: Expr
    _child_fields: ClassVar[tuple[str, ...]] = ("expr",)


@dataclass(frozen=True)
class Seq(Expr):
    """A sequence of two expressions, e.g. ``e1 ~ e2``."""

    lhs: Expr
    rhs: Expr
    _child_fields: ClassVar[tuple[str, ...]] = ("lhs", "rhs")


@dataclass(frozen=True)
class Choice(Expr):
    """Either of two expressions, e.g. ``e1 | e2``, with branch weights."""

    lhs: Expr
    rhs: Expr
    weights: tuple[int, int] = (1, 1)
    _child_fields: ClassVar[tuple[str, ...]] = ("lhs", "rhs")


@dataclass(frozen=True)
class Opt(Expr):
    """Optionally matches an expression, e.g. ``e?``."""

    expr: Expr
    _child_fields: ClassVar[tuple[str, ...]] = ("expr",)


@dataclass(frozen=True)
class Rep(Expr):
    """Matches an expression zero or more times, e.g. ``e*``."""

    expr: Expr
    _child_fields: ClassVar[tuple[str, ...]] = ("expr",)


@dataclass(frozen=True)
class RepOnce(Expr):
    """Matches an expression one or more times, e.g. ``e+``."""

    expr: Expr
    _child_fields: ClassVar[tuple[str, ...]] = ("expr",)


@dataclass(frozen=True)
class RepExact(Expr):
    """Matches an expression an exact number of times, e.g. ``e{n}``."""

    expr: Expr
    count: int
    _child_fields: ClassVar[tuple[str, ...]] = ("expr",)


@dataclass(frozen=True)
class RepMin(Expr):
    """Matches an expression at least a number of times, e.g. ``e{n,}``."""

    expr: Expr
    min: int
    _child_fields: ClassVar[tuple[str, ...]] = ("expr",)


@dataclass(frozen=True)
class RepMax(Expr):
    """Matches an expression at most a number of times, e.g. ``e{,n}``."""

    expr: Expr
    max: int
    _child_fields: ClassVar[tuple[str, ...]] = ("expr",)


@dataclass(frozen=True)
class RepMinMax(Expr):
    """Matches an expression between ``min`` and ``max`` times, e.g. ``e{m, n}``."""

    expr: Expr
    min: int
    max: int
    _child_fields: ClassVar[tuple[str, ...]] = ("expr",)


@dataclass(frozen=True)
class Skip(Expr):
    """Consumes input until one of the strings is found."""

    strings: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "strings", tuple(self.strings))


@dataclass(frozen=True)
class Push(Expr):
    """Matches an expression and pushes it to the stack, e.g. ``PUSH(e)``."""

    expr: Expr
    _child_fields: ClassVar[tuple[str, ...]] = ("expr",)


@dataclass(frozen=True)
class NodeTag(Expr):
    """Matches an expression and labels it, e.g. ``#label = e``."""

    expr: Expr
    tag: str
    _child_fields: ClassVar[tuple[str, ...]] = ("expr",)


@dataclass(frozen=True)
class Weight(Expr):
    """Marks a weighted production."""


@dataclass(frozen=True)
class Rule:
    """A named grammar rule."""

    name: str
    ty: RuleType
    expr: Expr