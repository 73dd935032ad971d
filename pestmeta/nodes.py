"""Parser-level grammar nodes that still carry source spans."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import ClassVar, TypeVar

from pestmeta.ast import RuleType

T = TypeVar("T")


@dataclass(frozen=True)
class Span:
    """A half-open ``[start, end)`` region of the grammar text."""

    input: str
    start: int
    end: int

    def __post_init__(self) -> None:
        if not 0 <= self.start <= self.end <= len(self.input):
            raise ValueError(
                f"invalid span {self.start}..{self.end} for input of length {len(self.input)}"
            )

    @property
    def text(self) -> str:
        """The part of the input that the span covers."""
        return self.input[self.start:self.end]


class ParserExpr:
    """Base class of every parser expression."""

    # Fields holding child nodes that the filtering walk descends into.
    _walk_fields: ClassVar[tuple[str, ...]] = ()

    def walk_children(self) -> tuple[ParserNode, ...]:
        """Return the child nodes visited by a top-down walk, left to right."""
        return tuple(getattr(self, name) for name in self._walk_fields)


@dataclass(frozen=True)
class ParserNode:
    """An expression together with the span it was parsed from."""

    expr: ParserExpr
    span: Span

    def _walk(self) -> Iterator[ParserNode]:
        stack: list[ParserNode] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.expr.walk_children()))

    def filter_map_top_down(self, f: Callable[[ParserNode], T | None]) -> list[T]:
        """Apply ``f`` to every node, parents first, keeping results that are not None.

        Tagged nodes are visited but their inner node is not descended into.
        """
        return [value for value in map(f, self._walk()) if value is not None]

    def find_weight(self) -> int | None:
        """Return the combined weight of the choices this node stands for, if any."""
        expr = self.expr
        if isinstance(expr, Seq):
            lhs, rhs = expr.lhs.find_weight(), expr.rhs.find_weight()
            if lhs is not None and rhs is not None:
                raise ValueError("weight specified multiple times")
            return lhs if lhs is not None else rhs
        if isinstance(expr, Choice):
            left = expr.lhs.find_weight()
            right = expr.rhs.find_weight()
            return (1 if left is None else left) + (1 if right is None else right)
        return None


@dataclass(frozen=True)
class ParserRule:
    """A grammar rule as parsed, with its span."""

    name: str
    span: Span
    ty: RuleType
    node: ParserNode


@dataclass(frozen=True)
class Str(ParserExpr):
    """Matches an exact string, e.g. ``"a"``."""

    value: str


@dataclass(frozen=True)
class Insens(ParserExpr):
    """Matches an exact string, ASCII case-insensitively, e.g. ``^"a"``."""

    value: str


@dataclass(frozen=True)
class Range(ParserExpr):
    """Matches one character in a range, e.g. ``'a'..'z'``."""

    start: str
    end: str


@dataclass(frozen=True)
class Ident(ParserExpr):
    """Matches the rule with the given name."""

    name: str


@dataclass(frozen=True)
class PeekSlice(ParserExpr):
    """Matches a part of the stack, e.g. ``PEEK[..]``."""

    start: int
    end: int | None = None


@dataclass(frozen=True)
class PosPred(ParserExpr):
    """Positive lookahead, e.g. ``&e``."""

    node: ParserNode
    _walk_fields: ClassVar[tuple[str, ...]] = ("node",)


@dataclass(frozen=True)
class NegPred(ParserExpr):
    """Negative lookahead, e.g. ``!e``."""

    node: ParserNode
    _walk_fields: ClassVar[tuple[str, ...]] = ("node",)


@dataclass(frozen=True)
class Seq(ParserExpr):
    """A sequence of two expressions, e.g. ``e1 ~ e2``."""

    lhs: ParserNode
    rhs: ParserNode
    _walk_fields: ClassVar[tuple[str, ...]] = ("lhs", "rhs")


@dataclass(frozen=True)
class Choice(ParserExpr):
    """Either of two expressions, e.g. ``e1 | e2``."""

    lhs: ParserNode
    rhs: ParserNode
    _walk_fields: ClassVar[tuple[str, ...]] = ("lhs", "rhs")


@dataclass(frozen=True)
class Opt(ParserExpr):
    """Optionally matches an expression, e.g. ``e?``."""

    node: ParserNode
    _walk_fields: ClassVar[tuple[str, ...]] = ("node",)


@dataclass(frozen=True)
class Rep(ParserExpr):
    """Matches an expression zero or more times, e.g. ``e*``."""

    node: ParserNode
    _walk_fields: ClassVar[tuple[str, ...]] = ("node",)


@dataclass(frozen=True)
class RepOnce(ParserExpr):
    """Matches an expression one or more times, e.g. ``e+``."""

    node: ParserNode
    _walk_fields: ClassVar[tuple[str, ...]] = ("node",)


@dataclass(frozen=True)
class RepExact(ParserExpr):
    """Matches an expression an exact number of times, e.g. ``e{n}``."""

    node: ParserNode
    count: int
    _walk_fields: ClassVar[tuple[str, ...]] = ("node",)


@dataclass(frozen=True)
class RepMin(ParserExpr):
    """Matches an expression at least a number of times, e.g. ``e{n,}``."""

    node: ParserNode
    min: int
    _walk_fields: ClassVar[tuple[str, ...]] = ("node",)


@dataclass(frozen=True)
class RepMax(ParserExpr):
    """Matches an expression at most a number of times, e.g. ``e{,n}``."""

    node: ParserNode
    max: int
    _walk_fields: ClassVar[tuple[str, ...]] = ("node",)


@dataclass(frozen=True)
class RepMinMax(ParserExpr):
    """Matches an expression between ``min`` and ``max`` times, e.g. ``e{m, n}``."""

    node: ParserNode
    min: int
    max: int
    _walk_fields: ClassVar[tuple[str, ...]] = ("node",)


@dataclass(frozen=True)
class Push(ParserExpr):
    """Matches an expression and pushes it to the stack, e.g. ``PUSH(e)``."""

    node: ParserNode
    _walk_fields: ClassVar[tuple[str, ...]] = ("node",)


@dataclass(frozen=True)
class NodeTag(ParserExpr):
    """Matches an expression and labels it, e.g. ``#label = e``."""

    node: ParserNode
    tag: str


@dataclass(frozen=True)
class Weight(ParserExpr):
    """Specifies a weight for a production."""

    value: int