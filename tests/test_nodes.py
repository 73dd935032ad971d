import pytest

from pestmeta.ast import RuleType
from pestmeta.nodes import (
    Choice,
    Ident,
    NegPred,
    NodeTag,
    Opt,
    ParserNode,
    ParserRule,
    Push,
    Rep,
    RepExact,
    RepMinMax,
    Seq,
    Span,
    Str,
    Weight,
)

TEXT = "a = { b ~ c | d }"


def node(expr, start=0, end=0):
    return ParserNode(expr, Span(TEXT, start, end))


def ident(name):
    return node(Ident(name))


def test_span_text():
    span = Span(TEXT, 6, 7)
    assert span.text == "b"


def test_span_rejects_reversed_bounds():
    with pytest.raises(ValueError):
        Span(TEXT, 5, 2)


def test_span_rejects_out_of_range():
    with pytest.raises(ValueError):
        Span(TEXT, 0, len(TEXT) + 1)


def test_filter_map_collects_idents_in_order():
    tree = node(
        Seq(
            node(Choice(ident("a"), node(Rep(ident("b"))))),
            node(Push(node(Opt(ident("c"))))),
        )
    )
    names = tree.filter_map_top_down(
        lambda n: n.expr.name if isinstance(n.expr, Ident) else None
    )
    assert names == ["a", "b", "c"]


def test_filter_map_visits_parents_first():
    inner = ident("x")
    tree = node(NegPred(node(RepExact(inner, 2))))
    visited = tree.filter_map_top_down(lambda n: type(n.expr).__name__)
    assert visited == ["NegPred", "RepExact", "Ident"]


def test_filter_map_does_not_descend_into_tags():
    tree = node(Seq(node(NodeTag(ident("hidden"), "t")), ident("seen")))
    names = tree.filter_map_top_down(
        lambda n: n.expr.name if isinstance(n.expr, Ident) else None
    )
    assert names == ["seen"]


def test_filter_map_counts_every_walked_node():
    tree = node(RepMinMax(node(Seq(ident("a"), node(Str("s")))), 1, 2))
    visited = tree.filter_map_top_down(lambda n: n)
    assert visited[0] is tree
    assert len(visited) == len(set(map(id, visited)))
    assert all(isinstance(v, ParserNode) for v in visited)
    assert len(visited) == 4


def test_find_weight_of_leaf_is_none():
    assert ident("a").find_weight() is None


def test_find_weight_of_weight_node_is_none():
    assert node(Weight(5)).find_weight() is None


def test_find_weight_choice_defaults_each_branch_to_one():
    tree = node(Choice(ident("a"), ident("b")))
    assert tree.find_weight() == 2


def test_find_weight_nested_choice_adds_up():
    left = node(Choice(ident("a"), ident("b")))
    tree = node(Choice(left, ident("c")))
    assert tree.find_weight() == left.find_weight() + 1


def test_find_weight_seq_passes_single_weight_through():
    choice = node(Choice(ident("a"), ident("b")))
    assert node(Seq(choice, ident("c"))).find_weight() == choice.find_weight()
    assert node(Seq(ident("c"), choice)).find_weight() == choice.find_weight()


def test_find_weight_seq_without_weights_is_none():
    assert node(Seq(ident("a"), ident("b"))).find_weight() is None


def test_find_weight_seq_with_two_weights_raises():
    choice = node(Choice(ident("a"), ident("b")))
    with pytest.raises(ValueError, match="weight specified multiple times"):
        node(Seq(choice, choice)).find_weight()


def test_find_weight_ignores_wrapped_choices():
    choice = node(Choice(ident("a"), ident("b")))
    assert node(Rep(choice)).find_weight() is None
    assert node(Opt(choice)).find_weight() is None


def test_parser_rule_equality():
    span = Span(TEXT, 0, 1)
    first = ParserRule("a", span, RuleType.NORMAL, ident("b"))
    second = ParserRule("a", span, RuleType.NORMAL, ident("b"))
    assert first == second
    assert first != ParserRule("a", span, RuleType.SILENT, ident("b"))