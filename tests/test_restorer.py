import pytest

from pestmeta.ast import RuleType
from pestmeta.optimized import (
    Choice,
    Ident,
    OptimizedRule,
    Opt,
    Push,
    Rep,
    RestoreOnErr,
    Seq,
    Str,
    to_rule_map,
)
from pestmeta.restorer import restore_on_err


def _rule(name, expr):
    return OptimizedRule(name=name, ty=RuleType.NORMAL, expr=expr)


def test_restore_no_stack_children():
    rules = [_rule("rule", Opt(Str("a")))]
    assert restore_on_err(rules[0], to_rule_map(rules)) == rules[0]


def test_restore_with_child_stack_ops():
    rules = [_rule("rule", Rep(Push(Str("a"))))]
    expected = _rule("rule", Rep(RestoreOnErr(Push(Str("a")))))
    assert restore_on_err(rules[0], to_rule_map(rules)) == expected


def test_restore_choice_branch_with_and_branch_without():
    rules = [_rule("rule", Choice(Push(Str("a")), Str("a")))]
    expected = _rule("rule", Choice(RestoreOnErr(Push(Str("a"))), Str("a")))
    assert restore_on_err(rules[0], to_rule_map(rules)) == expected


def test_choice_keeps_weights():
    rules = [_rule("rule", Choice(Str("a"), Push(Str("b")), (3, 4)))]
    result = restore_on_err(rules[0], to_rule_map(rules))
    assert result.expr == Choice(Str("a"), RestoreOnErr(Push(Str("b"))), (3, 4))


@pytest.mark.parametrize("name", ["POP", "DROP"])
def test_builtin_stack_rules_are_wrapped(name):
    rules = [_rule("rule", Opt(Ident(name)))]
    result = restore_on_err(rules[0], to_rule_map(rules))
    assert result.expr == Opt(RestoreOnErr(Ident(name)))


def test_called_rule_that_pushes_is_wrapped():
    rules = [
        _rule("rule", Opt(Ident("pusher"))),
        _rule("pusher", Push(Str("a"))),
    ]
    result = restore_on_err(rules[0], to_rule_map(rules))
    assert result.expr == Opt(RestoreOnErr(Ident("pusher")))


def test_indirect_call_through_sequence_is_wrapped():
    rules = [
        _rule("rule", Rep(Seq(Str("x"), Ident("middle")))),
        _rule("middle", Ident("pusher")),
        _rule("pusher", Push(Str("a"))),
    ]
    result = restore_on_err(rules[0], to_rule_map(rules))
    assert result.expr == Rep(RestoreOnErr(Seq(Str("x"), Ident("middle"))))


def test_unknown_rule_is_not_wrapped():
    rules = [_rule("rule", Opt(Ident("missing")))]
    result = restore_on_err(rules[0], to_rule_map(rules))
    assert result.expr == Opt(Ident("missing"))


def test_recursive_rule_without_stack_ops_terminates():
    rules = [_rule("rec", Opt(Ident("rec")))]
    result = restore_on_err(rules[0], to_rule_map(rules))
    assert result.expr == Opt(Ident("rec"))


def test_name_and_type_are_kept():
    rule = OptimizedRule(name="atom", ty=RuleType.ATOMIC, expr=Rep(Push(Str("a"))))
    result = restore_on_err(rule, to_rule_map([rule]))
    assert (result.name, result.ty) == ("atom", RuleType.ATOMIC)