# pestmeta

Data model and optimizer for PEG grammars whose choices carry weights.

## Modules

- `pestmeta.ast`: grammar rules (`Rule`, `RuleType`) and expressions (`Str`,
  `Insens`, `Range`, `Ident`, `PeekSlice`, `PosPred`, `NegPred`, `Seq`,
  `Choice`, `Opt`, `Rep`, `RepOnce`, `RepExact`, `RepMin`, `RepMax`,
  `RepMinMax`, `Skip`, `Push`, `NodeTag`, `Weight`). Every expression can be
  walked with `iter_top_down()` or rewritten with `map_top_down(f)` and
  `map_bottom_up(f)`. A `Choice` carries a pair of weights, `(1, 1)` by default.
- `pestmeta.nodes`: parser-level nodes that keep their source `Span`
  (`ParserNode`, `ParserRule` and the matching expression classes).
  `ParserNode.filter_map_top_down(f)` collects the non-`None` results of `f`
  over a node tree; `ParserNode.find_weight()` reads the combined weight of
  choices and raises `ValueError` when a sequence carries more than one weight.
- `pestmeta.convert`: `convert_rule` and `convert_node` turn parser nodes into
  AST rules and expressions, filling in choice weights.
- `pestmeta.escapes`: `unescape` decodes the escapes of grammar string and
  character literals (`\n`, `\r`, `\t`, `\0`, `\\`, `\"`, `\'`, `\x41`,
  `\u{1F600}`) and raises `ValueError` on a malformed escape.
- `pestmeta.passes`: the single rewrite passes `rotate`, `skip`, `unroll`,
  `concatenate`, `factor` and `listify`, each taking and returning a `Rule`.
- `pestmeta.optimized`: the optimized expression classes, `OptimizedRule`, and
  `to_rule_map`, which maps rule names to their expressions.
- `pestmeta.restorer`: `restore_on_err` wraps branches of optionals, choices
  and repetitions that touch the stack (`Push`, `DROP`, `POP`, or rules that
  reach them) in `RestoreOnErr`.
- `pestmeta.optimizer`: `optimize(rules)` runs every pass, converts the rules
  with `to_optimized_rule` and applies `restore_on_err`.

## Installation

```
pip install .
```

## Example

```python
from pestmeta.ast import Rule, RuleType, Seq, Str
from pestmeta.optimizer import optimize

rules = [Rule("rule", RuleType.ATOMIC, Seq(Seq(Str("a"), Str("b")), Seq(Str("c"), Str("d"))))]
[optimized] = optimize(rules)
print(optimized.expr)   # Str(value='abcd')
```

## What this package does not do

It does not read grammar text. There is no parser that turns a grammar file
into `ParserNode` trees, no grammar validation, no formatted error reports and
no code generation; rules and nodes are built by the caller.

## Running the tests

```
pip install .[test]
pytest
```