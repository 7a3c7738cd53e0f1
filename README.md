# ferast

ferast turns a list of tokens into a syntax tree for a small scripting language
that uses braces to delimit blocks. It can also print that tree as text and fold
operators applied to literal operands. The library has no runtime dependencies.

## Installation

```
pip install ferast
```

To install the test dependencies as well:

```
pip install "ferast[test]"
```

## Modules

- `ferast.tokens` holds the token types and the token cursor:
  - `TokType` is an enum of token kinds.
  - `ModuleLoc` is a source position with `path`, `line` and `col`.
  - `Lexeme` is a token with optional `data` and a `loc`.
  - `ParseError` carries `loc` and `message`.
  - `TokenStream` is a cursor over lexemes. It provides `peek`, `peekt`, `next`,
    `prev`, `accept`, `acceptn`, `acceptd`, `sett` and `is_valid`.
- `ferast.stmts` holds the tree nodes: `StmtBlock`, `StmtSimple`, `StmtExpr`,
  `StmtFnArgs`, `StmtVar`, `StmtFnSig`, `StmtFnDef`, `StmtVarDecl`, `StmtCond`
  (with `Conditional` branches), `StmtFor`, `StmtForIn`, `StmtRet`,
  `StmtContinue`, `StmtBreak` and `StmtDefer`.
  - Every node has `type_name()`.
  - Every node has `disp(writer, has_next)`, which writes it to a `TreeWriter`.
  - Every node has `dump()`, which returns the tree as a string.
- `ferast.statements` holds `StatementParser`. It parses the following:
  - blocks
  - `let` declarations
  - function signatures and definitions; a function body that does not end in a
    return gets one appended
  - `if`/`elif`/`else` chains, including `inline if`
  - `for`, `for x in ...` and `while` loops
  - `return`, `continue`, `break` and `defer`
- `ferast.parser` holds `Parser`.
  - It parses expressions by operator precedence. This covers the comma operator,
    the ternary `?:`, assignment and compound assignment, `or` blocks, logical,
    bitwise, comparison and arithmetic operators, prefix and postfix operators,
    calls, struct calls, subscripts, and `.`/`->` member access.
  - It reads literals with a prefix or suffix, such as `ref"..."` or `9h`, as a
    call of the identifier on the literal.
  - The module also provides `parse(tokens, expr_only=False)` and
    `dump_tree(tree)`.
- `ferast.passes` holds `Pass`, an abstract class whose `visit(stmt)` returns
  the replacement tree. It also holds `PassManager`, which runs passes in order
  and is used through `add(pass_)` and `visit(tree)`.
- `ferast.folding` holds `fold_constants(left, right, oper)`. It takes
  `StmtSimple` operands and returns the folded `StmtSimple`, or `None` when the
  expression cannot be folded.
- `ferast.treeio` holds `TreeWriter`, which writes indented trees with
  box-drawing guides to a stream or to an in-memory buffer.
- `ferast.utils` holds string helpers:
  - `string_delim` splits a string and trims each part.
  - `to_raw_string`, `from_raw_string`, `view_back_slash` and
    `remove_back_slash` convert escape sequences.
  - `vec_to_str` formats a list as `[a, b, c]`.

## Usage

Build the lexemes yourself. The following lexemes stand for `let x = 1 + 2;`:

```python
from ferast.tokens import Lexeme, TokType
from ferast.parser import parse, dump_tree

tokens = [
    Lexeme(TokType.LET),
    Lexeme(TokType.IDEN, "x"),
    Lexeme(TokType.ASSN),
    Lexeme(TokType.INT, 1),
    Lexeme(TokType.ADD),
    Lexeme(TokType.INT, 2),
    Lexeme(TokType.COLS),
]
tree = parse(tokens)                # a top-level StmtBlock
print(dump_tree(tree))
```

Use `parse(tokens, expr_only=True)` to parse a single expression instead of a
block. Malformed input raises `ParseError`, and its message says what was
expected at that location.

To fold constants:

```python
from ferast.folding import fold_constants
from ferast.stmts import StmtSimple
from ferast.tokens import Lexeme, ModuleLoc, TokType

loc = ModuleLoc()
result = fold_constants(
    StmtSimple(loc, Lexeme(TokType.INT, 6)),
    StmtSimple(loc, Lexeme(TokType.INT, 4)),
    Lexeme(TokType.SUB),
)
# result.val.tok is TokType.INT, result.val.data == 2
```

Folding follows these rules:

- Integer results wrap to the signed 64-bit range.
- Integer division truncates toward zero.
- Shifts by a count outside 0 to 63 are left unfolded.
- Dividing or taking the modulo by a literal zero raises `ParseError`.

## What this package does not do

- There is no lexer. Turning source text into `Lexeme` objects is up to you.
- There is no pass that walks a tree and folds it. `fold_constants` works on a
  single operator and its operands, and `PassManager` runs only the `Pass`
  subclasses you supply.
- Nothing compiles or runs the tree. There is no command-line program.