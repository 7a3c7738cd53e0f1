import pytest

from ferast.parser import Parser, dump_tree, parse
from ferast.stmts import (
    StmtBlock,
    StmtCond,
    StmtFnArgs,
    StmtFnDef,
    StmtForIn,
    StmtExpr,
    StmtSimple,
    StmtVar,
    StmtVarDecl,
)
from ferast.tokens import Lexeme, ParseError, TokType


def T(tok):
    return Lexeme(tok)


def I(name):
    return Lexeme(TokType.IDEN, name)


def N(value):
    return Lexeme(TokType.INT, value)


def S(text):
    return Lexeme(TokType.STR, text)


def expr(*toks):
    return parse(list(toks), expr_only=True)


def test_simple_literal():
    tree = expr(N(5))
    assert isinstance(tree, StmtSimple)
    assert tree.val.data == 5


def test_precedence_mul_over_add():
    tree = expr(I("a"), T(TokType.ADD), I("b"), T(TokType.MUL), I("c"))
    assert tree.oper.tok is TokType.ADD
    assert tree.lhs.val.data == "a"
    assert tree.rhs.oper.tok is TokType.MUL


def test_left_associative_sub():
    tree = expr(I("a"), T(TokType.SUB), I("b"), T(TokType.SUB), I("c"))
    assert tree.oper.tok is TokType.SUB
    assert tree.lhs.oper.tok is TokType.SUB
    assert tree.rhs.val.data == "c"


def test_parentheses_group():
    tree = expr(
        T(TokType.LPAREN), I("a"), T(TokType.ADD), I("b"), T(TokType.RPAREN),
        T(TokType.MUL), I("c"),
    )
    assert tree.oper.tok is TokType.MUL
    assert tree.lhs.oper.tok is TokType.ADD


def test_missing_rparen_raises():
    with pytest.raises(ParseError, match="ending parenthesis"):
        expr(T(TokType.LPAREN), I("a"))


def test_unary_minus_folds_into_int():
    tree = expr(T(TokType.SUB), N(5))
    assert isinstance(tree, StmtSimple)
    assert tree.val.data == -5


def test_double_unary_minus_cancels():
    tree = expr(T(TokType.SUB), T(TokType.SUB), N(5))
    assert isinstance(tree, StmtSimple)
    assert tree.val.data == 5


def test_unary_minus_on_float():
    tree = expr(T(TokType.SUB), Lexeme(TokType.FLT, 2.5))
    assert tree.val.data == -2.5


def test_logical_not_is_unary_expr():
    tree = expr(T(TokType.LNOT), I("a"))
    assert tree.oper.tok is TokType.LNOT
    assert tree.lhs.val.data == "a"
    assert tree.rhs is None


def test_prefix_increment_becomes_incx():
    tree = expr(T(TokType.XINC), I("a"))
    assert tree.oper.tok is TokType.INCX


def test_unary_minus_on_identifier_becomes_usub():
    tree = expr(T(TokType.SUB), I("a"))
    assert tree.oper.tok is TokType.USUB


def test_postfix_increment():
    tree = expr(I("a"), T(TokType.XINC))
    assert tree.oper.tok is TokType.XINC
    assert tree.lhs.val.data == "a"


def test_logical_or_and_precedence():
    tree = expr(I("a"), T(TokType.LOR), I("b"), T(TokType.LAND), I("c"))
    assert tree.oper.tok is TokType.LOR
    assert tree.rhs.oper.tok is TokType.LAND


def test_compound_assign():
    tree = expr(I("a"), T(TokType.ADD_ASSN), N(1))
    assert tree.oper.tok is TokType.ADD_ASSN
    assert tree.lhs.val.data == "a"
    assert tree.rhs.val.data == 1


def test_assignment_node_layout():
    tree = expr(I("a"), T(TokType.ASSN), I("b"))
    assert tree.oper.tok is TokType.ASSN
    assert tree.lhs.val.data == "b"
    assert tree.rhs.val.data == "a"


def test_ternary():
    tree = expr(I("a"), T(TokType.QUEST), I("b"), T(TokType.COL), I("c"))
    assert tree.oper.tok is TokType.QUEST
    assert tree.rhs.oper.tok is TokType.COL
    assert tree.rhs.lhs.val.data == "b"
    assert tree.rhs.rhs.val.data == "c"


def test_ternary_missing_colon():
    with pytest.raises(ParseError, match="ternary"):
        expr(I("a"), T(TokType.QUEST), I("b"), T(TokType.COMMA), I("c"))


def test_function_call_args():
    tree = expr(I("f"), T(TokType.LPAREN), N(1), T(TokType.COMMA), N(2), T(TokType.RPAREN))
    assert tree.oper.tok is TokType.FNCALL
    assert isinstance(tree.rhs, StmtFnArgs)
    assert [a.val.data for a in tree.rhs.args] == [1, 2]
    assert tree.rhs.unpack_vector == [False, False]


def test_empty_call():
    tree = expr(I("f"), T(TokType.LPAREN), T(TokType.RPAREN))
    assert tree.oper.tok is TokType.FNCALL
    assert tree.rhs.args == []


def test_keyword_argument():
    tree = expr(I("f"), T(TokType.LPAREN), I("x"), T(TokType.ASSN), N(1), T(TokType.RPAREN))
    arg = tree.rhs.args[0]
    assert isinstance(arg, StmtVar)
    assert arg.name.tok is TokType.STR
    assert arg.name.data == "x"
    assert arg.val.val.data == 1


def test_variadic_unpack():
    tree = expr(I("f"), T(TokType.LPAREN), I("a"), T(TokType.PRE_VA), T(TokType.RPAREN))
    assert tree.rhs.unpack_vector == [True]
    assert tree.rhs.args[0].val.data == "a"


def test_unclosed_call_raises():
    with pytest.raises(ParseError, match="closing parenthesis"):
        expr(I("f"), T(TokType.LPAREN), N(1), N(2))


def test_struct_call():
    tree = expr(I("S"), T(TokType.LBRACE), T(TokType.RBRACE))
    assert tree.oper.tok is TokType.STCALL


def test_struct_call_disabled():
    p = Parser([I("S"), T(TokType.LBRACE), T(TokType.RBRACE)])
    tree = p.parse_expr(True)
    assert isinstance(tree, StmtSimple)
    assert p.stream.peekt() is TokType.LBRACE


def test_subscript():
    tree = expr(I("a"), T(TokType.LBRACK), N(0), T(TokType.RBRACK))
    assert tree.oper.tok is TokType.SUBS
    assert tree.rhs.val.data == 0


def test_member_access():
    tree = expr(I("a"), T(TokType.DOT), I("b"))
    assert tree.oper.tok is TokType.DOT
    assert tree.lhs.val.data == "a"
    assert tree.rhs.val.data == "b"


def test_method_call_chain():
    tree = expr(I("a"), T(TokType.DOT), I("b"), T(TokType.LPAREN), T(TokType.RPAREN))
    assert tree.oper.tok is TokType.FNCALL
    assert tree.lhs.oper.tok is TokType.DOT


def test_member_access_needs_name():
    with pytest.raises(ParseError):
        expr(I("a"), T(TokType.DOT), T(TokType.ADD))


def test_prefixed_literal():
    tree = expr(I("ref"), S("x"))
    assert tree.oper.tok is TokType.FNCALL
    assert tree.lhs.val.data == "ref"
    assert tree.rhs.args[0].val.data == "x"


def test_suffixed_literal():
    tree = expr(N(9), I("h"))
    assert tree.lhs.val.data == "h"
    assert tree.rhs.args[0].val.data == 9


def test_or_block():
    tree = expr(I("a"), T(TokType.OR), T(TokType.LBRACE), T(TokType.RBRACE))
    assert isinstance(tree, StmtExpr)
    assert tree.lhs.val.data == "a"
    assert not tree.oper.is_valid()
    assert isinstance(tree.or_blk, StmtBlock)


def test_or_block_with_variable():
    tree = expr(
        I("f"), T(TokType.LPAREN), T(TokType.RPAREN), T(TokType.OR), I("e"),
        T(TokType.LBRACE), T(TokType.RBRACE),
    )
    assert tree.oper.tok is TokType.FNCALL
    assert tree.or_blk_var.data == "e"


def test_comma_expression():
    tree = expr(I("a"), T(TokType.COMMA), I("b"))
    assert tree.oper.tok is TokType.COMMA


def test_parse_simple_rejects_operator():
    p = Parser([T(TokType.ADD)])
    with pytest.raises(ParseError, match="expected data"):
        p.parse_simple()


def test_parse_block_let():
    tree = parse([T(TokType.LET), I("x"), T(TokType.ASSN), N(1), T(TokType.COLS)])
    assert isinstance(tree, StmtBlock)
    assert tree.is_top
    decl = tree.stmts[0]
    assert isinstance(decl, StmtVarDecl)
    assert decl.decls[0].name.data == "x"


def test_parse_fn_in_let():
    toks = [
        T(TokType.LET), I("f"), T(TokType.ASSN), T(TokType.FN), T(TokType.LPAREN), I("a"),
        T(TokType.RPAREN), T(TokType.LBRACE), I("a"), T(TokType.COLS), T(TokType.RBRACE),
        T(TokType.COLS),
    ]
    tree = parse(toks)
    fn = tree.stmts[0].decls[0].val
    assert isinstance(fn, StmtFnDef)
    assert fn.sig.args[0].name.data == "a"
    assert fn.blk.stmts[-1].type_name() == "return"


def test_parse_if():
    toks = [T(TokType.IF), I("a"), T(TokType.LBRACE), I("b"), T(TokType.COLS), T(TokType.RBRACE)]
    tree = parse(toks)
    assert isinstance(tree.stmts[0], StmtCond)
    assert tree.stmts[0].conds[0].cond.val.data == "a"


def test_parse_for_in():
    toks = [
        T(TokType.FOR), I("e"), T(TokType.FIN), I("v"), T(TokType.LBRACE), T(TokType.RBRACE),
    ]
    tree = parse(toks)
    assert isinstance(tree.stmts[0], StmtForIn)
    assert tree.stmts[0].iter.data == "e"


def test_missing_semicolon():
    with pytest.raises(ParseError, match="semicolon"):
        parse([I("a"), I("b")])


def test_dump_tree_block():
    tree = parse([I("a"), T(TokType.COLS)])
    text = dump_tree(tree)
    assert "Block [top = yes]" in text
    assert "Simple: iden: a" in text


def test_dump_tree_simple():
    assert dump_tree(expr(N(5))) == " └─Simple: int: 5\n"