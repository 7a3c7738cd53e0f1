"""Expression parsing and the top-level entry points."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import replace

from .statements import StatementParser
from .stmts import Stmt, StmtExpr, StmtFnArgs, StmtSimple, StmtVar
from .tokens import Lexeme, ParseError, TokenStream, TokType


def _copy(lexeme: Lexeme) -> Lexeme:
    return replace(lexeme)


_COMPOUND_ASSIGN = (
    TokType.ADD_ASSN,
    TokType.SUB_ASSN,
    TokType.MUL_ASSN,
    TokType.DIV_ASSN,
    TokType.MOD_ASSN,
    TokType.LSHIFT_ASSN,
    TokType.RSHIFT_ASSN,
    TokType.BAND_ASSN,
    TokType.BOR_ASSN,
    TokType.BNOT_ASSN,
    TokType.BXOR_ASSN,
)

_PREFIX_OPS = {
    TokType.XINC: TokType.INCX,
    TokType.XDEC: TokType.DECX,
    TokType.ADD: TokType.UADD,
    TokType.SUB: TokType.USUB,
    TokType.MUL: TokType.UMUL,
    TokType.BAND: TokType.UAND,
    TokType.LNOT: TokType.LNOT,
    TokType.BNOT: TokType.BNOT,
}


class Parser(StatementParser):
    """Parses statements and expressions from a list of lexemes."""

    def __init__(self, tokens: Iterable[Lexeme] | TokenStream) -> None:
        super().__init__(tokens)

    # Leaves

    def parse_simple(self) -> StmtSimple:
        """Parse a single identifier or literal."""
        p = self.stream
        if not p.peek().is_data():
            raise self._found("expected data here, found: ")
        val = _copy(p.peek())
        p.next()
        return StmtSimple(val.loc, val)

    def parse_prefixed_suffixed_literal(self) -> StmtExpr:
        """Parse ``ref"text"`` or ``9h`` as a call of the identifier on the literal."""
        p = self.stream
        if p.peekt() is TokType.IDEN:
            iden, lit = _copy(p.peek()), _copy(p.peek(1))
        else:
            iden, lit = _copy(p.peek(1)), _copy(p.peek())
        oper = Lexeme(TokType.FNCALL, loc=iden.loc)
        p.next()
        p.next()
        arg = StmtSimple(lit.loc, lit)
        fn = StmtSimple(iden.loc, iden)
        finfo = StmtFnArgs(arg.loc, [arg], [False])
        return StmtExpr(lit.loc, fn, oper, finfo)

    # Precedence levels

    def parse_expr(self, disable_brace_after_iden: bool = False) -> Stmt:
        """Parse a full expression, comma operator included."""
        return self._parse_expr17(disable_brace_after_iden)

    def _parse_expr17(self, disable_brace_after_iden: bool = False) -> Stmt:
        p = self.stream
        start = p.peek().loc
        rhs = self._parse_expr16(disable_brace_after_iden)
        while p.accept(TokType.COMMA):
            oper = _copy(p.peek())
            p.next()
            lhs = self._parse_expr16(disable_brace_after_iden)
            rhs = StmtExpr(start, lhs, oper, rhs)
        return rhs

    def _parse_expr16(self, disable_brace_after_iden: bool = False) -> Stmt:
        p = self.stream
        start = p.peek().loc
        lhs = self._parse_expr15(disable_brace_after_iden)
        if not p.accept(TokType.QUEST):
            return lhs
        oper = _copy(p.peek())
        p.next()
        if_true = self._parse_expr15(disable_brace_after_iden)
        if not p.accept(TokType.COL):
            raise self._found("expected ':' for ternary operator, found: ")
        oper_inside = _copy(p.peek())
        p.next()
        if_false = self._parse_expr15(disable_brace_after_iden)
        rhs = StmtExpr(oper.loc, if_true, oper_inside, if_false)
        return StmtExpr(start, lhs, oper, rhs)

    def _parse_expr15(self, disable_brace_after_iden: bool = False) -> Stmt:
        p = self.stream
        start = p.peek().loc
        rhs = self._parse_expr14(disable_brace_after_iden)
        while p.accept(TokType.ASSN):
            oper = _copy(p.peek())
            p.next()
            lhs = self._parse_expr14(disable_brace_after_iden)
            rhs = StmtExpr(start, lhs, oper, rhs)
        return rhs

    def _parse_expr14(self, disable_brace_after_iden: bool = False) -> Stmt:
        p = self.stream
        expr = self._binary(_COMPOUND_ASSIGN, self._parse_expr13, disable_brace_after_iden)
        if not p.acceptn(TokType.OR):
            return expr
        or_var: Lexeme | None = None
        if p.accept(TokType.IDEN):
            or_var = _copy(p.peek())
            p.next()
        or_blk = self.parse_block(True)
        if not isinstance(expr, StmtExpr):
            expr = StmtExpr(expr.loc, expr, Lexeme(), None)
        expr.set_or(or_blk, or_var)
        return expr

    def _parse_expr13(self, disable_brace_after_iden: bool = False) -> Stmt:
        return self._binary((TokType.LOR,), self._parse_expr12, disable_brace_after_iden)

    def _parse_expr12(self, disable_brace_after_iden: bool = False) -> Stmt:
        return self._binary((TokType.LAND,), self._parse_expr11, disable_brace_after_iden)

    def _parse_expr11(self, disable_brace_after_iden: bool = False) -> Stmt:
        return self._binary((TokType.BOR,), self._parse_expr10, disable_brace_after_iden)

    def _parse_expr10(self, disable_brace_after_iden: bool = False) -> Stmt:
        return self._binary((TokType.BXOR,), self._parse_expr09, disable_brace_after_iden)

    def _parse_expr09(self, disable_brace_after_iden: bool = False) -> Stmt:
        return self._binary((TokType.BAND,), self._parse_expr08, disable_brace_after_iden)

    def _parse_expr08(self, disable_brace_after_iden: bool = False) -> Stmt:
        return self._binary(
            (TokType.EQ, TokType.NE), self._parse_expr07, disable_brace_after_iden
        )

    def _parse_expr07(self, disable_brace_after_iden: bool = False) -> Stmt:
        return self._binary(
            (TokType.LT, TokType.LE, TokType.GT, TokType.GE),
            self._parse_expr06,
            disable_brace_after_iden,
        )

    def _parse_expr06(self, disable_brace_after_iden: bool = False) -> Stmt:
        return self._binary(
            (TokType.LSHIFT, TokType.RSHIFT), self._parse_expr05, disable_brace_after_iden
        )

    def _parse_expr05(self, disable_brace_after_iden: bool = False) -> Stmt:
        return self._binary(
            (TokType.ADD, TokType.SUB), self._parse_expr04, disable_brace_after_iden
        )

    def _parse_expr04(self, disable_brace_after_iden: bool = False) -> Stmt:
        return self._binary(
            (TokType.MUL, TokType.DIV, TokType.MOD, TokType.POWER, TokType.ROOT),
            self._parse_expr03,
            disable_brace_after_iden,
        )

    def _binary(
        self,
        ops: tuple[TokType, ...],
        operand: Callable[[bool], Stmt],
        disable_brace_after_iden: bool,
    ) -> Stmt:
        p = self.stream
        start = p.peek().loc
        lhs = operand(disable_brace_after_iden)
        while p.accept(*ops):
            oper = _copy(p.peek())
            p.next()
            rhs = operand(disable_brace_after_iden)
            lhs = StmtExpr(start, lhs, oper, rhs)
        return lhs

    def _parse_expr03(self, disable_brace_after_iden: bool = False) -> Stmt:
        p = self.stream
        start = p.peek()
        opers: list[Lexeme] = []
        while p.peekt() in _PREFIX_OPS:
            p.sett(_PREFIX_OPS[p.peekt()])
            opers.insert(0, _copy(p.peek()))
            p.next()

        lhs = self._parse_expr02(disable_brace_after_iden)
        if lhs is None:
            raise ParseError(start.loc, "invalid expression")

        if isinstance(lhs, StmtSimple) and opers:
            val = lhs.val
            if val.tok in (TokType.INT, TokType.FLT):
                while opers and opers[0].tok is TokType.USUB:
                    val.data = -val.data
                    opers.pop(0)

        for op in opers:
            lhs = StmtExpr(op.loc, lhs, op, None)
        return lhs

    def _parse_expr02(self, disable_brace_after_iden: bool = False) -> Stmt | None:
        p = self.stream
        lhs = self._parse_expr01(disable_brace_after_iden)
        if p.accept(TokType.XINC, TokType.XDEC, TokType.PRE_VA):
            if p.accept(TokType.PRE_VA):
                p.sett(TokType.POST_VA)
            oper = _copy(p.peek())
            lhs = StmtExpr(oper.loc, lhs, oper, None)
            p.next()
        return lhs

    def _parse_expr01(self, disable_brace_after_iden: bool = False) -> Stmt | None:
        p = self.stream

        if (p.accept(TokType.IDEN) and p.peek(1).is_literal()) or (
            p.peek().is_literal() and p.peekt(1) is TokType.IDEN
        ):
            return self.parse_prefixed_suffixed_literal()

        lhs: Stmt | None = None
        if p.acceptn(TokType.LPAREN):
            lhs = self.parse_expr(disable_brace_after_iden)
            if not p.acceptn(TokType.RPAREN):
                raise self._found("expected ending parenthesis ')' for expression, found: ")

        if p.acceptd():
            lhs = self.parse_simple()

        after_dot = False
        dot = Lexeme()
        while True:
            if after_dot:
                after_dot = False
                if not p.acceptd():
                    raise self._found("expected member name after access operator, found: ")
                rhs = self.parse_simple()
                if lhs is not None:
                    lhs = StmtExpr(dot.loc, lhs, dot, rhs)

            if p.accept(TokType.LBRACK):
                lhs = self._parse_subscript(lhs)
                if p.accept(TokType.LBRACK, TokType.LPAREN) or (
                    p.peekt() is TokType.DOT and p.peekt(1) is TokType.LT
                ):
                    continue
            elif p.accept(TokType.LPAREN) or (
                not disable_brace_after_iden and p.accept(TokType.LBRACE)
            ):
                lhs = self._parse_call(lhs)
                if not disable_brace_after_iden and p.accept(TokType.LBRACE):
                    continue
                if p.accept(TokType.LBRACK, TokType.LPAREN):
                    continue

            if p.acceptn(TokType.DOT, TokType.ARROW):
                dot = _copy(p.peek(-1))
                after_dot = True
                continue
            return lhs

    def _parse_subscript(self, lhs: Stmt | None) -> StmtExpr:
        p = self.stream
        p.sett(TokType.SUBS)
        oper = _copy(p.peek())
        p.next()
        try:
            rhs = self._parse_expr16(False)
        except ParseError as exc:
            raise self._fail("failed to parse expression for subscript", oper) from exc
        if not p.acceptn(TokType.RBRACK):
            raise self._found("expected closing bracket for subscript expression, found: ")
        return StmtExpr(oper.loc, lhs, oper, rhs)

    def _parse_call(self, lhs: Stmt | None) -> StmtExpr:
        p = self.stream
        fncall = p.accept(TokType.LPAREN)
        closer = TokType.RPAREN if fncall else TokType.RBRACE
        p.sett(TokType.FNCALL if fncall else TokType.STCALL)
        oper = _copy(p.peek())
        p.next()

        args: list[Stmt] = []
        unpack: list[bool] = []
        if not p.acceptn(closer):
            while True:
                unpack_arg = False
                if p.accept(TokType.STR, TokType.IDEN) and p.peekt(1) is TokType.ASSN:
                    if p.accept(TokType.IDEN):
                        p.sett(TokType.STR)
                    name = _copy(p.peek())
                    p.next()
                    p.next()
                    val = self._parse_expr16(False)
                    arg: Stmt = StmtVar(name.loc, name=name, in_type=None, val=val, is_arg=True)
                elif p.accept(TokType.IDEN) and p.peekt(1) in (TokType.PRE_VA, TokType.POST_VA):
                    arg = StmtSimple(p.peek().loc, _copy(p.peek()))
                    p.next()
                    p.sett(TokType.POST_VA)
                    p.next()
                    unpack_arg = True
                elif p.accept(TokType.FN):
                    arg = self.parse_fn_def()
                else:
                    arg = self._parse_expr16(False)
                args.append(arg)
                unpack.append(unpack_arg)
                if not p.acceptn(TokType.COMMA):
                    break
            if not p.acceptn(closer):
                raise self._found(
                    "expected closing parenthesis/brace after function/struct call "
                    "arguments, found: "
                )

        rhs = StmtFnArgs(oper.loc, args, unpack)
        return StmtExpr(oper.loc, lhs, oper, rhs)


def parse(tokens: Iterable[Lexeme], expr_only: bool = False) -> Stmt:
    """Parse lexemes into a top-level block, or a single expression if ``expr_only``."""
    parser = Parser(tokens)
    if expr_only:
        return parser.parse_expr(False)
    return parser.parse_block(False)


def dump_tree(tree: Stmt) -> str:
    """Return the textual tree dump of ``tree``."""
    return tree.dump()