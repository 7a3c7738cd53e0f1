"""Statement-level parsing: blocks, declarations, functions, conditionals and loops."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import replace

from .stmts import (
    Conditional,
    Stmt,
    StmtBlock,
    StmtBreak,
    StmtCond,
    StmtContinue,
    StmtDefer,
    StmtFnDef,
    StmtFnSig,
    StmtFor,
    StmtForIn,
    StmtRet,
    StmtSimple,
    StmtVar,
    StmtVarDecl,
)
from .tokens import Lexeme, ParseError, TokenStream, TokType


def _copy(lexeme: Lexeme) -> Lexeme:
    return replace(lexeme)


class StatementParser(ABC):
    """Parses statements from a token stream.

    Expressions are delegated to the hooks that a concrete parser provides.
    Every parse method either returns the built node or raises ParseError.
    """

    def __init__(self, tokens: Iterable[Lexeme] | TokenStream) -> None:
        self.stream = tokens if isinstance(tokens, TokenStream) else TokenStream(tokens)

    # Expression hooks, named after the precedence levels of the grammar.

    @abstractmethod
    def parse_expr(self, disable_brace_after_iden: bool = False) -> Stmt:
        """Parse a full expression, including the comma operator."""

    @abstractmethod
    def _parse_expr16(self, disable_brace_after_iden: bool = False) -> Stmt:
        """Parse a ternary-level expression."""

    @abstractmethod
    def _parse_expr15(self, disable_brace_after_iden: bool = False) -> Stmt:
        """Parse an assignment-level expression."""

    @abstractmethod
    def _parse_expr01(self, disable_brace_after_iden: bool = False) -> Stmt:
        """Parse a postfix/member-access expression."""

    # Helpers

    def _fail(self, message: str, lexeme: Lexeme | None = None) -> ParseError:
        lexeme = lexeme if lexeme is not None else self.stream.peek()
        return ParseError(lexeme.loc, message)

    def _found(self, message: str) -> ParseError:
        return self._fail(message + self.stream.peek().describe())

    def _expect(self, tok: TokType, message: str) -> None:
        if not self.stream.acceptn(tok):
            raise self._found(message)

    # Statements

    def parse_block(self, with_brace: bool = True) -> StmtBlock:
        """Parse statements until end of input, or a braced block if ``with_brace``."""
        p = self.stream
        start = p.peek()
        if with_brace:
            self._expect(TokType.LBRACE, "expected opening braces '{' for block, found: ")

        simple = {
            TokType.LET: (self.parse_vardecl, False),
            TokType.IF: (self.parse_conds, True),
            TokType.WHILE: (self.parse_while, True),
            TokType.RETURN: (self.parse_ret, False),
            TokType.CONTINUE: (self.parse_continue, False),
            TokType.BREAK: (self.parse_break, False),
            TokType.DEFER: (self.parse_defer, False),
            TokType.LBRACE: (self.parse_block, True),
        }

        stmts: list[Stmt | None] = []
        while p.is_valid() and (not with_brace or not p.accept(TokType.RBRACE)):
            kind = p.peekt()
            if kind is TokType.FOR:
                if p.peekt(1) is TokType.IDEN and p.peekt(2) is TokType.FIN:
                    stmt = self.parse_for_in()
                else:
                    stmt = self.parse_for()
                skip_cols = True
            elif kind is TokType.INLINE:
                if p.peekt(1) is not TokType.IF:
                    raise self._fail(
                        "expected 'if' after 'inline', found: " + p.peek(1).describe(),
                        p.peek(1),
                    )
                stmt = self.parse_conds()
                skip_cols = True
            elif kind in simple:
                method, skip_cols = simple[kind]
                stmt = method()
            else:
                stmt = self.parse_expr(False)
                skip_cols = False

            if skip_cols or p.acceptn(TokType.COLS):
                stmts.append(stmt)
                continue
            raise self._found("expected semicolon for end of statement, found: ")

        if with_brace:
            self._expect(TokType.RBRACE, "expected closing braces '}' for block, found: ")

        return StmtBlock(start.loc, stmts, not with_brace)

    def parse_var(self, is_fn_arg: bool = False) -> StmtVar:
        """Parse ``name [in Type] = value``; the value is optional for parameters."""
        p = self.stream
        if not p.accept(TokType.IDEN, TokType.STR):
            raise self._found("expected identifier for variable name, found: ")
        name = p.peek()
        p.next()
        in_type: Stmt | None = None
        val: Stmt | None = None

        if p.acceptn(TokType.FIN) and not is_fn_arg:
            try:
                in_type = self._parse_expr01(False)
            except ParseError as exc:
                raise self._fail(
                    f"failed to parse in-type for variable: {name.data}"
                ) from exc

        if p.acceptn(TokType.ASSN):
            val = self.parse_fn_def() if p.accept(TokType.FN) else self._parse_expr16(False)
        elif not is_fn_arg:
            raise self._fail("invalid variable declaration - no value set", name)

        return StmtVar(name.loc, name=_copy(name), in_type=in_type, val=val, is_arg=is_fn_arg)

    def parse_fn_sig(self) -> StmtFnSig:
        """Parse ``fn(params)`` with optional keyword and variadic parameters."""
        p = self.stream
        start = p.peek()
        args: list[StmtVar] = []
        argnames: set[object] = set()
        kwarg: StmtSimple | None = None
        vaarg: StmtSimple | None = None

        self._expect(TokType.FN, "expected 'fn' here, found: ")
        self._expect(TokType.LPAREN, "expected opening parenthesis for function args, found: ")
        if p.acceptn(TokType.RPAREN):
            return StmtFnSig(start.loc, args, kwarg, vaarg)

        while True:
            attempt_kw = p.accept(TokType.STR)
            if not p.accept(TokType.IDEN, TokType.STR):
                raise self._found("expected identifier/str for argument, found: ")
            current = p.peek()
            if current.data in argnames:
                raise self._fail(
                    "this argument name is already used before in this function signature"
                )
            argnames.add(current.data)
            if attempt_kw:
                if kwarg is not None:
                    raise self._fail(
                        "function cannot have multiple keyword arguments (previous: "
                        f"{kwarg.val.data})"
                    )
                kwarg = StmtSimple(current.loc, _copy(current))
                p.next()
            elif p.peekt(1) is TokType.PRE_VA:
                p.peek(1).tok = TokType.POST_VA
                vaarg = StmtSimple(current.loc, _copy(current))
                p.next()
                p.next()
            else:
                try:
                    args.append(self.parse_var(True))
                except ParseError as exc:
                    raise self._fail("failed to parse function definition parameter") from exc
            if not p.acceptn(TokType.COMMA):
                break
            if vaarg is not None:
                raise self._fail("no parameter can exist after variadic")

        self._expect(TokType.RPAREN, "expected closing parenthesis after function args, found: ")
        return StmtFnSig(start.loc, args, kwarg, vaarg)

    def parse_fn_def(self) -> StmtFnDef:
        """Parse a function signature and body, ending the body with a return."""
        start = self.stream.peek()
        sig = self.parse_fn_sig()
        blk = self.parse_block()
        if blk.stmts and not isinstance(blk.stmts[-1], StmtRet):
            blk.stmts.append(StmtRet(blk.loc, None))
        return StmtFnDef(start.loc, sig, blk)

    def parse_vardecl(self) -> StmtVarDecl:
        """Parse ``let a = x, b = y``."""
        p = self.stream
        start = p.peek()
        self._expect(TokType.LET, "expected 'let' keyword here, found: ")
        decls: list[StmtVar] = []
        while p.accept(TokType.IDEN, TokType.STR):
            decls.append(self.parse_var(False))
            if not p.acceptn(TokType.COMMA):
                break
        return StmtVarDecl(start.loc, decls)

    def parse_conds(self) -> StmtCond:
        """Parse an ``[inline] if / elif / else`` chain."""
        p = self.stream
        start = p.peek()
        is_inline = p.acceptn(TokType.INLINE)
        branches: list[Conditional] = []
        expect_cond = True

        while True:
            cond: Stmt | None = None
            if expect_cond:
                if not p.acceptn(TokType.IF, TokType.ELIF):
                    raise self._found("expected 'if' here, found: ")
                try:
                    cond = self._parse_expr15(True)
                except ParseError as exc:
                    raise self._fail(
                        "failed to parse condition for if/else if statement"
                    ) from exc
            try:
                blk = self.parse_block()
            except ParseError as exc:
                raise self._fail("failed to parse block for conditional") from exc
            # An inline conditional's block does not open its own scope.
            if is_inline:
                blk.is_top = True
            branches.append(Conditional(cond, blk))

            if p.accept(TokType.ELIF):
                expect_cond = True
            elif p.acceptn(TokType.ELSE):
                expect_cond = False
            else:
                break

        return StmtCond(start.loc, branches)

    def parse_for_in(self) -> StmtForIn:
        """Parse ``for name in expr { ... }``."""
        p = self.stream
        start = p.peek()
        self._expect(TokType.FOR, "expected 'for' here, found: ")
        if not p.accept(TokType.IDEN):
            raise self._found("expected iterator (identifier) here, found: ")
        iterator = p.peek()
        p.next()
        self._expect(TokType.FIN, "expected 'in' here, found: ")
        try:
            in_expr = self._parse_expr15(True)
        except ParseError as exc:
            raise self._fail("failed to parse expression for 'in'") from exc
        if not p.accept(TokType.LBRACE):
            raise self._found("expected block for for-in construct, found: ")
        try:
            blk = self.parse_block()
        except ParseError as exc:
            raise self._fail("failed to parse block for for-in construct") from exc
        return StmtForIn(start.loc, _copy(iterator), in_expr, blk)

    def parse_for(self) -> StmtFor:
        """Parse ``for init; cond; incr { ... }`` where every part may be empty."""
        p = self.stream
        start = p.peek()
        init: Stmt | None = None
        cond: Stmt | None = None
        incr: Stmt | None = None

        self._expect(TokType.FOR, "expected 'for' here, found: ")

        if not p.acceptn(TokType.COLS):
            init = self.parse_vardecl() if p.accept(TokType.LET) else self.parse_expr(False)
            self._expect(TokType.COLS, "expected semicolon here, found: ")

        if not p.acceptn(TokType.COLS):
            cond = self._parse_expr16(False)
            self._expect(TokType.COLS, "expected semicolon here, found: ")

        if not p.accept(TokType.LBRACE):
            incr = self.parse_expr(True)
            if not p.accept(TokType.LBRACE):
                raise self._found("expected braces for body here, found: ")

        try:
            blk = self.parse_block()
        except ParseError as exc:
            raise self._fail("failed to parse block for 'for' construct") from exc
        return StmtFor(start.loc, init, cond, incr, blk)

    def parse_while(self) -> StmtFor:
        """Parse ``while cond { ... }`` as a loop with only a condition."""
        start = self.stream.peek()
        self._expect(TokType.WHILE, "expected 'while' here, found: ")
        cond = self._parse_expr16(True)
        try:
            blk = self.parse_block()
        except ParseError as exc:
            raise self._fail("failed to parse block for 'for' construct") from exc
        return StmtFor(start.loc, None, cond, None, blk)

    def parse_ret(self) -> StmtRet:
        """Parse ``return [value]``."""
        start = self.stream.peek()
        self._expect(TokType.RETURN, "expected 'return' here, found: ")
        val: Stmt | None = None
        if not self.stream.accept(TokType.COLS):
            try:
                val = self._parse_expr16(False)
            except ParseError as exc:
                raise self._fail("failed to parse expression for return value") from exc
        return StmtRet(start.loc, val)

    def parse_continue(self) -> StmtContinue:
        """Parse ``continue``."""
        start = self.stream.peek()
        self._expect(TokType.CONTINUE, "expected 'continue' here, found: ")
        return StmtContinue(start.loc)

    def parse_break(self) -> StmtBreak:
        """Parse ``break``."""
        start = self.stream.peek()
        self._expect(TokType.BREAK, "expected 'break' here, found: ")
        return StmtBreak(start.loc)

    def parse_defer(self) -> StmtDefer:
        """Parse ``defer expr``."""
        start = self.stream.peek()
        self._expect(TokType.DEFER, "expected 'defer' here, found: ")
        try:
            val = self._parse_expr16(False)
        except ParseError as exc:
            raise self._fail("failed to parse expression for return value") from exc
        return StmtDefer(start.loc, val)