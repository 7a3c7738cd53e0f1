"""Constant folding of operators applied to literal operands."""

from __future__ import annotations

import operator
from collections.abc import Callable

from .stmts import StmtSimple
from .tokens import Lexeme, ParseError, TokType

_INT64_MIN = -(1 << 63)
_INT64_SPAN = 1 << 64
_NUMERIC = frozenset({TokType.INT, TokType.FLT})

_Handler = Callable[[Lexeme, "Lexeme | None", Lexeme], "tuple[TokType, object] | None"]


def _wrap(value: int) -> int:
    """Wrap an integer into the signed 64-bit range."""
    return (value - _INT64_MIN) % _INT64_SPAN + _INT64_MIN


def _tok(lexeme: Lexeme | None) -> TokType | None:
    return lexeme.tok if lexeme is not None else None


def _as_number(lexeme: Lexeme) -> int | float:
    if lexeme.tok is TokType.FTRUE:
        return 1
    if lexeme.tok in _NUMERIC:
        return lexeme.data  # type: ignore[return-value]
    return 0


def _as_int(lexeme: Lexeme) -> int:
    return int(_as_number(lexeme))


def _truthy(lexeme: Lexeme) -> bool:
    return bool(lexeme.data)


def _bool(value: bool) -> tuple[TokType, object]:
    return (TokType.FTRUE if value else TokType.FFALSE, None)


def _trunc_div(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


def _numeric(
    left: Lexeme,
    right: Lexeme | None,
    int_op: Callable[[int, int], int],
    float_op: Callable[[float, float], float],
) -> tuple[TokType, object] | None:
    lt, rt = left.tok, _tok(right)
    if lt is TokType.INT and rt is TokType.INT:
        return (TokType.INT, _wrap(int_op(left.data, right.data)))  # type: ignore[arg-type,union-attr]
    if lt in _NUMERIC and rt in _NUMERIC:
        return (TokType.FLT, float_op(float(left.data), float(right.data)))  # type: ignore[arg-type,union-attr]
    return None


def _fold_add(left: Lexeme, right: Lexeme | None, oper: Lexeme):
    if left.tok is TokType.STR and _tok(right) is TokType.STR:
        return (TokType.STR, f"{left.data}{right.data}")  # type: ignore[union-attr]
    return _numeric(left, right, operator.add, operator.add)


def _fold_sub(left: Lexeme, right: Lexeme | None, oper: Lexeme):
    return _numeric(left, right, operator.sub, operator.sub)


def _fold_mul(left: Lexeme, right: Lexeme | None, oper: Lexeme):
    rt = _tok(right)
    if left.tok is TokType.STR and rt is TokType.INT:
        return (TokType.STR, str(left.data) * right.data)  # type: ignore[operator,union-attr]
    if left.tok is TokType.INT and rt is TokType.STR:
        return (TokType.STR, str(right.data) * left.data)  # type: ignore[operator,union-attr]
    return _numeric(left, right, operator.mul, operator.mul)


def _fold_div(left: Lexeme, right: Lexeme | None, oper: Lexeme):
    if right is not None and right.tok in _NUMERIC and right.data == 0:
        raise ParseError(oper.loc, "Attempted to divide by zero during constant folding pass")
    return _numeric(left, right, _trunc_div, operator.truediv)


def _fold_mod(left: Lexeme, right: Lexeme | None, oper: Lexeme):
    if left.tok is not TokType.INT or _tok(right) is not TokType.INT:
        return None
    a, b = left.data, right.data  # type: ignore[union-attr]
    if b == 0:
        raise ParseError(oper.loc, "Attempted modulo by zero during constant folding pass")
    return (TokType.INT, _wrap(a - b * _trunc_div(a, b)))  # type: ignore[operator]


def _step(delta: int) -> _Handler:
    def fold(left: Lexeme, right: Lexeme | None, oper: Lexeme):
        if left.tok is TokType.INT:
            return (TokType.INT, _wrap(left.data + delta))  # type: ignore[operator]
        if left.tok is TokType.FLT:
            return (TokType.FLT, float(left.data) + delta)  # type: ignore[arg-type]
        return None

    return fold


def _fold_negate(left: Lexeme, right: Lexeme | None, oper: Lexeme):
    if left.tok is TokType.INT:
        return (TokType.INT, _wrap(-left.data))  # type: ignore[operator]
    if left.tok is TokType.FLT:
        return (TokType.FLT, -float(left.data))  # type: ignore[arg-type]
    return None


def _fold_land(left: Lexeme, right: Lexeme | None, oper: Lexeme):
    lt, rt = left.tok, _tok(right)
    if lt in _NUMERIC and rt in _NUMERIC:
        return _bool(_truthy(left) and _truthy(right))  # type: ignore[arg-type]
    if TokType.FFALSE in (lt, rt):
        return _bool(False)
    if lt is TokType.FTRUE and rt is TokType.FTRUE:
        return _bool(True)
    if lt in _NUMERIC and rt is TokType.FTRUE:
        return _bool(_truthy(left))
    return None


def _fold_lor(left: Lexeme, right: Lexeme | None, oper: Lexeme):
    lt, rt = left.tok, _tok(right)
    if lt in _NUMERIC and rt in _NUMERIC:
        return _bool(_truthy(left) or _truthy(right))  # type: ignore[arg-type]
    if TokType.FTRUE in (lt, rt):
        return _bool(True)
    if lt is TokType.FFALSE and rt is TokType.FFALSE:
        return _bool(False)
    if lt in _NUMERIC and rt is TokType.FFALSE:
        return _bool(_truthy(left))
    return None


def _fold_lnot(left: Lexeme, right: Lexeme | None, oper: Lexeme):
    if left.tok in _NUMERIC:
        return _bool(not _truthy(left))
    if left.tok is TokType.FTRUE:
        return _bool(False)
    if left.tok is TokType.FFALSE:
        return _bool(True)
    return None


def _compare(cmp: Callable[[object, object], bool], allow_str: bool) -> _Handler:
    def fold(left: Lexeme, right: Lexeme | None, oper: Lexeme):
        if right is None:
            return None
        lt, rt = left.tok, right.tok
        if TokType.STR in (lt, rt):
            if allow_str and lt is rt:
                return _bool(cmp(left.data, right.data))
            return None
        if TokType.FLT in (lt, rt):
            return _bool(cmp(float(_as_number(left)), float(_as_number(right))))
        return _bool(cmp(_as_int(left), _as_int(right)))

    return fold


def _bitwise(op: Callable[[int, int], int]) -> _Handler:
    def fold(left: Lexeme, right: Lexeme | None, oper: Lexeme):
        if right is None:
            return None
        if {left.tok, right.tok} & {TokType.STR, TokType.FLT}:
            return None
        return (TokType.INT, _wrap(op(_as_int(left), _as_int(right))))

    return fold


def _shift(op: Callable[[int, int], int]) -> _Handler:
    def fold(left: Lexeme, right: Lexeme | None, oper: Lexeme):
        if right is None:
            return None
        if {left.tok, right.tok} & {TokType.STR, TokType.FLT}:
            return None
        count = _as_int(right)
        if not 0 <= count < 64:
            return None
        return (TokType.INT, _wrap(op(_as_int(left), count)))

    return fold


def _fold_bnot(left: Lexeme, right: Lexeme | None, oper: Lexeme):
    if left.tok in (TokType.STR, TokType.FLT):
        return None
    return (TokType.INT, _wrap(~_as_int(left)))


_HANDLERS: dict[TokType, _Handler] = {
    TokType.ADD: _fold_add,
    TokType.SUB: _fold_sub,
    TokType.MUL: _fold_mul,
    TokType.DIV: _fold_div,
    TokType.MOD: _fold_mod,
    TokType.XINC: _step(0),
    TokType.INCX: _step(1),
    TokType.XDEC: _step(0),
    TokType.DECX: _step(-1),
    TokType.UADD: _step(0),
    TokType.USUB: _fold_negate,
    TokType.LAND: _fold_land,
    TokType.LOR: _fold_lor,
    TokType.LNOT: _fold_lnot,
    TokType.EQ: _compare(operator.eq, True),
    TokType.NE: _compare(operator.ne, True),
    TokType.LT: _compare(operator.lt, False),
    TokType.GT: _compare(operator.gt, False),
    TokType.LE: _compare(operator.le, False),
    TokType.GE: _compare(operator.ge, False),
    TokType.BAND: _bitwise(operator.and_),
    TokType.BOR: _bitwise(operator.or_),
    TokType.BXOR: _bitwise(operator.xor),
    TokType.BNOT: _fold_bnot,
    TokType.LSHIFT: _shift(operator.lshift),
    TokType.RSHIFT: _shift(operator.rshift),
}


def fold_constants(
    left: StmtSimple, right: StmtSimple | None, oper: Lexeme
) -> StmtSimple | None:
    """Fold ``left oper right`` (or ``oper left`` when ``right`` is None).

    Returns the literal that replaces the expression, or None when it cannot be
    folded. Raises ParseError on a division by zero.
    """
    if not left.val.is_literal():
        return None
    if right is not None and not right.val.is_literal():
        return None
    handler = _HANDLERS.get(oper.tok)
    if handler is None:
        return None
    result = handler(left.val, right.val if right is not None else None, oper)
    if result is None:
        return None
    tok, data = result
    return StmtSimple(left.loc, Lexeme(tok, data, left.loc))