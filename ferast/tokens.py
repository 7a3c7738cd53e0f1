"""Token types, lexemes and a cursor over a token list."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum


class TokType(Enum):
    """Kinds of tokens; each value is the token's printable form."""

    INT = "int"
    FLT = "flt"
    STR = "str"
    IDEN = "iden"
    FTRUE = "true"
    FFALSE = "false"
    NIL = "nil"

    LET = "let"
    FN = "fn"
    IF = "if"
    ELIF = "elif"
    ELSE = "else"
    FOR = "for"
    FIN = "in"
    WHILE = "while"
    RETURN = "return"
    CONTINUE = "continue"
    BREAK = "break"
    DEFER = "defer"
    INLINE = "inline"
    OR = "or"

    ASSN = "="
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    POWER = "**"
    ROOT = "//"
    ADD_ASSN = "+="
    SUB_ASSN = "-="
    MUL_ASSN = "*="
    DIV_ASSN = "/="
    MOD_ASSN = "%="
    UADD = "u+"
    USUB = "u-"
    UMUL = "u*"
    UAND = "u&"
    XINC = "x++"
    INCX = "++x"
    XDEC = "x--"
    DECX = "--x"

    LAND = "&&"
    LOR = "||"
    LNOT = "!"
    EQ = "=="
    NE = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="

    BAND = "&"
    BOR = "|"
    BNOT = "~"
    BXOR = "^"
    BAND_ASSN = "&="
    BOR_ASSN = "|="
    BNOT_ASSN = "~="
    BXOR_ASSN = "^="
    LSHIFT = "<<"
    RSHIFT = ">>"
    LSHIFT_ASSN = "<<="
    RSHIFT_ASSN = ">>="

    SUBS = "[]"
    FNCALL = "()"
    STCALL = "{}"
    PRE_VA = "pre..."
    POST_VA = "post..."

    DOT = "."
    ARROW = "->"
    QUEST = "?"
    COL = ":"
    COLS = ";"
    COMMA = ","
    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"
    LBRACK = "["
    RBRACK = "]"

    FEOF = "<EOF>"
    INVALID = "<INVALID>"


_LITERALS = frozenset(
    {TokType.INT, TokType.FLT, TokType.STR, TokType.FTRUE, TokType.FFALSE, TokType.NIL}
)
_DATA = _LITERALS | {TokType.IDEN}


@dataclass(frozen=True)
class ModuleLoc:
    """A position in a source module."""

    path: str = ""
    line: int = 0
    col: int = 0

    def __str__(self) -> str:
        if self.path:
            return f"{self.path}:{self.line}:{self.col}"
        return f"{self.line}:{self.col}"


@dataclass
class Lexeme:
    """A token with its optional data and location."""

    tok: TokType = TokType.INVALID
    data: str | int | float | None = None
    loc: ModuleLoc = field(default_factory=ModuleLoc)

    def is_data(self) -> bool:
        """True for identifiers and literal values."""
        return self.tok in _DATA

    def is_literal(self) -> bool:
        """True for literal values (numbers, strings, booleans, nil)."""
        return self.tok in _LITERALS

    def is_valid(self) -> bool:
        """False only for the invalid token."""
        return self.tok is not TokType.INVALID

    def describe(self) -> str:
        """Printable form of the token type."""
        return self.tok.value

    def __str__(self) -> str:
        if self.data is None:
            return self.describe()
        return f"{self.describe()}: {self.data}"


class ParseError(Exception):
    """Raised when parsing or a pass fails at a given location."""

    def __init__(self, loc: ModuleLoc, message: str) -> None:
        super().__init__(f"{loc}: {message}")
        self.loc = loc
        self.message = message


class TokenStream:
    """Cursor over a list of lexemes with lookahead and lookbehind."""

    def __init__(self, tokens: Iterable[Lexeme], begin: int = 0) -> None:
        self._toks = list(tokens)
        self._idx = begin
        self._invalid = Lexeme(TokType.INVALID)
        self._eof = Lexeme(TokType.FEOF)

    @property
    def index(self) -> int:
        return self._idx

    def peek(self, offset: int = 0) -> Lexeme:
        """Lexeme at ``offset`` from the cursor, or end-of-file when out of range."""
        pos = self._idx + offset
        if pos < 0 or pos >= len(self._toks):
            return self._eof
        return self._toks[pos]

    def peekt(self, offset: int = 0) -> TokType:
        """Token type at ``offset`` from the cursor."""
        return self.peek(offset).tok

    def next(self) -> Lexeme:
        """Advance the cursor and return the new current lexeme."""
        self._idx += 1
        return self.peek()

    def nextt(self) -> TokType:
        """Advance the cursor and return the new current token type."""
        return self.next().tok

    def prev(self) -> Lexeme:
        """Step back; at the start, stay put and return the invalid lexeme."""
        if self._idx == 0:
            return self._invalid
        self._idx -= 1
        return self._toks[self._idx]

    def prevt(self) -> TokType:
        """Step back and return the token type there."""
        return self.prev().tok

    def at(self, idx: int) -> Lexeme:
        """Lexeme at an absolute index, or the invalid lexeme when out of range."""
        if idx < 0 or idx >= len(self._toks):
            return self._invalid
        return self._toks[idx]

    def accept(self, *args: TokType) -> bool:
        """True if the current token is one of ``args``."""
        return self.peekt() in args

    def acceptn(self, *args: TokType) -> bool:
        """Like :meth:`accept`, but also advances past a matching token."""
        if not self.accept(*args):
            return False
        self.next()
        return True

    def acceptd(self) -> bool:
        """True if the current token carries data."""
        return self.peek().is_data()

    def sett(self, tok_type: TokType) -> None:
        """Change the type of the current token."""
        if 0 <= self._idx < len(self._toks):
            self._toks[self._idx].tok = tok_type

    def is_valid(self) -> bool:
        """True while the cursor has not reached end-of-file."""
        return self.peekt() is not TokType.FEOF