"""Syntax tree nodes and their tree-shaped textual dump."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar

from .tokens import Lexeme, ModuleLoc
from .treeio import TreeWriter


class StmtType(Enum):
    """Kinds of statements; each value is the kind's readable name."""

    BLOCK = "block"
    SIMPLE = "simple"
    EXPR = "expression"
    FNARGS = "function args"
    VAR = "variable declaration base"
    FNSIG = "function signature"
    FNDEF = "function definition"
    VARDECL = "variable declaration"
    COND = "conditional"
    FOR = "for loop"
    FORIN = "forin loop"
    RET = "return"
    CONTINUE = "continue"
    BREAK = "break"
    DEFER = "defer"


@dataclass
class Stmt(ABC):
    """Base of all syntax tree nodes."""

    loc: ModuleLoc

    stype: ClassVar[StmtType]

    def type_name(self) -> str:
        """Readable name of this statement's kind."""
        return self.stype.value

    @abstractmethod
    def disp(self, writer: TreeWriter, has_next: bool = False) -> None:
        """Write this node and its children to ``writer``."""

    def dump(self) -> str:
        """Return the tree dump of this node as text."""
        writer = TreeWriter()
        self.disp(writer, False)
        return writer.getvalue()


@dataclass
class StmtBlock(Stmt):
    """A sequence of statements; ``is_top`` marks a block without its own scope."""

    stmts: list[Stmt | None] = field(default_factory=list)
    is_top: bool = False

    stype: ClassVar[StmtType] = StmtType.BLOCK

    def disp(self, writer: TreeWriter, has_next: bool = False) -> None:
        writer.push(has_next)
        writer.write(has_next, "Block [top = ", "yes" if self.is_top else "no", "]\n")
        last = len(self.stmts) - 1
        for i, stmt in enumerate(self.stmts):
            if stmt is None:
                writer.push(has_next)
                writer.write(i != last, "<Source End>\n")
                writer.pop()
                continue
            stmt.disp(writer, i != last)
        writer.pop()


@dataclass
class StmtSimple(Stmt):
    """A single data token: identifier or literal."""

    val: Lexeme

    stype: ClassVar[StmtType] = StmtType.SIMPLE

    def disp(self, writer: TreeWriter, has_next: bool = False) -> None:
        writer.push(has_next)
        writer.write(has_next, "Simple: ", str(self.val), "\n")
        writer.pop()


@dataclass
class StmtFnArgs(Stmt):
    """Arguments of a function or struct call, each possibly unpacked."""

    args: list[Stmt] = field(default_factory=list)
    unpack_vector: list[bool] = field(default_factory=list)

    stype: ClassVar[StmtType] = StmtType.FNARGS

    def unpack_arg(self, idx: int) -> bool:
        """Whether the argument at ``idx`` is unpacked."""
        return idx < len(self.unpack_vector) and self.unpack_vector[idx]

    def disp(self, writer: TreeWriter, has_next: bool = False) -> None:
        writer.push(has_next)
        writer.write(has_next, "Function Args: ", "(empty)" if not self.args else "", "\n")
        last = len(self.args) - 1
        for i, arg in enumerate(self.args):
            writer.push(i != last)
            writer.write(
                i != last, "Arg: [unpack = ", "true" if self.unpack_arg(i) else "false", "]\n"
            )
            arg.disp(writer, False)
            writer.pop()
        writer.pop()


@dataclass
class StmtExpr(Stmt):
    """An operator applied to one or two operands, with an optional or-block."""

    lhs: Stmt | None = None
    oper: Lexeme = field(default_factory=Lexeme)
    rhs: Stmt | None = None
    or_blk: StmtBlock | None = None
    or_blk_var: Lexeme | None = None

    stype: ClassVar[StmtType] = StmtType.EXPR

    def __post_init__(self) -> None:
        if self.or_blk_var is None:
            self.or_blk_var = Lexeme(loc=self.loc)

    def set_or(self, block: StmtBlock | None, var: Lexeme | None = None) -> None:
        """Attach an or-block and the variable that receives the error."""
        self.or_blk = block
        self.or_blk_var = var if var is not None else Lexeme(loc=self.loc)

    def disp(self, writer: TreeWriter, has_next: bool = False) -> None:
        oper_valid = self.oper.is_valid()
        writer.push(has_next)
        writer.write(has_next, "Expression\n")
        if self.lhs is not None:
            more = oper_valid or self.rhs is not None or self.or_blk is not None
            writer.push(more)
            writer.write(more, "LHS:\n")
            self.lhs.disp(writer, False)
            writer.pop()
        if oper_valid:
            more = self.rhs is not None or self.or_blk is not None
            writer.push(more)
            writer.write(more, "Oper: ", self.oper.describe(), "\n")
            writer.pop()
        if self.rhs is not None:
            more = self.or_blk is not None
            writer.push(more)
            writer.write(more, "RHS:\n")
            self.rhs.disp(writer, False)
            writer.pop()
        if self.or_blk is not None:
            writer.push(False)
            var = self.or_blk_var
            name = var.data if var is not None and var.is_data() else "<none>"
            writer.write(False, "Or: ", name, "\n")
            self.or_blk.disp(writer, False)
            writer.pop()
        writer.pop()


@dataclass
class StmtVar(Stmt):
    """A variable or parameter with optional in-type and value."""

    name: Lexeme
    in_type: Stmt | None = None
    val: Stmt | None = None
    is_arg: bool = False

    stype: ClassVar[StmtType] = StmtType.VAR

    def disp(self, writer: TreeWriter, has_next: bool = False) -> None:
        has_val = self.val is not None
        writer.push(has_next)
        writer.write(has_next, "Argument: " if self.is_arg else "Variable: ", self.name.data, "\n")
        if self.in_type is not None:
            writer.push(has_val)
            writer.write(has_val, "In:\n")
            self.in_type.disp(writer, has_val)
            writer.pop()
        if self.val is not None:
            writer.push(False)
            writer.write(False, "Value:\n")
            self.val.disp(writer, False)
            writer.pop()
        writer.pop()


@dataclass
class StmtFnSig(Stmt):
    """Function parameters, with optional keyword and variadic arguments."""

    args: list[StmtVar] = field(default_factory=list)
    kwarg: StmtSimple | None = None
    vaarg: StmtSimple | None = None

    stype: ClassVar[StmtType] = StmtType.FNSIG

    def disp(self, writer: TreeWriter, has_next: bool = False) -> None:
        has_args = len(self.args) > 0
        writer.push(has_next)
        writer.write(has_next, "Function signature\n")
        if self.kwarg is not None:
            more = self.vaarg is not None or has_args
            writer.push(True)
            writer.write(more, "Keyword Argument:\n")
            self.kwarg.disp(writer, more)
            writer.pop()
        if self.vaarg is not None:
            writer.push(True)
            writer.write(has_args, "Variadic Argument:\n")
            self.vaarg.disp(writer, has_args)
            writer.pop()
        if has_args:
            writer.push(False)
            writer.write(False, "Parameters\n")
            last = len(self.args) - 1
            for i, arg in enumerate(self.args):
                arg.disp(writer, i != last)
            writer.pop()
        writer.pop()


@dataclass
class StmtFnDef(Stmt):
    """A function definition: signature and body."""

    sig: StmtFnSig
    blk: StmtBlock

    stype: ClassVar[StmtType] = StmtType.FNDEF

    def disp(self, writer: TreeWriter, has_next: bool = False) -> None:
        writer.push(has_next)
        writer.write(has_next, "Function definition\n")
        writer.push(True)
        writer.write(True, "Function Signature:\n")
        self.sig.disp(writer, False)
        writer.pop()
        writer.push(False)
        writer.write(False, "Function Block:\n")
        self.blk.disp(writer, False)
        writer.pop(2)


@dataclass
class StmtVarDecl(Stmt):
    """A ``let`` statement declaring one or more variables."""

    decls: list[StmtVar] = field(default_factory=list)

    stype: ClassVar[StmtType] = StmtType.VARDECL

    def disp(self, writer: TreeWriter, has_next: bool = False) -> None:
        writer.push(has_next)
        writer.write(has_next, "Variable declarations\n")
        last = len(self.decls) - 1
        for i, decl in enumerate(self.decls):
            decl.disp(writer, i != last)
        writer.pop()


@dataclass
class Conditional:
    """One branch of a conditional; ``cond`` is None for an else branch."""

    cond: Stmt | None = None
    blk: StmtBlock | None = None


@dataclass
class StmtCond(Stmt):
    """An if / elif / else chain."""

    conds: list[Conditional] = field(default_factory=list)

    stype: ClassVar[StmtType] = StmtType.COND

    def disp(self, writer: TreeWriter, has_next: bool = False) -> None:
        first_blk = self.conds[0].blk if self.conds else None
        is_inline = first_blk is not None and first_blk.is_top
        writer.push(has_next)
        writer.write(has_next, "Conditional [is_inline: ", "true" if is_inline else "false", "\n")
        last = len(self.conds) - 1
        for i, branch in enumerate(self.conds):
            writer.push(i != last)
            writer.write(i != last, "Branch:\n")
            if branch.cond is not None:
                writer.push(True)
                writer.write(True, "Condition:\n")
                branch.cond.disp(writer, False)
                writer.pop()
            writer.push(False)
            writer.write(False, "Block:\n")
            if branch.blk is not None:
                branch.blk.disp(writer, False)
            writer.pop(2)
        writer.pop()


@dataclass
class StmtFor(Stmt):
    """A for or while loop; every part is optional."""

    init: Stmt | None = None
    cond: Stmt | None = None
    incr: Stmt | None = None
    blk: StmtBlock | None = None

    stype: ClassVar[StmtType] = StmtType.FOR

    def disp(self, writer: TreeWriter, has_next: bool = False) -> None:
        writer.push(has_next)
        writer.write(has_next, "For/While\n")
        parts = [
            ("Init:\n", self.init),
            ("Condition:\n", self.cond),
            ("Increment:\n", self.incr),
            ("Block:\n", self.blk),
        ]
        for pos, (title, part) in enumerate(parts):
            if part is None:
                continue
            more = any(rest is not None for _, rest in parts[pos + 1:])
            writer.push(more)
            writer.write(more, title)
            part.disp(writer, False)
            writer.pop()
        writer.pop()


@dataclass
class StmtForIn(Stmt):
    """A loop over the values an expression yields."""

    iter: Lexeme
    in_expr: Stmt
    blk: StmtBlock | None = None

    stype: ClassVar[StmtType] = StmtType.FORIN

    def disp(self, writer: TreeWriter, has_next: bool = False) -> None:
        has_blk = self.blk is not None
        writer.push(has_next)
        writer.write(has_next, "For each: ", self.iter.data, "\n")
        writer.push(has_blk)
        writer.write(has_blk, "In-Expr:\n")
        self.in_expr.disp(writer, False)
        writer.pop()
        if self.blk is not None:
            writer.push(False)
            writer.write(False, "Block:\n")
            self.blk.disp(writer, False)
            writer.pop()
        writer.pop()


@dataclass
class StmtRet(Stmt):
    """A return statement with an optional value."""

    val: Stmt | None = None

    stype: ClassVar[StmtType] = StmtType.RET

    def disp(self, writer: TreeWriter, has_next: bool = False) -> None:
        writer.push(has_next)
        writer.write(has_next, "Return\n")
        if self.val is not None:
            writer.push(False)
            writer.write(False, "Value:\n")
            self.val.disp(writer, False)
            writer.pop()
        writer.pop()


@dataclass
class StmtContinue(Stmt):
    """A continue statement."""

    stype: ClassVar[StmtType] = StmtType.CONTINUE

    def disp(self, writer: TreeWriter, has_next: bool = False) -> None:
        writer.push(has_next)
        writer.write(has_next, "Continue\n")
        writer.pop()


@dataclass
class StmtBreak(Stmt):
    """A break statement."""

    stype: ClassVar[StmtType] = StmtType.BREAK

    def disp(self, writer: TreeWriter, has_next: bool = False) -> None:
        writer.push(has_next)
        writer.write(has_next, "Break\n")
        writer.pop()


@dataclass
class StmtDefer(Stmt):
    """A defer statement holding the expression to run at scope exit."""

    val: Stmt | None = None

    stype: ClassVar[StmtType] = StmtType.DEFER

    def disp(self, writer: TreeWriter, has_next: bool = False) -> None:
        writer.push(has_next)
        writer.write(has_next, "Defer\n")
        if self.val is not None:
            writer.push(False)
            writer.write(False, "Value:\n")
            self.val.disp(writer, False)
            writer.pop()
        writer.pop()