"""Tree passes and the manager that runs them in order."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator

from .stmts import Stmt


class Pass(ABC):
    """A transformation applied to a whole syntax tree."""

    def __init__(self, passid: int = 0) -> None:
        self.passid = passid

    @abstractmethod
    def visit(self, stmt: Stmt) -> Stmt:
        """Visit ``stmt`` and return the tree that replaces it.

        Raise ParseError when the tree cannot be processed.
        """


class PassManager:
    """Runs a sequence of passes over a tree, each on the result of the previous one."""

    def __init__(self, passes: Iterable[Pass] = ()) -> None:
        self._passes: list[Pass] = list(passes)

    def add(self, pass_: Pass) -> Pass:
        """Append ``pass_`` to the sequence and return it."""
        self._passes.append(pass_)
        return pass_

    def visit(self, tree: Stmt) -> Stmt:
        """Run every pass in order and return the resulting tree.

        The first pass that raises stops the run; later passes are not applied.
        """
        for pass_ in self._passes:
            tree = pass_.visit(tree)
        return tree

    def __len__(self) -> int:
        return len(self._passes)

    def __iter__(self) -> Iterator[Pass]:
        return iter(self._passes)