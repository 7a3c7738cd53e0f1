import pytest

from ferast.passes import Pass, PassManager
from ferast.stmts import StmtBreak, StmtRet
from ferast.tokens import ModuleLoc, ParseError

LOC = ModuleLoc("main.fer", 1, 1)


class RecordingPass(Pass):
    def __init__(self, name, log, passid=0):
        super().__init__(passid)
        self.name = name
        self.log = log

    def visit(self, stmt):
        self.log.append(self.name)
        return stmt


class WrapInReturn(Pass):
    def visit(self, stmt):
        return StmtRet(stmt.loc, stmt)


class FailingPass(Pass):
    def visit(self, stmt):
        raise ParseError(stmt.loc, "pass failed")


def test_pass_is_abstract():
    with pytest.raises(TypeError):
        Pass()


def test_empty_manager_returns_same_tree():
    tree = StmtBreak(LOC)
    assert PassManager().visit(tree) is tree


def test_passes_run_in_order_added():
    log = []
    manager = PassManager()
    manager.add(RecordingPass("first", log))
    manager.add(RecordingPass("second", log))
    manager.visit(StmtBreak(LOC))
    assert log == ["first", "second"]


def test_each_pass_sees_previous_result():
    tree = StmtBreak(LOC)
    manager = PassManager([WrapInReturn(), WrapInReturn()])
    result = manager.visit(tree)
    assert isinstance(result, StmtRet)
    assert isinstance(result.val, StmtRet)
    assert result.val.val is tree


def test_failure_stops_later_passes():
    log = []
    manager = PassManager([FailingPass(), RecordingPass("after", log)])
    with pytest.raises(ParseError) as info:
        manager.visit(StmtBreak(LOC))
    assert info.value.loc == LOC
    assert log == []


def test_add_returns_pass_and_counts():
    log = []
    manager = PassManager()
    added = RecordingPass("x", log, passid=4)
    assert manager.add(added) is added
    assert len(manager) == 1
    assert list(manager) == [added]
    assert added.passid == 4