import pytest

from ferast.tokens import Lexeme, ModuleLoc, ParseError, TokenStream, TokType


def make_stream(*types):
    return TokenStream([Lexeme(t, loc=ModuleLoc("m", 1, i)) for i, t in enumerate(types)])


def test_lexeme_defaults_invalid():
    lex = Lexeme()
    assert lex.tok is TokType.INVALID
    assert not lex.is_valid()


@pytest.mark.parametrize("tok", [TokType.INT, TokType.FLT, TokType.STR, TokType.FTRUE])
def test_literals_are_data(tok):
    lex = Lexeme(tok)
    assert lex.is_literal()
    assert lex.is_data()


def test_identifier_is_data_not_literal():
    lex = Lexeme(TokType.IDEN, "x")
    assert lex.is_data()
    assert not lex.is_literal()


def test_operator_is_not_data():
    lex = Lexeme(TokType.ADD)
    assert not lex.is_data()
    assert lex.is_valid()


def test_describe_uses_spelling():
    assert Lexeme(TokType.LBRACE).describe() == "{"
    assert Lexeme(TokType.COLS).describe() == TokType.COLS.value


def test_str_includes_data():
    assert str(Lexeme(TokType.IDEN, "name")) == TokType.IDEN.value + ": name"


def test_parse_error_carries_location():
    loc = ModuleLoc("file", 3, 4)
    err = ParseError(loc, "bad")
    assert err.loc == loc
    assert err.message == "bad"
    assert str(err).endswith("bad")
    assert str(loc) in str(err)


def test_peek_and_offsets():
    s = make_stream(TokType.LET, TokType.IDEN, TokType.ASSN)
    assert s.peekt() is TokType.LET
    assert s.peekt(2) is TokType.ASSN
    assert s.peekt(3) is TokType.FEOF
    assert s.peekt(-1) is TokType.FEOF


def test_next_advances_and_ends_at_eof():
    s = make_stream(TokType.LET, TokType.IDEN)
    assert s.next().tok is TokType.IDEN
    assert s.nextt() is TokType.FEOF
    assert not s.is_valid()


def test_prev_at_start_is_invalid():
    s = make_stream(TokType.LET)
    assert s.prev().tok is TokType.INVALID
    assert s.index == 0


def test_prev_steps_back():
    s = make_stream(TokType.LET, TokType.IDEN)
    s.next()
    assert s.prevt() is TokType.LET
    assert s.index == 0


def test_peek_negative_after_advance():
    s = make_stream(TokType.LET, TokType.IDEN)
    s.next()
    assert s.peek(-1).tok is TokType.LET


def test_at_out_of_range_is_invalid():
    s = make_stream(TokType.LET)
    assert s.at(0).tok is TokType.LET
    assert s.at(5).tok is TokType.INVALID


def test_accept_does_not_advance():
    s = make_stream(TokType.IF, TokType.IDEN)
    assert s.accept(TokType.WHILE, TokType.IF)
    assert not s.accept(TokType.FOR)
    assert s.index == 0


def test_acceptn_advances_on_match_only():
    s = make_stream(TokType.IF, TokType.IDEN)
    assert not s.acceptn(TokType.FOR)
    assert s.index == 0
    assert s.acceptn(TokType.IF)
    assert s.peekt() is TokType.IDEN


def test_acceptd():
    s = make_stream(TokType.IDEN, TokType.ADD)
    assert s.acceptd()
    s.next()
    assert not s.acceptd()


def test_sett_changes_current_token():
    s = make_stream(TokType.SUB, TokType.INT)
    s.sett(TokType.USUB)
    assert s.peekt() is TokType.USUB
    assert s.at(0).tok is TokType.USUB


def test_sett_past_end_leaves_eof_intact():
    s = make_stream(TokType.INT)
    s.next()
    s.sett(TokType.ADD)
    assert s.peekt() is TokType.FEOF


def test_is_valid_stops_at_eof_token():
    s = make_stream(TokType.INT, TokType.FEOF)
    assert s.is_valid()
    s.next()
    assert not s.is_valid()