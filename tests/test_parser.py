import pytest

from vernacular.ast import (
    LetStmt, Assign, IfStmt, WhileStmt, PrintStmt, ReturnStmt, ExprStmt, Block,
    Literal, Ident, BinaryOp, UnaryOp, Cast, Interpolation, Call, NewObject, Member,
)
from vernacular.errors import VernacularError
from vernacular.parser import Parser
from vernacular.tokenizer import Tokenizer, preprocess
from vernacular.types import TypeSpec, NOTHING


def parse(source):
    tokenizer = Tokenizer()
    return Parser(tokenizer.tokenize(preprocess(source)), tokenizer).parse()


def parse_error(source):
    with pytest.raises(VernacularError) as excinfo:
        parse(source)
    assert excinfo.value.kind == 'ParseError'
    return str(excinfo.value)


def test_typed_declaration():
    assert parse('let x: Whole = 5') == [LetStmt('x', TypeSpec.whole(), Literal(5.0))]


def test_untyped_declaration_without_value():
    assert parse('let x') == [LetStmt('x', None, None)]


def test_literals():
    assert parse('print true; print false; print nothing; print "s"') == [
        PrintStmt(Literal(True)), PrintStmt(Literal(False)),
        PrintStmt(Literal(NOTHING)), PrintStmt(Literal('s')),
    ]


def test_multiplication_binds_tighter():
    assert parse('1 + 2 * 3') == [ExprStmt(
        BinaryOp('+', Literal(1.0), BinaryOp('*', Literal(2.0), Literal(3.0))))]


def test_subtraction_is_left_associative():
    assert parse('8 - 2 - 1') == [ExprStmt(
        BinaryOp('-', BinaryOp('-', Literal(8.0), Literal(2.0)), Literal(1.0)))]


def test_unary_minus_and_grouping():
    assert parse('-(1 + 2)') == [ExprStmt(UnaryOp('-', BinaryOp('+', Literal(1.0), Literal(2.0))))]


def test_comparison_over_concatenation():
    assert parse('a ++ b == c') == [ExprStmt(
        BinaryOp('==', BinaryOp('++', Ident('a'), Ident('b')), Ident('c')))]


def test_parametric_types():
    statements = parse('let m: Map<Text, List<Whole>>')
    assert statements == [LetStmt('m', TypeSpec.map(TypeSpec.text(), TypeSpec.list(TypeSpec.whole())), None)]


def test_unknown_type():
    assert 'unknown type Integer' in parse_error('let x: Integer = 1')


def test_wrong_number_of_type_arguments():
    parse_error('let m: Map<Text>')
    parse_error('let w: Whole<Text>')


def test_interpolation_parts_in_source_order():
    assert parse('print "a{x}b{1 + 2}"') == [PrintStmt(Interpolation([
        Literal('a'), Ident('x'), Literal('b'), BinaryOp('+', Literal(1.0), Literal(2.0)),
    ]))]


def test_string_escapes():
    assert parse(r'print "say \"hi\"\n\{x\}"') == [PrintStmt(Literal('say "hi"\n{x}'))]


def test_interpolation_may_contain_string_literals():
    assert parse('print "a{"b"}c"') == [PrintStmt(Interpolation([
        Literal('a'), Literal('b'), Literal('c'),
    ]))]
    assert parse('print "n={"x" ++ y}"') == [PrintStmt(Interpolation([
        Literal('n='), BinaryOp('++', Literal('x'), Ident('y')),
    ]))]


def test_bad_interpolations():
    parse_error('print "{}"')
    parse_error('print "{x"')
    parse_error('print "x}"')
    parse_error('print "{1 2}"')


def test_if_else_and_while():
    source = 'if x {\n    print 1\n} else {\n    print 2\n}\nwhile false { }'
    assert parse(source) == [
        IfStmt(Ident('x'), Block([PrintStmt(Literal(1.0))]), Block([PrintStmt(Literal(2.0))])),
        WhileStmt(Literal(False), Block([])),
    ]


def test_else_on_next_line_and_else_if():
    source = 'if a {\n  print 1\n}\nelse if b {\n  print 2\n}'
    assert parse(source) == [IfStmt(
        Ident('a'), Block([PrintStmt(Literal(1.0))]),
        Block([IfStmt(Ident('b'), Block([PrintStmt(Literal(2.0))]), None)]),
    )]


def test_call_member_and_cast():
    assert parse('show(a, b.c)\ny = x as Whole') == [
        ExprStmt(Call('show', [Ident('a'), Member(Ident('b'), 'c')])),
        Assign(Ident('y'), Cast(Ident('x'), TypeSpec.whole())),
    ]


def test_new_object_and_return():
    assert parse('p = new Point()\nreturn') == [Assign(Ident('p'), NewObject('Point')), ReturnStmt(None)]


def test_semicolons_and_blank_lines_separate_statements():
    assert parse('\n\nlet a = 1; let b = 2\n\n') == [
        LetStmt('a', None, Literal(1.0)), LetStmt('b', None, Literal(2.0)),
    ]


def test_continuation_does_not_make_a_valid_statement():
    message = parse_error('let x: Whole = 5 \\\n6 show(x)')
    assert 'expected end of statement' in message
    assert "NUMBER '6'" in message


def test_missing_closing_brace():
    assert "expected '}', found end of input" in parse_error('if true {\n print 1')


def test_missing_expression():
    assert 'expected expression' in parse_error('let x = ')
