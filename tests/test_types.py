import math

import pytest

from vernacular.errors import VernacularError
from vernacular.types import (
    TypeSpec, NOTHING, ObjectVal, ListVal, cast_value, divide, to_text, type_of, values_equal,
)


def test_whole_is_decided_by_fractional_part():
    assert type_of(3.0) == TypeSpec.whole()
    assert type_of(-12.0) == TypeSpec.whole()
    assert type_of(3.5) == TypeSpec.decimal()
    assert type_of(math.inf) == TypeSpec.decimal()


def test_runtime_types_of_other_values():
    assert type_of('a') == TypeSpec.text()
    assert type_of(False) == TypeSpec.truth()
    assert type_of(NOTHING) == TypeSpec.nothing()
    assert type_of(ObjectVal('Point')) == TypeSpec.object()
    assert type_of(ListVal('items')) == TypeSpec.list(TypeSpec.any())


def test_type_spec_repr():
    assert repr(TypeSpec.map(TypeSpec.text(), TypeSpec.list(TypeSpec.whole()))) == 'Map<Text, List<Whole>>'


def test_canonical_text():
    assert to_text(3.0) == '3'
    assert to_text(3.5) == '3.5'
    assert to_text(-0.25) == '-0.25'
    assert to_text(1e20) == '100000000000000000000'
    assert to_text(1e-05) == '0.00001'
    assert to_text(1.5e-07) == '0.00000015'
    assert to_text(-0.0) == '-0'
    assert to_text(float('inf')) == 'inf'
    assert to_text(True) == 'true'
    assert to_text(False) == 'false'
    assert to_text(NOTHING) == 'nothing'
    assert to_text('plain') == 'plain'


@pytest.mark.parametrize('value', [3.7, -1.5, 4.0, 0.0, 1e15 + 0.5, -7.25])
def test_cast_to_whole_floors(value):
    assert cast_value(value, TypeSpec.whole()) == math.floor(value)


@pytest.mark.parametrize('value', [3.0, 2.5, -8.0])
def test_cast_to_decimal_is_identity(value):
    assert cast_value(value, TypeSpec.decimal()) == value


def test_identity_casts():
    assert cast_value('x', TypeSpec.text()) == 'x'
    assert cast_value(True, TypeSpec.truth()) is True


@pytest.mark.parametrize('value, target', [
    ('5', TypeSpec.whole()),
    (5.0, TypeSpec.text()),
    (True, TypeSpec.whole()),
    (NOTHING, TypeSpec.nothing()),
    (1.0, TypeSpec.list(TypeSpec.whole())),
])
def test_other_casts_fail(value, target):
    with pytest.raises(VernacularError) as excinfo:
        cast_value(value, target)
    assert excinfo.value.kind == 'CastError'


def test_division_follows_ieee():
    assert divide(10.0, 4.0) == 2.5
    assert divide(1.0, 0.0) == math.inf
    assert divide(-1.0, 0.0) == -math.inf
    assert math.isnan(divide(0.0, 0.0))


def test_truth_values_never_equal_numbers():
    assert not values_equal(True, 1.0)
    assert values_equal(2.0, 2.0)
    assert values_equal(NOTHING, NOTHING)
    assert not values_equal('1', 1.0)
