# This file is part of shapecheck.
#
# Copyright the shapecheck Authors.
# Individual contributors are listed in the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

import dataclasses
import enum
import typing

import attr
import pytest

from shapecheck.errors import InvalidArgument, UnsupportedShape
from shapecheck.shapes import (
    BINARY,
    Bool,
    ByteSequence,
    Deferred,
    Enumeration,
    Float,
    Integer,
    OneOf,
    Optional,
    Record,
    Sequence,
    Tuple,
    from_type,
    register_shape,
    small_integers,
    validate_shape,
)
from shapecheck.shapes._internal import types


@pytest.fixture(autouse=True)
def restore_type_lookup():
    lookup = dict(types._global_type_lookup)
    try:
        yield
    finally:
        types._global_type_lookup.clear()
        types._global_type_lookup.update(lookup)


class Weekday(enum.Enum):
    mon = 1
    tue = 2


@attr.s
class Account:
    owner: str = attr.ib()
    balance: int = attr.ib()


@dataclasses.dataclass
class Reading:
    value: float
    tags: typing.List[str]
    note: typing.Optional[str] = None


class Pair(typing.NamedTuple):
    left: int
    right: bool


@dataclasses.dataclass
class Node:
    value: int
    children: "typing.List[Node]"


class Opaque:
    pass


@pytest.mark.parametrize(
    "thing, shape",
    [
        (int, Integer()),
        (bool, Bool()),
        (float, Float()),
        (str, ByteSequence()),
        (bytes, ByteSequence(text=False, alphabet=BINARY)),
        (typing.List[int], Sequence(Integer())),
        (list[bool], Sequence(Bool())),
        (typing.Tuple[int, bool], Tuple([Integer(), Bool()])),
        (tuple[str], Tuple([ByteSequence()])),
        (typing.Optional[int], Optional(Integer())),
        (typing.Union[int, str], OneOf([Integer(), ByteSequence()])),
        (typing.Union[int, str, None], Optional(OneOf([Integer(), ByteSequence()]))),
        (Weekday, Enumeration([Weekday.mon, Weekday.tue])),
    ],
)
def test_resolves_builtin_types(thing, shape):
    assert from_type(thing) == shape


def test_resolves_attrs_classes():
    assert from_type(Account) == Record(
        [("owner", ByteSequence()), ("balance", Integer())], target=Account
    )


def test_resolves_dataclasses():
    assert from_type(Reading) == Record(
        [
            ("value", Float()),
            ("tags", Sequence(ByteSequence())),
            ("note", Optional(ByteSequence())),
        ],
        target=Reading,
    )


def test_resolves_named_tuples():
    assert from_type(Pair) == Record(
        [("left", Integer()), ("right", Bool())], target=Pair
    )


def test_self_referential_classes_are_unsupported():
    shape = from_type(Node)
    assert isinstance(shape.fields[1][1].elements, Deferred)
    with pytest.raises(UnsupportedShape):
        validate_shape(shape)


def test_unknown_classes_are_unsupported():
    with pytest.raises(UnsupportedShape, match="register_shape"):
        from_type(Opaque)


def test_unparameterised_generics_are_unsupported():
    with pytest.raises(UnsupportedShape):
        from_type(typing.Dict[str, int])


def test_variable_length_tuples_are_unsupported():
    with pytest.raises(UnsupportedShape, match="list"):
        from_type(tuple[int, ...])


def test_non_types_are_invalid():
    with pytest.raises(InvalidArgument):
        from_type(3)


def test_registered_shapes_take_priority():
    register_shape(int, small_integers())
    assert from_type(typing.List[int]) == Sequence(small_integers())


def test_can_register_a_function_of_the_type():
    register_shape(Opaque, lambda t: Record([], target=t))
    assert from_type(Opaque) == Record([], target=Opaque)


def test_registered_functions_must_return_shapes():
    register_shape(Opaque, lambda t: 3)
    with pytest.raises(InvalidArgument):
        from_type(Opaque)


@pytest.mark.parametrize(
    "custom_type, shape",
    [(3, Integer()), (typing.List[int], Integer()), (Opaque, 3)],
)
def test_registration_is_validated(custom_type, shape):
    with pytest.raises(InvalidArgument):
        register_shape(custom_type, shape)
