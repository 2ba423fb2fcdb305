"""Tests for value kinds and field resolution."""

import logging
from collections import OrderedDict, namedtuple
from dataclasses import dataclass
from fractions import Fraction

import pytest

from dataknobs_validation import UnknownFieldError, ValueKind, kind_of
from dataknobs_validation.values import is_inspectable, is_public, resolve_field

Point = namedtuple("Point", ["x", "y"])


@dataclass
class Pet:
    name: str


class Plain:
    def __init__(self):
        self.name = "plain"


class Slotted:
    __slots__ = ("name",)

    def __init__(self):
        self.name = "slotted"


class Invoice:
    def __init__(self, amounts):
        self.amounts = amounts

    @property
    def total(self):
        return sum(self.amounts)

    @property
    def taxed_total(self):
        return self.total * self.rates["tax"]


class Dynamic:
    def __getattr__(self, key):
        if key == "missing":
            raise AttributeError(key)
        return f"dynamic {key}"


class TestKindOf:
    """Test value classification."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (True, ValueKind.BOOLEAN),
            (False, ValueKind.BOOLEAN),
            (0, ValueKind.INTEGER),
            (-12, ValueKind.INTEGER),
            (1.5, ValueKind.FLOAT),
            (float("inf"), ValueKind.FLOAT),
            (Fraction(1, 3), ValueKind.FLOAT),
            ("", ValueKind.STRING),
            ("text", ValueKind.STRING),
            ([], ValueKind.SEQUENCE),
            ((1, 2), ValueKind.SEQUENCE),
            ({}, ValueKind.RECORD),
            (OrderedDict(a=1), ValueKind.RECORD),
            (Point(1, 2), ValueKind.RECORD),
            (Pet("Rex"), ValueKind.RECORD),
            (Plain(), ValueKind.RECORD),
            (Slotted(), ValueKind.RECORD),
            (None, ValueKind.OTHER),
            (b"bytes", ValueKind.OTHER),
            ({1, 2}, ValueKind.OTHER),
            (len, ValueKind.OTHER),
            (Pet, ValueKind.OTHER),
            (lambda: None, ValueKind.OTHER),
        ],
    )
    def test_kinds(self, value, expected):
        """Test every value maps to exactly one kind."""
        assert kind_of(value) is expected

    def test_inspectable(self):
        """Test only records are inspectable."""
        assert is_inspectable({"a": 1})
        assert is_inspectable(Pet("Rex"))
        assert not is_inspectable("Rex")
        assert not is_inspectable([Pet("Rex")])
        assert not is_inspectable(None)

    def test_public(self):
        """Test leading underscores mark private keys."""
        assert is_public("name")
        assert not is_public("_name")
        assert not is_public("__name")


class TestResolveField:
    """Test looking up field values on records."""

    def test_mapping(self):
        """Test mappings are looked up by key."""
        assert resolve_field({"name": "Rex", "age": None}, "age") is None

    def test_dataclass(self):
        """Test dataclasses are looked up by attribute."""
        assert resolve_field(Pet("Rex"), "name") == "Rex"

    def test_named_tuple(self):
        """Test named tuples are looked up by field name."""
        assert resolve_field(Point(1, 2), "y") == 2

    def test_slotted_object(self):
        """Test objects without a __dict__ resolve through slots."""
        assert resolve_field(Slotted(), "name") == "slotted"

    def test_property(self):
        """Test properties are resolved like plain attributes."""
        assert resolve_field(Invoice([1, 2]), "total") == 3

    def test_failing_property_propagates(self):
        """Test an AttributeError inside a property is not reported as unknown."""
        with pytest.raises(AttributeError, match="rates") as exc_info:
            resolve_field(Invoice([1, 2]), "taxed_total")

        assert not isinstance(exc_info.value, UnknownFieldError)

    def test_dynamic_attributes(self):
        """Test __getattr__ records still report unknown fields."""
        record = Dynamic()

        assert resolve_field(record, "anything") == "dynamic anything"
        with pytest.raises(UnknownFieldError):
            resolve_field(record, "missing")

    @pytest.mark.parametrize(
        "record,type_name",
        [({"name": "Rex"}, "dict"), (Pet("Rex"), "Pet"), (Point(1, 2), "Point"), (Plain(), "Plain")],
    )
    def test_unknown_field(self, record, type_name, caplog):
        """Test a missing field raises and is logged."""
        with caplog.at_level(logging.ERROR):
            with pytest.raises(UnknownFieldError) as exc_info:
                resolve_field(record, "missing")

        assert str(exc_info.value) == f"field 'missing' not found in {type_name}"
        assert exc_info.value.key == "missing"
        assert exc_info.value.record_type == type_name
        assert "missing" in caplog.text
