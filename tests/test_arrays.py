"""Tests for array rules and element chains."""

import pytest

from dataknobs_validation import (
    ArrayChain,
    RuleKindError,
    Schema,
    SchemaConfigurationError,
    UninspectableValueError,
    field,
)


def run(chain, value):
    """Validate a single 'tags' field and return the failure, or None."""
    return Schema({"tags": chain}).parse({"tags": value}).error


def check(chain, value):
    error = run(chain, value)
    return error.message if error else None


class TestArrayKind:
    """Test the array narrowing rule."""

    @pytest.mark.parametrize("value", [[], [1, "a"], (), (1, 2)])
    def test_accepts_sequences(self, value):
        """Test lists and tuples pass, empty ones included."""
        assert check(field().array(), value) is None

    @pytest.mark.parametrize("value", ["abc", {"a": 1}, {1, 2}, None, 3])
    def test_rejects_other_kinds(self, value):
        """Test strings, mappings and sets are not arrays."""
        assert check(field().array(), value) == "tags is not an array"


class TestArrayLength:
    """Test non_empty and the length rules."""

    def test_non_empty(self):
        """Test empty arrays fail non_empty."""
        chain = field().array().non_empty()
        assert check(chain, [""]) is None
        assert check(chain, []) == "tags cannot be empty"

    def test_min_length(self):
        """Test min_length is inclusive."""
        chain = field().array().min_length(2)
        assert check(chain, [1, 2]) is None
        assert check(chain, [1]) == "tags must have at least 2 elements"

    def test_max_length(self):
        """Test max_length is inclusive."""
        chain = field().array().max_length(2)
        assert check(chain, (1, 2)) is None
        assert check(chain, [1, 2, 3]) == "tags must have at most 2 elements"

    def test_length(self):
        """Test length requires an exact count."""
        chain = field().array().length(2)
        assert check(chain, [1, 2]) is None
        assert check(chain, []) == "tags must have exactly 2 elements"

    def test_invalid_length_argument(self):
        """Test negative counts are rejected at build time."""
        with pytest.raises(SchemaConfigurationError):
            field().array().max_length(-1)


class TestElements:
    """Test per-element validation with of()."""

    def test_default_element_name(self):
        """Test elements are named after the array in messages."""
        chain = field().array().of(field().string().non_empty())
        assert check(chain, ["a", "b"]) is None
        assert check(chain, ["a", " "]) == "tags's elements cannot be empty"

    def test_named_element_chain(self):
        """Test an element chain's own name wins."""
        chain = field().array().of(field("Each tag").string())
        assert check(chain, ["a", 1]) == "Each tag is not a string"

    def test_array_name_flows_to_elements(self):
        """Test the array's display name is used for its elements."""
        chain = field("Tags").array().of(field().string().min_length(2))
        assert check(chain, ["ab", "c"]) == "Tags's elements must be at least 2 characters long"

    def test_first_failing_element_wins(self):
        """Test elements are checked in order and the first failure is returned."""
        chain = field().array().of(field().number().min(10, message="{} item too small"))
        error = run(chain, [10, 3, 1])
        assert error.message == "tags's elements item too small"
        assert error.path == "tags[1]"

    def test_empty_array_passes_elements(self):
        """Test of() on an empty array runs nothing."""
        calls = []
        chain = field().array().of(field().custom(lambda record, value: calls.append(value)))
        assert check(chain, []) is None
        assert calls == []

    def test_nested_arrays(self):
        """Test element chains can themselves be arrays."""
        chain = field().array().of(field().array().of(field().number().positive()))
        assert check(chain, [[1, 2], [3]]) is None
        error = run(chain, [[1, 2], [3, 0]])
        assert error.message == "tags's elements's elements must be a positive number"
        assert error.path == "tags[1][1]"

    def test_schema_elements(self):
        """Test a schema given to of() validates each element as a record."""
        item = Schema({"label": field().string().non_empty()})
        chain = field().array().of(item)
        assert check(chain, [{"label": "a"}, {"label": "b"}]) is None
        error = run(chain, [{"label": "a"}, {"label": ""}])
        assert error.message == "label cannot be empty"
        assert error.path == "tags[1].label"

    def test_schema_elements_must_be_records(self):
        """Test scalar elements cannot be validated by a schema."""
        chain = field().array().of(Schema({"label": field().string()}))
        with pytest.raises(UninspectableValueError):
            run(chain, ["not a record"])

    def test_of_requires_a_chain(self):
        """Test of() rejects anything that is not a chain or schema."""
        with pytest.raises(SchemaConfigurationError):
            field().array().of("string")

    def test_of_on_non_array_is_fatal(self):
        """Test the element rule refuses non-sequences."""
        with pytest.raises(RuleKindError):
            run(ArrayChain().of(field().string()), "abc")
