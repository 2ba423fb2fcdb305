"""Tests for failure message rendering and overrides."""

import pytest

from dataknobs_validation import (
    MISSING,
    Schema,
    ValidationError,
    field,
    make_error,
    render_message,
)


class TestRenderMessage:
    """Test placeholder substitution."""

    def test_substitutes_in_order(self):
        """Test arguments fill placeholders left to right."""
        assert render_message("{} must be at least {}", "Age", 18) == "Age must be at least 18"

    def test_extra_arguments_are_dropped(self):
        """Test surplus arguments are ignored."""
        assert render_message("{} is invalid", "Age", 18, 99) == "Age is invalid"

    def test_missing_arguments_render_marker(self):
        """Test surplus placeholders render the missing marker."""
        rendered = render_message("{} is between {} and {}", "Age", 18)
        assert rendered == f"Age is between 18 and {MISSING}"

    def test_no_placeholders(self):
        """Test plain text passes through untouched."""
        assert render_message("Something went wrong", "Age", 18) == "Something went wrong"

    def test_other_braces_are_literal(self):
        """Test braces that are not placeholders are kept as-is."""
        assert render_message("{name} {0} {}", "Age") == "{name} {0} Age"

    def test_sequences_render_as_lists(self):
        """Test allowed sets render without quotes."""
        assert render_message("{} must be one of {}", "status", ["a", "b"]) == (
            "status must be one of [a, b]"
        )


class TestMakeError:
    """Test building ValidationError values."""

    def test_default_template(self):
        """Test the template is used without an override."""
        error = make_error("{} must be at least {}", None, "Age", 18)
        assert isinstance(error, ValidationError)
        assert error.message == "Age must be at least 18"
        assert str(error) == "Age must be at least 18"
        assert error.field == "Age"

    def test_empty_override_keeps_template(self):
        """Test an empty override does not replace the template."""
        error = make_error("{} must be at least {}", "", "Age", 18)
        assert error.message == "Age must be at least 18"

    def test_override_replaces_template(self):
        """Test a non-empty override fully replaces the template."""
        error = make_error("{} must be at least {}", "Too young", "Age", 18)
        assert error.message == "Too young"

    def test_no_arguments(self):
        """Test rendering with no arguments never fails."""
        error = make_error("{} is invalid", None)
        assert error.message == f"{MISSING} is invalid"
        assert error.field is None


class TestRuleMessageOverrides:
    """Test custom messages on rules, end to end."""

    @pytest.mark.parametrize(
        "custom_message,expected",
        [
            (None, "Field1 must be at least 10"),
            ("Field1 is supposed to be a minimum of 10", "Field1 is supposed to be a minimum of 10"),
            ("{} is supposed to be a minimum of {}", "Field1 is supposed to be a minimum of 10"),
            (
                "{} is supposed to be a minimum of {} and {}",
                f"Field1 is supposed to be a minimum of 10 and {MISSING}",
            ),
            ("{} is too small", "Field1 is too small"),
        ],
    )
    def test_min_message(self, custom_message, expected):
        """Test overrides with fewer, equal and more placeholders."""
        schema = Schema({"Field1": field().number().min(10, message=custom_message)})

        result = schema.parse({"Field1": 5})

        assert not result.valid
        assert result.message == expected

    def test_kind_check_override(self):
        """Test narrowing rules accept an override too."""
        schema = Schema({"name": field().string(message="{} must be text")})

        assert schema.parse({"name": 1}).message == "name must be text"

    def test_pattern_override_can_show_pattern(self):
        """Test the pattern is available as the second placeholder."""
        schema = Schema({
            "code": field().string().matches(r"^[A-Z]{3}$", message="{} must match {}"),
        })

        assert schema.parse({"code": "abc"}).message == "code must match ^[A-Z]{3}$"
