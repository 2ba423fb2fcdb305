"""Failure message templates and rendering.

Templates use ``{}`` as a positional placeholder. The first argument is
always the display name of the field; later arguments are rule parameters
(a bound, the allowed set, the pattern).

Rendering is deliberately lenient so that caller-supplied overrides can drop
trailing parameters:

- arguments beyond the number of placeholders are dropped;
- placeholders beyond the number of arguments render as ``<missing>``.

Example:
    ```python
    render_message("{} must be at least {}", "Age", 18)
    # 'Age must be at least 18'
    render_message("{} is too small", "Age", 18)
    # 'Age is too small'
    render_message("{} must be between {} and {}", "Age", 18)
    # 'Age must be between 18 and <missing>'
    ```
"""

from __future__ import annotations

from typing import Any

from .exceptions import ValidationError

PLACEHOLDER = "{}"
MISSING = "<missing>"

# Kind checks
NOT_A_STRING = "{} is not a string"
NOT_A_NUMBER = "{} is not a number"
NOT_A_BOOLEAN = "{} is not a boolean"
NOT_AN_ARRAY = "{} is not an array"
NOT_AN_OBJECT = "{} is not an object"

# Shared
NOT_ONE_OF = "{} must be one of {}"
EMPTY = "{} cannot be empty"

# Strings
STRING_MIN_LENGTH = "{} must be at least {} characters long"
STRING_MAX_LENGTH = "{} must be at most {} characters long"
STRING_LENGTH = "{} must be exactly {} characters long"
NO_MATCH = "{} is not in the correct format"
NO_PREFIX = "{} must start with {}"
NO_SUFFIX = "{} must end with {}"
NO_SUBSTRING = "{} must include {}"
INVALID_URL = "{} is not a valid URL"
INVALID_EMAIL = "{} is not a valid email address"
INVALID_UUID = "{} is not a valid UUID"
INVALID_CUID = "{} is not a valid CUID"
INVALID_HEX_COLOR = "{} is not a valid hex color"

# Numbers
NUMBER_MIN = "{} must be at least {}"
NUMBER_MAX = "{} must be at most {}"
NOT_POSITIVE = "{} must be a positive number"
NOT_NEGATIVE = "{} must be a negative number"
NOT_NON_NEGATIVE = "{} must be a non-negative number"
NOT_NON_POSITIVE = "{} must be a non-positive number"
ZERO = "{} must not be zero"
NOT_MULTIPLE_OF = "{} must be a multiple of {}"
NOT_FINITE = "{} must be a finite number"

# Arrays
ARRAY_MIN_LENGTH = "{} must have at least {} elements"
ARRAY_MAX_LENGTH = "{} must have at most {} elements"
ARRAY_LENGTH = "{} must have exactly {} elements"

ARRAY_ELEMENTS_NAME = "{}'s elements"


def _format_arg(arg: Any) -> str:
    if isinstance(arg, (list, tuple, set, frozenset)):
        return "[" + ", ".join(str(item) for item in arg) + "]"
    return str(arg)


def render_message(template: str, *args: Any) -> str:
    """Substitute ``args`` into the ``{}`` placeholders of ``template``.

    Never raises: surplus arguments are dropped and surplus placeholders are
    rendered as ``MISSING``. Braces that do not form ``{}`` are left as-is.
    """
    pieces = template.split(PLACEHOLDER)
    rendered = [pieces[0]]
    for index, piece in enumerate(pieces[1:]):
        rendered.append(_format_arg(args[index]) if index < len(args) else MISSING)
        rendered.append(piece)
    return "".join(rendered)


def make_error(template: str, override: str | None, *args: Any) -> ValidationError:
    """Build a ``ValidationError`` from a default template or an override.

    Args:
        template: Default message with ``{}`` placeholders
        override: Caller-supplied message; when non-empty it fully replaces
            ``template`` and may itself contain placeholders
        *args: Substitution values, display name first

    Returns:
        ValidationError whose message is the rendered effective template
    """
    effective = override if override else template
    context = {"field": args[0]} if args else None
    return ValidationError(render_message(effective, *args), context=context)
