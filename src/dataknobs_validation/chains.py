"""Field chains: the fluent, immutable builders holding a field's rules.

A chain starts untyped with ``field()``. A narrowing call (``string()``,
``number()``, ``boolean()``, ``array()``, ``object()``) appends a kind check
and returns a chain specialised for that kind, exposing the rules that make
sense for it:

```python
from dataknobs_validation import Schema, field

user_schema = Schema({
    "first_name": field("Name").string().min_length(3).max_length(20),
    "status": field().string().one_of(["active", "inactive"]),
    "age": field().number().non_negative(),
    "email": field().string().email(),
    "hobbies": field().array().of(field().string().non_empty()).max_length(5),
})
```

Every builder call returns a *new* chain and leaves the receiver untouched,
so a partially built chain can be reused as a common prefix:

```python
name = field().string().non_empty()
short_name = name.max_length(10)
long_name = name.max_length(200)   # ``short_name`` is unaffected
```

Rules run in the order they were appended and stop at the first failure.
Every templated rule accepts ``message=`` to override its default failure
message; the override may use ``{}`` placeholders (display name first, then
the rule's parameters).
"""

from __future__ import annotations

import math
import numbers
import re
from collections.abc import Callable, Collection, Mapping
from typing import TYPE_CHECKING, Any, TypeVar
from urllib.parse import urlparse

from . import messages
from .exceptions import SchemaConfigurationError, ValidationError
from .rules import (
    CustomFunc,
    CustomRule,
    EachRule,
    KindRule,
    PatternRule,
    PredicateRule,
    Rule,
    RunScope,
    SchemaRule,
)
from .values import NUMERIC_KINDS, ValueKind, kind_of

if TYPE_CHECKING:
    from .schema import Schema

EMAIL_PATTERN = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}\Z"
UUID_PATTERN = (
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-4[0-9a-fA-F]{3}-[89abAB][0-9a-fA-F]{3}-[0-9a-fA-F]{12}\Z"
)
CUID_PATTERN = r"^[cC][^\s-]{8,}\Z"
HEX_COLOR_PATTERN = r"^#?(?:[0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})\Z"

_STRING = frozenset({ValueKind.STRING})
_SEQUENCE = frozenset({ValueKind.SEQUENCE})
_RECORD = frozenset({ValueKind.RECORD})

C = TypeVar("C", bound="BaseChain")


def _require_count(value: Any, rule: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise SchemaConfigurationError(
            f"{rule}() expects a non-negative integer, got {value!r}"
        )
    return value


def _require_bound(value: Any, rule: str) -> numbers.Real:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise SchemaConfigurationError(f"{rule}() expects a number, got {value!r}")
    return value


def _truncate(value: numbers.Real) -> int | None:
    """Truncate toward zero; None for infinities and NaN."""
    if isinstance(value, numbers.Integral):
        return int(value)
    if not math.isfinite(value):
        return None
    return int(value)


def _is_url(value: str) -> bool:
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return bool(parsed.scheme) and bool(parsed.netloc)


class BaseChain:
    """Ordered, immutable sequence of rules for one field.

    Args:
        name: Display name used in failure messages; when omitted the schema
            key (or "<array>'s elements" for array elements) is used
        rules: Initial rules, mostly used internally when deriving chains
    """

    def __init__(self, name: str | None = None, rules: tuple[Rule, ...] = ()):
        self._name = name or None
        self._rules = tuple(rules)

    @property
    def name(self) -> str | None:
        """Explicit display name, or None to defer to the schema key."""
        return self._name

    @property
    def rules(self) -> tuple[Rule, ...]:
        """Rules in execution order."""
        return self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r}, rules={self.describe()!r})"

    def describe(self) -> list[str]:
        """Names of the rules in execution order."""
        return [rule.name for rule in self._rules]

    def _extend(self, rule: Rule, chain_type: type[C] | None = None) -> C:
        chain_type = chain_type or type(self)
        return chain_type(self._name, self._rules + (rule,))

    def _predicate(
        self: C,
        name: str,
        kinds: frozenset[ValueKind] | None,
        predicate: Callable[[Any], bool],
        template: str,
        message: str | None,
        *params: Any,
    ) -> C:
        return self._extend(PredicateRule(name, kinds, predicate, template, message, params))

    def run(self, scope: RunScope) -> ValidationError | None:
        """Execute the rules against a scope, stopping at the first failure.

        Args:
            scope: Value, record context and display name for this run

        Returns:
            None if every rule passes, otherwise the first ValidationError
        """
        for rule in self._rules:
            error = rule.check(scope)
            if error is not None:
                return error
        return None

    def custom(self: C, func: CustomFunc) -> C:
        """Append a caller-defined rule.

        ``func(context, value)`` receives the whole record and the field's
        value. It returns None to pass, or a message string or exception to
        fail with exactly that message.
        """
        return self._extend(CustomRule(func))


class FieldChain(BaseChain):
    """Untyped chain returned by ``field()``.

    Besides the narrowing entry points it offers the rules that do not
    depend on the value kind.
    """

    def string(self, message: str | None = None) -> StringChain:
        """Require a string and continue with string rules."""
        return self._extend(
            KindRule("string", _STRING, messages.NOT_A_STRING, message), StringChain
        )

    def number(self, message: str | None = None) -> NumberChain:
        """Require an integer or float (not a bool) and continue with number rules."""
        return self._extend(
            KindRule("number", NUMERIC_KINDS, messages.NOT_A_NUMBER, message), NumberChain
        )

    def boolean(self, message: str | None = None) -> BooleanChain:
        """Require a bool."""
        return self._extend(
            KindRule("boolean", frozenset({ValueKind.BOOLEAN}), messages.NOT_A_BOOLEAN, message),
            BooleanChain,
        )

    def array(self, message: str | None = None) -> ArrayChain:
        """Require a list or tuple and continue with array rules.

        Empty arrays pass; use ``non_empty()`` to reject them.
        """
        return self._extend(
            KindRule("array", _SEQUENCE, messages.NOT_AN_ARRAY, message), ArrayChain
        )

    def object(self, message: str | None = None) -> ObjectChain:
        """Require a record (mapping, dataclass, object) and continue with object rules."""
        return self._extend(
            KindRule("object", _RECORD, messages.NOT_AN_OBJECT, message), ObjectChain
        )

    def one_of(self, allowed: Collection[Any], message: str | None = None) -> FieldChain:
        """Value must equal one of ``allowed`` and be of the same kind.

        ``True`` does not match ``1`` and ``1.0`` does not match ``1``.
        """
        allowed = list(allowed)

        def is_allowed(value: Any) -> bool:
            kind = kind_of(value)
            return any(kind_of(item) is kind and item == value for item in allowed)

        return self._predicate(
            "one_of", None, is_allowed, messages.NOT_ONE_OF, message, allowed
        )

    def schema(self, schema: Schema) -> FieldChain:
        """Validate the value as a record against a nested schema.

        The nested value must be a public field holding a record; anything
        else is a schema configuration error.
        """
        return self._extend(SchemaRule(schema))


class StringChain(BaseChain):
    """Rules for string values. Lengths are counted in code points."""

    def non_empty(self, message: str | None = None) -> StringChain:
        """String must contain something other than whitespace."""
        return self._predicate(
            "non_empty", _STRING, lambda value: value.strip() != "", messages.EMPTY, message
        )

    def min_length(self, length: int, message: str | None = None) -> StringChain:
        """String must be at least ``length`` characters long."""
        length = _require_count(length, "min_length")
        return self._predicate(
            "min_length", _STRING, lambda value: len(value) >= length,
            messages.STRING_MIN_LENGTH, message, length,
        )

    def max_length(self, length: int, message: str | None = None) -> StringChain:
        """String must be at most ``length`` characters long."""
        length = _require_count(length, "max_length")
        return self._predicate(
            "max_length", _STRING, lambda value: len(value) <= length,
            messages.STRING_MAX_LENGTH, message, length,
        )

    def length(self, length: int, message: str | None = None) -> StringChain:
        """String must be exactly ``length`` characters long."""
        length = _require_count(length, "length")
        return self._predicate(
            "length", _STRING, lambda value: len(value) == length,
            messages.STRING_LENGTH, message, length,
        )

    def matches(self, pattern: str | re.Pattern[str], message: str | None = None) -> StringChain:
        """String must contain a match for ``pattern`` (anchor it to match fully).

        The empty string always passes; chain ``non_empty()`` to reject it.
        """
        return self._extend(PatternRule(pattern, messages.NO_MATCH, message))

    def starts_with(self, prefix: str, message: str | None = None) -> StringChain:
        return self._predicate(
            "starts_with", _STRING, lambda value: value.startswith(prefix),
            messages.NO_PREFIX, message, prefix,
        )

    def ends_with(self, suffix: str, message: str | None = None) -> StringChain:
        return self._predicate(
            "ends_with", _STRING, lambda value: value.endswith(suffix),
            messages.NO_SUFFIX, message, suffix,
        )

    def includes(self, substring: str, message: str | None = None) -> StringChain:
        return self._predicate(
            "includes", _STRING, lambda value: substring in value,
            messages.NO_SUBSTRING, message, substring,
        )

    def one_of(self, allowed: Collection[str], message: str | None = None) -> StringChain:
        """String must equal one of ``allowed`` (case-sensitive)."""
        allowed = list(allowed)
        return self._predicate(
            "one_of", _STRING, lambda value: value in allowed, messages.NOT_ONE_OF, message, allowed
        )

    def url(self, message: str | None = None) -> StringChain:
        """String must be an absolute URL with a scheme and a host."""
        return self._predicate("url", _STRING, _is_url, messages.INVALID_URL, message)

    def email(self, message: str | None = None) -> StringChain:
        return self._extend(PatternRule(EMAIL_PATTERN, messages.INVALID_EMAIL, message, "email"))

    def uuid(self, message: str | None = None) -> StringChain:
        """String must be a version 4 UUID."""
        return self._extend(PatternRule(UUID_PATTERN, messages.INVALID_UUID, message, "uuid"))

    def cuid(self, message: str | None = None) -> StringChain:
        return self._extend(PatternRule(CUID_PATTERN, messages.INVALID_CUID, message, "cuid"))

    def hex_color(self, message: str | None = None) -> StringChain:
        """String must be a 3, 4, 6 or 8 digit hex color, ``#`` optional."""
        return self._extend(
            PatternRule(HEX_COLOR_PATTERN, messages.INVALID_HEX_COLOR, message, "hex_color")
        )


class NumberChain(BaseChain):
    """Rules for integers and floats. Bounds are inclusive."""

    def min(self, value: numbers.Real, message: str | None = None) -> NumberChain:
        bound = _require_bound(value, "min")
        return self._predicate(
            "min", NUMERIC_KINDS, lambda v: v >= bound, messages.NUMBER_MIN, message, bound
        )

    def max(self, value: numbers.Real, message: str | None = None) -> NumberChain:
        bound = _require_bound(value, "max")
        return self._predicate(
            "max", NUMERIC_KINDS, lambda v: v <= bound, messages.NUMBER_MAX, message, bound
        )

    def positive(self, message: str | None = None) -> NumberChain:
        """Number must be > 0. See ``non_negative`` for >= 0."""
        return self._predicate(
            "positive", NUMERIC_KINDS, lambda v: v > 0, messages.NOT_POSITIVE, message
        )

    def negative(self, message: str | None = None) -> NumberChain:
        """Number must be < 0. See ``non_positive`` for <= 0."""
        return self._predicate(
            "negative", NUMERIC_KINDS, lambda v: v < 0, messages.NOT_NEGATIVE, message
        )

    def non_negative(self, message: str | None = None) -> NumberChain:
        return self._predicate(
            "non_negative", NUMERIC_KINDS, lambda v: v >= 0, messages.NOT_NON_NEGATIVE, message
        )

    def non_positive(self, message: str | None = None) -> NumberChain:
        return self._predicate(
            "non_positive", NUMERIC_KINDS, lambda v: v <= 0, messages.NOT_NON_POSITIVE, message
        )

    def non_zero(self, message: str | None = None) -> NumberChain:
        return self._predicate("non_zero", NUMERIC_KINDS, lambda v: v != 0, messages.ZERO, message)

    def multiple_of(self, divisor: int, message: str | None = None) -> NumberChain:
        """Number must be a multiple of ``divisor``.

        Zero is a multiple of every divisor. Floats are truncated toward zero
        before the check.
        """
        if isinstance(divisor, bool) or not isinstance(divisor, int) or divisor == 0:
            raise SchemaConfigurationError(
                f"multiple_of() expects a non-zero integer, got {divisor!r}"
            )

        def is_multiple(value: numbers.Real) -> bool:
            truncated = _truncate(value)
            return truncated is not None and truncated % divisor == 0

        return self._predicate(
            "multiple_of", NUMERIC_KINDS, is_multiple, messages.NOT_MULTIPLE_OF, message, divisor
        )

    def finite(self, message: str | None = None) -> NumberChain:
        """Number must not be infinite. Always passes for integers."""
        return self._predicate(
            "finite", NUMERIC_KINDS,
            lambda v: isinstance(v, numbers.Integral) or not math.isinf(v),
            messages.NOT_FINITE, message,
        )

    def one_of(self, allowed: Collection[int], message: str | None = None) -> NumberChain:
        """Number must be one of the ``allowed`` integers.

        Floats are truncated toward zero before the membership test.
        """
        allowed = list(allowed)
        return self._predicate(
            "one_of", NUMERIC_KINDS,
            lambda v: (truncated := _truncate(v)) is not None and truncated in allowed,
            messages.NOT_ONE_OF, message, allowed,
        )


class BooleanChain(BaseChain):
    """Chain for booleans; further constraints go through ``custom()``."""


class ArrayChain(BaseChain):
    """Rules for lists and tuples."""

    def non_empty(self, message: str | None = None) -> ArrayChain:
        return self._predicate(
            "non_empty", _SEQUENCE, lambda value: len(value) > 0, messages.EMPTY, message
        )

    def min_length(self, length: int, message: str | None = None) -> ArrayChain:
        length = _require_count(length, "min_length")
        return self._predicate(
            "min_length", _SEQUENCE, lambda value: len(value) >= length,
            messages.ARRAY_MIN_LENGTH, message, length,
        )

    def max_length(self, length: int, message: str | None = None) -> ArrayChain:
        length = _require_count(length, "max_length")
        return self._predicate(
            "max_length", _SEQUENCE, lambda value: len(value) <= length,
            messages.ARRAY_MAX_LENGTH, message, length,
        )

    def length(self, length: int, message: str | None = None) -> ArrayChain:
        length = _require_count(length, "length")
        return self._predicate(
            "length", _SEQUENCE, lambda value: len(value) == length,
            messages.ARRAY_LENGTH, message, length,
        )

    def of(self, element: BaseChain | Mapping[str, BaseChain]) -> ArrayChain:
        """Every element must pass ``element``.

        ``element`` is a chain, or a schema which is applied to each element
        as a nested record. Elements are named "<array>'s elements" in
        messages unless the element chain has its own name.
        """
        if isinstance(element, Mapping):
            element = FieldChain().schema(element)  # type: ignore[arg-type]
        if not isinstance(element, BaseChain):
            raise SchemaConfigurationError(
                f"of() expects a chain or a schema, got {type(element).__name__}"
            )
        return self._extend(EachRule(element))


class ObjectChain(BaseChain):
    """Rules for record values."""

    def schema(self, schema: Schema) -> ObjectChain:
        """Validate the record against a nested schema."""
        return self._extend(SchemaRule(schema))


def field(name: str | None = None) -> FieldChain:
    """Start a validation chain for one field.

    Args:
        name: Display name used in failure messages; defaults to the schema
            key the chain is registered under

    Returns:
        An empty, untyped FieldChain
    """
    return FieldChain(name)
