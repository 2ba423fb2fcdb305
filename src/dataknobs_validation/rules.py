"""Rule implementations executed by field chains.

A rule is immutable configuration: everything it needs about the value being
validated arrives in the ``RunScope`` handed to ``Rule.check``. Chains and
schemas can therefore be shared freely between calls and threads.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from . import messages
from .exceptions import (
    RuleKindError,
    SchemaConfigurationError,
    UninspectableValueError,
    ValidationError,
)
from .messages import make_error, render_message
from .values import ValueKind, is_inspectable, is_public, kind_of

if TYPE_CHECKING:
    from .chains import FieldChain
    from .schema import Schema

logger = logging.getLogger(__name__)

CustomFunc = Callable[[Any, Any], Any]


@dataclass(frozen=True)
class RunScope:
    """Per-call binding of a chain to the value it validates.

    Attributes:
        value: The value under validation
        context: The whole record the value was taken from
        name: Display name used in failure messages
        key: Schema key the chain is registered under
        path: Location of the value from the outermost record
    """

    value: Any
    context: Any
    name: str
    key: str
    path: str

    def element(self, index: int, value: Any, name: str) -> RunScope:
        """Scope for one element of the sequence held by this scope."""
        return replace(self, value=value, name=name, path=f"{self.path}[{index}]")


def _fatal(error: SchemaConfigurationError) -> SchemaConfigurationError:
    logger.error(f"Schema configuration error: {error}")
    return error


class Rule(ABC):
    """Base class for all rules.

    Subclasses set ``kinds`` to the value kinds they can handle; ``None``
    accepts any kind. Applying a rule to an unsupported kind raises
    ``RuleKindError`` rather than producing a validation failure.
    """

    name: str = "rule"
    kinds: frozenset[ValueKind] | None = None

    def check(self, scope: RunScope) -> ValidationError | None:
        """Run the rule against a scope.

        Args:
            scope: The value, record context and display name for this run

        Returns:
            None if the rule passes, otherwise the ValidationError
        """
        if self.kinds is not None:
            kind = kind_of(scope.value)
            if kind not in self.kinds:
                raise _fatal(RuleKindError(self.name, kind.value, scope.path))
        error = self.evaluate(scope)
        if error is not None:
            error.context.setdefault("path", scope.path)
        return error

    @abstractmethod
    def evaluate(self, scope: RunScope) -> ValidationError | None:
        """Rule body, called once the value kind has been accepted."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name})"


class KindRule(Rule):
    """Narrowing rule: the value must be one of the accepted kinds."""

    def __init__(
        self,
        name: str,
        accepted: frozenset[ValueKind],
        template: str,
        message: str | None = None,
    ):
        self.name = name
        self.accepted = accepted
        self.template = template
        self.message = message

    def evaluate(self, scope: RunScope) -> ValidationError | None:
        if kind_of(scope.value) in self.accepted:
            return None
        return make_error(self.template, self.message, scope.name)


class PredicateRule(Rule):
    """Templated rule driven by a predicate over the value.

    ``params`` are substituted into the template after the display name.
    """

    def __init__(
        self,
        name: str,
        kinds: frozenset[ValueKind] | None,
        predicate: Callable[[Any], bool],
        template: str,
        message: str | None = None,
        params: tuple[Any, ...] = (),
    ):
        self.name = name
        self.kinds = kinds
        self.predicate = predicate
        self.template = template
        self.message = message
        self.params = params

    def evaluate(self, scope: RunScope) -> ValidationError | None:
        if self.predicate(scope.value):
            return None
        return make_error(self.template, self.message, scope.name, *self.params)


class PatternRule(PredicateRule):
    """String must contain a match for a regular expression.

    The empty string always passes; combine with ``non_empty`` to require a
    value.
    """

    def __init__(
        self,
        pattern: str | re.Pattern[str],
        template: str = messages.NO_MATCH,
        message: str | None = None,
        name: str = "matches",
    ):
        try:
            self.regex = re.compile(pattern) if isinstance(pattern, str) else pattern
        except re.error as e:
            raise SchemaConfigurationError(
                f"invalid pattern for {name}(): {e}", context={"pattern": pattern}
            ) from e
        super().__init__(
            name,
            frozenset({ValueKind.STRING}),
            self._matches,
            template,
            message,
            params=(self.regex.pattern,),
        )

    def _matches(self, value: str) -> bool:
        return value == "" or self.regex.search(value) is not None


class SchemaRule(Rule):
    """Validate the value as a record against a nested schema.

    The nested schema's own failure is returned unchanged.
    """

    name = "schema"

    def __init__(self, schema: Schema):
        self.schema = schema

    def evaluate(self, scope: RunScope) -> ValidationError | None:
        if not is_public(scope.key):
            raise _fatal(UninspectableValueError(
                f"field '{scope.key}' must be public to be validated by a schema",
                path=scope.path,
            ))
        if not is_inspectable(scope.value):
            raise _fatal(UninspectableValueError(
                f"field '{scope.key}' holds {type(scope.value).__name__}, "
                "which cannot be validated by a schema",
                path=scope.path,
            ))
        return self.schema.evaluate(scope.value, path=scope.path)


class EachRule(Rule):
    """Every element of a sequence must pass an element chain.

    Elements are checked in order and the first failure is returned; an
    empty sequence passes.
    """

    name = "of"
    kinds = frozenset({ValueKind.SEQUENCE})

    def __init__(self, chain: FieldChain):
        self.chain = chain

    def evaluate(self, scope: RunScope) -> ValidationError | None:
        name = self.chain.name or render_message(messages.ARRAY_ELEMENTS_NAME, scope.name)
        for index, element in enumerate(scope.value):
            error = self.chain.run(scope.element(index, element, name))
            if error is not None:
                return error
        return None


class CustomRule(Rule):
    """Caller-supplied check receiving ``(context, value)``.

    The function returns None to pass, or a message string or exception to
    fail; the message is used verbatim. Exceptions raised by the function
    propagate to the caller.
    """

    name = "custom"

    def __init__(self, func: CustomFunc):
        if not callable(func):
            raise SchemaConfigurationError(
                f"custom() expects a callable, got {type(func).__name__}"
            )
        self.func = func

    def evaluate(self, scope: RunScope) -> ValidationError | None:
        outcome = self.func(scope.context, scope.value)
        if outcome is None:
            return None
        if isinstance(outcome, ValidationError):
            return ValidationError(
                outcome.message,
                context={**outcome.context, "field": scope.name, "path": scope.path},
            )
        if isinstance(outcome, (str, Exception)):
            return ValidationError(str(outcome), context={"field": scope.name, "path": scope.path})
        raise _fatal(SchemaConfigurationError(
            f"custom rule for '{scope.key}' returned {type(outcome).__name__}, "
            "expected None, str or Exception",
            context={"path": scope.path},
        ))
