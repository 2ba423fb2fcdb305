"""Declarative, composable field validation.

Build a schema mapping field keys to chains of rules, then apply it to
records:

```python
from dataknobs_validation import Schema, field

schema = Schema({
    "first_name": field("Name").string().min_length(3),
    "age": field().number().non_negative(),
    "children": field().array().of(field().schema(child_schema)),
})

result = schema.parse(user)
if not result:
    print(result.message)
```

- Chains are immutable and schemas are plain dicts, so both can be defined
  once at module level and shared between calls and threads.
- Evaluation stops at the first failing rule and returns it as a
  ``ValidationError`` inside a ``ValidationResult``.
- A schema that does not fit the record (unknown field, rule applied to the
  wrong kind of value) raises a ``SchemaConfigurationError`` instead.
"""

from .chains import (
    ArrayChain,
    BaseChain,
    BooleanChain,
    FieldChain,
    NumberChain,
    ObjectChain,
    StringChain,
    field,
)
from .exceptions import (
    ConfigurationError,
    DataknobsError,
    RuleKindError,
    SchemaConfigurationError,
    UninspectableValueError,
    UnknownFieldError,
    ValidationError,
)
from .factory import SchemaFactory, load_schema, schema_factory
from .messages import MISSING, make_error, render_message
from .result import ValidationResult
from .rules import Rule, RunScope
from .schema import Schema, concat, must_parse, must_unmarshal, parse, unmarshal
from .values import ValueKind, kind_of

__version__ = "0.1.0"

__all__ = [
    # Building
    "field",
    "BaseChain",
    "FieldChain",
    "StringChain",
    "NumberChain",
    "BooleanChain",
    "ArrayChain",
    "ObjectChain",
    "Rule",
    "RunScope",
    "ValueKind",
    "kind_of",
    # Evaluating
    "Schema",
    "parse",
    "must_parse",
    "unmarshal",
    "must_unmarshal",
    "concat",
    "ValidationResult",
    # Messages
    "make_error",
    "render_message",
    "MISSING",
    # Errors
    "DataknobsError",
    "ValidationError",
    "ConfigurationError",
    "SchemaConfigurationError",
    "UnknownFieldError",
    "RuleKindError",
    "UninspectableValueError",
    # Configuration
    "SchemaFactory",
    "schema_factory",
    "load_schema",
]
