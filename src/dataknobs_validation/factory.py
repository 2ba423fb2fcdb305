"""Build schemas from configuration data.

Schemas can be declared as dictionaries (typically loaded from YAML or JSON)
instead of code. ``SchemaFactory.create`` turns such a declaration into a
``Schema`` made of the same chains the fluent API produces.

Example Configuration:
    ```yaml
    name: user
    fields:
      first_name:
        label: Name
        type: string
        rules:
          - non_empty
          - min_length: 3
          - max_length: {length: 20, message: "{} is too long"}
      status:
        type: string
        rules:
          - one_of: [active, inactive]
      hobbies:
        type: array
        of:
          type: string
          rules: [non_empty]
        rules:
          - max_length: 5
      address:
        type: object
        schema:
          fields:
            city: {type: string, rules: [non_empty]}
    ```

A rule entry is either a bare rule name, or a single-key mapping whose value
is the rule's keyword arguments (a mapping) or its single positional argument
(anything else). Custom rules cannot be declared in configuration; add them
in code with ``Schema.concat``.
"""

import json
import logging
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from .chains import BaseChain, field
from .exceptions import ConfigurationError
from .schema import Schema

logger = logging.getLogger(__name__)

_FIELD_TYPES = ("string", "number", "boolean", "array", "object")

# Builder methods that are not declarable as configuration rules
_RESERVED = frozenset({*_FIELD_TYPES, "custom", "of", "schema", "run", "describe"})


class SchemaFactory:
    """Factory for creating schemas from configuration.

    Configuration Options:
        name (str): Schema name
        fields (dict): Field key to field definition

    Field Definition Options:
        label (str): Display name used in failure messages
        type (str): string, number, boolean, array or object (optional)
        message (str): Override for the type check failure message
        rules (list): Rule entries, applied in order after the type check
        of (dict): Element field definition (array fields)
        schema (dict): Nested schema configuration (object or untyped fields)
    """

    def create(self, **config: Any) -> Schema:
        """Create a Schema instance from configuration.

        Args:
            **config: Schema configuration

        Returns:
            Schema instance
        """
        name = config.get("name")
        fields = config.get("fields") or {}
        if not isinstance(fields, dict):
            raise ConfigurationError(
                "schema 'fields' must be a mapping of field key to definition",
                context={"schema": name},
            )

        logger.debug(f"Creating schema: {name}")

        schema = Schema(name=name)
        for key, field_config in fields.items():
            schema[key] = self.build_chain(field_config or {}, key=key)
        return schema

    def build_chain(self, field_config: dict[str, Any], key: str | None = None) -> BaseChain:
        """Build one field chain from its definition.

        Args:
            field_config: Field definition
            key: Field key, used for log messages only

        Returns:
            The chain for the field
        """
        chain: BaseChain = field(field_config.get("label"))

        field_type = str(field_config.get("type") or "").lower()
        if field_type in _FIELD_TYPES:
            chain = getattr(chain, field_type)(field_config.get("message"))
        elif field_type:
            logger.warning(f"Unknown field type '{field_type}' for field '{key}', skipping")

        for entry in field_config.get("rules") or []:
            chain = self._apply_rule(chain, entry, key)

        if "of" in field_config:
            if hasattr(chain, "of"):
                chain = chain.of(self.build_chain(field_config["of"] or {}, key=key))
            else:
                logger.warning(f"'of' requires an array field, skipping for field '{key}'")

        if "schema" in field_config:
            if hasattr(chain, "schema"):
                chain = chain.schema(self.create(**(field_config["schema"] or {})))
            else:
                logger.warning(f"'schema' is not available for field '{key}', skipping")

        return chain

    def _apply_rule(self, chain: BaseChain, entry: Any, key: str | None) -> BaseChain:
        if isinstance(entry, str):
            rule_name, args = entry, None
        elif isinstance(entry, dict) and len(entry) == 1:
            rule_name, args = next(iter(entry.items()))
        else:
            rule_name = None
        if not isinstance(rule_name, str):
            raise ConfigurationError(
                f"invalid rule entry for field '{key}': {entry!r}",
                context={"field": key, "entry": entry},
            )

        method = None if rule_name in _RESERVED or rule_name.startswith("_") else getattr(
            chain, rule_name, None
        )
        if not callable(method):
            logger.warning(f"Unknown rule '{rule_name}' for field '{key}', skipping")
            return chain

        if args is None:
            return method()
        if isinstance(args, dict):
            return method(**args)
        return method(args)


def load_schema(path: str | Path) -> Schema:
    """Load a schema declaration from a YAML or JSON file.

    Args:
        path: File to read; ``.yaml``/``.yml`` is read as YAML, anything else
            as JSON

    Returns:
        Schema built by the factory
    """
    path = Path(path)
    with open(path) as f:
        if path.suffix in [".yaml", ".yml"]:
            data = yaml.safe_load(f) or {}
        else:
            data = json.load(f)

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"schema file must contain a mapping, got {type(data).__name__}",
            context={"path": str(path)},
        )
    data.setdefault("name", path.stem)
    return schema_factory.create(**data)


# Create singleton instance for registration
schema_factory = SchemaFactory()
