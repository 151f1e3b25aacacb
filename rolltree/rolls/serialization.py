"""
Serialization of roll contexts.

Contexts arrive as plain JSON: nested objects are kept as mappings, except
objects that describe a modifier (`name` and `modifier` keys) or a stat
(`value` plus `rolled_mods` and/or `calculated_mods`), which are turned into
their models.
"""

from pathlib import Path
from typing import Any

from pydantic import ValidationError

from rolltree.core.content import _load_json_file
from rolltree.core.error_handling import ContentLoadError

from .context import RollContext, Selector, Stat
from .modifier import CalculatedModifier, Modifier

_STAT_KEYS = ("rolled_mods", "calculated_mods")


class ContextDeserializer:
    """Factory for creating roll contexts from dictionary data."""

    @staticmethod
    def deserialize(data: dict[str, Any]) -> RollContext:
        """
        Deserialize a roll context from dictionary data.

        Args:
            data: Dictionary with `contexts`, and optionally `main_context`,
                `selectors` and `labels`.

        Returns:
            RollContext: The deserialized context.

        Raises:
            ContentLoadError: If the data does not describe a valid context.

        """
        try:
            contexts = data.get("contexts")
            if not isinstance(contexts, dict):
                raise ValueError("'contexts' must be an object of named contexts")
            return RollContext(
                contexts={
                    name: ContextDeserializer.deserialize_value(value)
                    for name, value in contexts.items()
                },
                main_context=data.get("main_context"),
                selectors=[
                    Selector.model_validate(selector)
                    for selector in data.get("selectors", [])
                ],
                labels=data.get("labels", {}),
            )
        except (ValidationError, ValueError, TypeError) as e:
            raise ContentLoadError(f"Invalid roll context: {e}") from e

    @staticmethod
    def deserialize_value(value: Any) -> Any:
        """Recursively converts modifier and stat objects into their models."""
        if isinstance(value, list):
            return [ContextDeserializer.deserialize_value(item) for item in value]
        if not isinstance(value, dict):
            return value
        if "name" in value and "modifier" in value:
            return ContextDeserializer.deserialize_modifier(value)
        if "value" in value and any(key in value for key in _STAT_KEYS):
            return ContextDeserializer.deserialize_stat(value)
        return {
            key: ContextDeserializer.deserialize_value(item)
            for key, item in value.items()
        }

    @staticmethod
    def deserialize_modifier(data: dict[str, Any]) -> Modifier:
        return Modifier.model_validate(data)

    @staticmethod
    def deserialize_stat(data: dict[str, Any]) -> Stat:
        return Stat(
            value=data["value"],
            label=data.get("label"),
            rolled_mods=[
                ContextDeserializer.deserialize_modifier(mod)
                for mod in data.get("rolled_mods", [])
            ],
            calculated_mods=[
                CalculatedModifier(
                    bonus=ContextDeserializer.deserialize_modifier(mod.get("bonus", mod))
                )
                for mod in data.get("calculated_mods", [])
            ],
        )


class ContextSerializer:
    """Factory for converting roll contexts back to dictionary data."""

    @staticmethod
    def serialize(context: RollContext) -> dict[str, Any]:
        return {
            "contexts": {
                name: ContextSerializer.serialize_value(value)
                for name, value in context.contexts.items()
            },
            "main_context": context.main_context,
            "selectors": [selector.model_dump() for selector in context.selectors],
            "labels": dict(context.labels),
        }

    @staticmethod
    def serialize_value(value: Any) -> Any:
        if isinstance(value, (Modifier, Stat)):
            return value.model_dump(mode="json")
        if isinstance(value, list):
            return [ContextSerializer.serialize_value(item) for item in value]
        if isinstance(value, dict):
            return {
                key: ContextSerializer.serialize_value(item)
                for key, item in value.items()
            }
        return value


def context_from_dict(data: dict[str, Any]) -> RollContext:
    """Builds a roll context from dictionary data."""
    return ContextDeserializer.deserialize(data)


def load_context(path: Path) -> RollContext:
    """
    Loads a roll context from a JSON file.

    Raises:
        ContentLoadError: If the file is missing, malformed or invalid.

    """
    return _load_json_file(path, context_from_dict, "roll context")
