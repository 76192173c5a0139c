"""
Schema-aware argument coercion for tool calls.

Models often send structured arguments (lists, objects) as JSON text. This
module turns such strings back into structures, guided by the tool's input
schema when one is registered, without ever mangling text that only happens
to look like JSON (e.g. "[Draft] Title").
"""

import copy
import json
import logging
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, TypedDict

logger = logging.getLogger(__name__)

_STRUCTURED_TYPES = frozenset({"array", "object"})


class CoercionStats(TypedDict):
    total_calls: int
    decisions: Dict[str, int]


class CoercionDecision(Enum):
    """What happened to a single string argument."""

    PARSED_BY_SCHEMA = "parsed_by_schema"  # Schema says array/object, JSON parsed
    KEPT_BY_SCHEMA = "kept_by_schema"  # Schema says string, never parsed
    PARSED_BY_HEURISTIC = "parsed_by_heuristic"  # No schema, bracketed JSON parsed
    KEPT_UNPARSEABLE = "kept_unparseable"  # Parse attempted and failed
    UNTOUCHED = "untouched"  # Not JSON-like, no parse attempted


def clone_arguments(arguments: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a structural copy of an argument mapping."""
    return {key: copy.deepcopy(value) for key, value in arguments.items()}


def strip_side_channel(
    arguments: Mapping[str, Any], param: str
) -> Tuple[Dict[str, Any], Optional[Any]]:
    """Copy ``arguments`` without the UI-only ``param`` field.

    Returns:
        (arguments_without_param, removed_value_or_None)
    """
    cleaned = clone_arguments(arguments)
    removed = cleaned.pop(param, None)
    return cleaned, removed


def looks_like_json(value: str) -> bool:
    """True when the trimmed text is bracketed on both ends ([...] or {...})."""
    trimmed = value.strip()
    return (trimmed.startswith("[") and trimmed.endswith("]")) or (
        trimmed.startswith("{") and trimmed.endswith("}")
    )


class ArgumentCoercer:
    """
    Normalize string-typed argument values into structured values.

    Rules per string value:
    - schema type array/object: parse JSON, keep the string on failure
    - schema type string: never parse
    - no schema or unknown type: parse only if bracketed on both ends,
      keep the string on failure

    Non-string values pass through unchanged. Coercion never raises.

    Usage:
        coercer = ArgumentCoercer()
        args = coercer.coerce({"ids": "[1, 2]"}, input_schema=tool.input_schema)
    """

    def __init__(self) -> None:
        self.stats: CoercionStats = {
            "total_calls": 0,
            "decisions": {decision.value: 0 for decision in CoercionDecision},
        }

    def coerce(
        self,
        arguments: Mapping[str, Any],
        input_schema: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Return a coerced copy of ``arguments``; the input is not modified."""
        self.stats["total_calls"] += 1
        coerced = clone_arguments(arguments)
        properties = _schema_properties(input_schema)

        for key, value in coerced.items():
            if not isinstance(value, str):
                continue
            new_value, decision = self.coerce_value(value, _declared_type(properties, key))
            self.stats["decisions"][decision.value] += 1
            if decision in (CoercionDecision.PARSED_BY_SCHEMA, CoercionDecision.PARSED_BY_HEURISTIC):
                coerced[key] = new_value
            logger.debug(f"Argument '{key}': {decision.value}")

        return coerced

    def coerce_value(
        self, value: str, expected_type: Optional[str]
    ) -> Tuple[Any, CoercionDecision]:
        """Coerce one string value given its declared schema type."""
        if expected_type in _STRUCTURED_TYPES:
            parsed, ok = _try_parse(value)
            if ok:
                return parsed, CoercionDecision.PARSED_BY_SCHEMA
            return value, CoercionDecision.KEPT_UNPARSEABLE

        if expected_type == "string":
            return value, CoercionDecision.KEPT_BY_SCHEMA

        if not looks_like_json(value):
            return value, CoercionDecision.UNTOUCHED

        parsed, ok = _try_parse(value)
        if ok:
            return parsed, CoercionDecision.PARSED_BY_HEURISTIC
        return value, CoercionDecision.KEPT_UNPARSEABLE

    def get_stats(self) -> CoercionStats:
        return copy.deepcopy(self.stats)

    def reset_stats(self) -> None:
        self.stats["total_calls"] = 0
        for decision in CoercionDecision:
            self.stats["decisions"][decision.value] = 0


def _schema_properties(input_schema: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    if not isinstance(input_schema, dict):
        return {}
    properties = input_schema.get("properties")
    return properties if isinstance(properties, dict) else {}


def _declared_type(properties: Dict[str, Any], key: str) -> Optional[str]:
    prop = properties.get(key)
    if not isinstance(prop, dict):
        return None
    declared = prop.get("type")
    return declared if isinstance(declared, str) else None


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {name}")


def _try_parse(value: str) -> Tuple[Any, bool]:
    try:
        return json.loads(value, parse_constant=_reject_constant), True
    except (ValueError, RecursionError):
        return value, False
