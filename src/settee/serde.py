"""Serialization of documents into JSON request bodies."""

import json
from collections.abc import Mapping
from typing import Any, Dict

from settee.exceptions import ValidationError


def serialize_document(doc: Any) -> Dict[str, Any]:
    """Turn a document into a JSON-compatible dict.

    Supports:
    - dict (and other mappings)
    - Pydantic v2 models (model_dump)
    - Objects with to_json() or to_dict() method (duck typing)
    - Nested objects inside containers are recursively serialized

    Raises:
        ValidationError: If the document is None, does not serialize to a JSON object
            (lists, str and bytes are not documents) or holds a value with no JSON form
    """
    if doc is None:
        raise ValidationError("Expected a document, got None")
    if isinstance(doc, (str, bytes, list, tuple)):
        raise ValidationError(f"Expected a JSON object for the document, got {type(doc).__name__}")
    value = _serialize_value(doc)
    if not isinstance(value, dict):
        raise ValidationError(f"Expected a JSON object for the document, got {type(value).__name__}")
    return value


def _serialize_value(value: Any) -> Any:
    """Recursively serialize a value (used internally for container contents)."""
    if value is None:
        return None
    if isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, bytes):
        raise ValidationError("bytes data is not supported")
    if isinstance(value, Mapping):
        return {k: _serialize_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_serialize_value(item) for item in value]
    if hasattr(value, "model_dump") and callable(value.model_dump):  # Pydantic v2
        return _serialize_value(value.model_dump())
    if hasattr(value, "to_json") and callable(value.to_json):
        return _serialize_value(value.to_json())
    if hasattr(value, "to_dict") and callable(value.to_dict):
        return _serialize_value(value.to_dict())
    raise ValidationError(
        f"Cannot serialize value of type {type(value).__name__}. Expected dict, list, primitive, or Serializable."
    )


def encode_body(payload: Any) -> bytes:
    """Compact JSON encoding used for every request body."""
    return json.dumps(payload, separators=(",", ":")).encode("utf-8")
