"""Grid schema parsing from mappings and YAML files.

This module validates schema definitions into an immutable GridSchema.
Both the field-name mapping format and the list-of-fields format are
accepted; rendering-only descriptor keys (css, htmlElement, ...) are
ignored because the rendering layer owns them.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Sequence, cast

import yaml

from core.constants import (
    DEFAULT_SEARCH_WEIGHT,
    RESERVED_FIELDS,
    SCHEMA_FILE_VERSION,
    SUPPORTED_FIELD_TYPES,
)
from core.errors import GridSchemaError
from core.types import FieldDescriptor, FieldType, GridSchema

_TYPE_ALIASES = {"text": "string", "textarea": "string", "integer": "number", "float": "number"}


def load_schema_file(schema_path: str) -> GridSchema:
    """Load and validate a YAML schema file from disk.

    Args:
        schema_path: File path to a YAML schema.

    Returns:
        Fully validated schema.

    Raises:
        GridSchemaError: If the file is missing, unreadable, or invalid.
    """
    payload = _load_yaml_payload(schema_path)
    root_mapping = _expect_mapping(payload, "schema file root")
    _parse_version(root_mapping)
    unknown_keys = sorted(set(root_mapping) - {"version", "fields"})
    if unknown_keys:
        raise GridSchemaError(f"Schema file contains unknown root fields: {', '.join(unknown_keys)}.")
    if "fields" not in root_mapping:
        raise GridSchemaError("Schema file missing required field 'fields'. Declare the columns.")
    return build_schema({"fields": root_mapping["fields"]})


def build_schema(raw_schema: object) -> GridSchema:
    """Build a schema from an in-memory definition.

    Args:
        raw_schema: Either ``{"fields": ...}`` or a field-name mapping.

    Returns:
        Validated schema.

    Raises:
        GridSchemaError: If the definition is invalid.
    """
    if isinstance(raw_schema, GridSchema):
        return raw_schema
    root_mapping = _expect_mapping(raw_schema, "schema")
    raw_fields: object = root_mapping.get("fields", root_mapping)
    if isinstance(raw_fields, Mapping):
        descriptors = [
            _parse_field(name, _expect_mapping(body, f"schema field '{name}'"))
            for name, body in _expect_mapping(raw_fields, "schema fields").items()
        ]
    else:
        descriptors = _parse_field_list(_expect_sequence(raw_fields, "schema fields"))
    if not descriptors:
        raise GridSchemaError("Schema must declare at least one field.")
    _ensure_unique_names(descriptors)
    return GridSchema(fields=tuple(descriptors))


def _load_yaml_payload(schema_path: str) -> object:
    schema_file = Path(schema_path).expanduser().resolve()
    if not schema_file.exists():
        raise GridSchemaError(
            f"Schema file does not exist at {schema_file}. Provide a valid YAML file path."
        )
    try:
        payload = cast(object, yaml.safe_load(schema_file.read_text(encoding="utf-8")))
    except OSError as error:
        raise GridSchemaError(
            f"Failed to read schema at {schema_file}: {error}. Check file permissions and retry."
        ) from error
    except yaml.YAMLError as error:
        raise GridSchemaError(
            f"Failed to parse YAML schema at {schema_file}: {error}. Fix YAML syntax and retry."
        ) from error
    if payload is None:
        raise GridSchemaError(f"Schema at {schema_file} is empty. Define 'version' and 'fields'.")
    return payload


def _parse_version(root_mapping: Mapping[str, object]) -> int:
    raw_version = root_mapping.get("version")
    if not isinstance(raw_version, int) or isinstance(raw_version, bool):
        raise GridSchemaError("Schema field 'version' must be an integer. Set version: 1.")
    if raw_version != SCHEMA_FILE_VERSION:
        raise GridSchemaError(f"Unsupported schema version {raw_version}. Use version: 1.")
    return raw_version


def _parse_field_list(rows: Sequence[object]) -> list[FieldDescriptor]:
    descriptors = []
    for index, row in enumerate(rows):
        context = f"schema field #{index + 1}"
        row_mapping = _expect_mapping(row, context)
        name = row_mapping.get("name")
        if not isinstance(name, str) or not name.strip():
            raise GridSchemaError(f"Invalid {context}: field 'name' must be a non-empty string.")
        descriptors.append(_parse_field(name.strip(), row_mapping))
    return descriptors


def _parse_field(name: str, body: Mapping[str, object]) -> FieldDescriptor:
    context = f"schema field '{name}'"
    display_name = _optional_string(body, "displayName", context) or _optional_string(
        body, "label", context
    )
    return FieldDescriptor(
        name=name,
        type=_parse_type(body.get("type", "string"), context),
        display_name=display_name or "",
        required=_optional_bool(body, "required", False, context),
        searchable=_optional_bool(body, "searchable", True, context),
        search_weight=_parse_weight(body.get("searchWeight"), context),
        can_filter=_optional_bool(body, "canFilter", True, context),
        options=_parse_options(body.get("options"), context),
    )


def _parse_type(raw_type: object, context: str) -> FieldType:
    if not isinstance(raw_type, str):
        raise GridSchemaError(f"Invalid {context}: 'type' must be a string.")
    normalized = raw_type.strip().lower()
    normalized = _TYPE_ALIASES.get(normalized, normalized)
    if normalized in SUPPORTED_FIELD_TYPES:
        return cast(FieldType, normalized)
    supported = ", ".join(SUPPORTED_FIELD_TYPES)
    raise GridSchemaError(f"Unsupported type '{raw_type}' in {context}. Use one of: {supported}.")


def _parse_weight(raw_weight: object, context: str) -> float:
    if raw_weight is None:
        return DEFAULT_SEARCH_WEIGHT
    if isinstance(raw_weight, bool) or not isinstance(raw_weight, (int, float)):
        raise GridSchemaError(f"Invalid {context}: 'searchWeight' must be a number.")
    if raw_weight < 0:
        raise GridSchemaError(f"Invalid {context}: 'searchWeight' must not be negative.")
    return float(raw_weight)


def _parse_options(raw_options: object, context: str) -> tuple[str, ...]:
    if raw_options is None:
        return ()
    option_rows = _expect_sequence(raw_options, f"{context} options")
    return tuple(str(option) for option in option_rows)


def _optional_string(mapping: Mapping[str, object], key: str, context: str) -> str | None:
    raw_value = mapping.get(key)
    if raw_value is None:
        return None
    if isinstance(raw_value, str):
        normalized_value = raw_value.strip()
        return normalized_value if normalized_value else None
    raise GridSchemaError(f"Invalid {context}: '{key}' must be a string when provided.")


def _optional_bool(mapping: Mapping[str, object], key: str, default: bool, context: str) -> bool:
    raw_value = mapping.get(key)
    if raw_value is None:
        return default
    if isinstance(raw_value, bool):
        return raw_value
    raise GridSchemaError(f"Invalid {context}: '{key}' must be true or false.")


def _ensure_unique_names(descriptors: Sequence[FieldDescriptor]) -> None:
    seen: set[str] = set()
    for descriptor in descriptors:
        if descriptor.name in seen:
            raise GridSchemaError(f"Schema declares field '{descriptor.name}' more than once.")
        if descriptor.name in RESERVED_FIELDS and descriptor.name != "id":
            raise GridSchemaError(
                f"Schema field '{descriptor.name}' is reserved for store bookkeeping. Rename it."
            )
        seen.add(descriptor.name)


def _expect_mapping(value: object, context: str) -> Mapping[str, object]:
    if isinstance(value, Mapping):
        normalized_mapping = {}
        for key, payload in value.items():
            if not isinstance(key, str):
                raise GridSchemaError(
                    f"Invalid {context}: expected string keys, got {type(key).__name__}."
                )
            normalized_mapping[key] = payload
        return normalized_mapping
    raise GridSchemaError(f"Invalid {context}: expected object mapping, got {type(value).__name__}.")


def _expect_sequence(value: object, context: str) -> Sequence[object]:
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return value
    raise GridSchemaError(f"Invalid {context}: expected list, got {type(value).__name__}.")
