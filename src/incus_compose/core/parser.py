"""Turn generic structured data into a typed ``IncusCompose``."""

import logging
from typing import Any, Dict, Sequence, Tuple, Type, Union

from pydantic import ValidationError

from incus_compose.errors import (
    MissingField,
    StructuralError,
    TypeMismatch,
    UnknownField,
    UnknownVariant,
    UnsupportedVersion,
)
from incus_compose.models.compose import SCHEMA_VERSIONS, SUPPORTED_VERSIONS, IncusCompose
from incus_compose.models.container import InstanceType
from incus_compose.models.device import DEVICE_TYPES
from incus_compose.models.network import NetworkType
from incus_compose.models.storage import StorageDriver


logger = logging.getLogger(__name__)

Loc = Tuple[Union[str, int], ...]

# pydantic error type -> shape name used in messages
_EXPECTED_SHAPES = {
    "dict_type": "mapping",
    "model_type": "mapping",
    "model_attributes_type": "mapping",
    "list_type": "sequence",
    "string_type": "string",
    "int_type": "integer",
    "int_parsing": "integer",
    "int_from_float": "integer",
    "bool_type": "boolean",
    "bool_parsing": "boolean",
}

_MISSING_TYPES = {"missing", "too_short", "string_too_short"}

# shape errors whose null input means the key was written without a value
_NULLABLE_SHAPES = {"dict_type", "model_type", "model_attributes_type", "list_type", "string_type"}

# pydantic marks a failing mapping key with this location segment
_KEY_MARKER = "[key]"


def shape_of(value: Any) -> str:
    """Name the YAML shape of a value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "float"
    if isinstance(value, str):
        return "string"
    if isinstance(value, dict):
        return "mapping"
    if isinstance(value, (list, tuple)):
        return "sequence"
    return type(value).__name__


def format_path(loc: Sequence[Union[str, int]], data: Any = None) -> str:
    """Render a location as ``containers.web.volumes[0].source``.

    Integers are sequence indices unless ``data`` shows the node at that
    point is a mapping; YAML allows integer keys such as ``containers: {1: ...}``.
    """
    path = ""
    node = data
    for part in loc:
        if part == _KEY_MARKER:
            continue
        is_index = isinstance(part, int) and (node is None or isinstance(node, list))
        if is_index:
            path += f"[{part}]"
        elif path:
            path += f".{part}"
        else:
            path = str(part)
        node = _child(node, part)
    return path or "<root>"


def _child(node: Any, part: Union[str, int]) -> Any:
    if isinstance(node, dict):
        return node.get(part)
    if isinstance(node, list) and isinstance(part, int) and 0 <= part < len(node):
        return node[part]
    return None


def _names_field(loc: Loc) -> bool:
    return bool(loc) and isinstance(loc[-1], str) and loc[-1] != _KEY_MARKER


def _strip_union_tags(loc: Loc) -> Loc:
    """Drop the variant tag pydantic inserts after ``devices.<name>``."""
    parts = list(loc)
    for i in range(len(parts) - 3, -1, -1):
        if parts[i] == "devices" and parts[i + 2] in DEVICE_TYPES:
            del parts[i + 2]
    return tuple(parts)


def _legal_values(loc: Loc) -> Tuple[str, ...]:
    field = loc[-1]
    if field == "instance_type":
        return tuple(t.value for t in InstanceType)
    if field == "driver":
        return tuple(d.value for d in StorageDriver)
    if field == "type" and loc[0] == "networks":
        return tuple(t.value for t in NetworkType)
    return tuple(DEVICE_TYPES)


def translate_error(error: Dict[str, Any], data: Any = None) -> StructuralError:
    """Map one pydantic error entry onto the structural error hierarchy.

    ``data`` is the validated input, used to tell integer mapping keys
    from sequence indices when rendering the path.
    """
    error_type = error["type"]
    loc = _strip_union_tags(tuple(error["loc"]))
    path = format_path(loc, data)

    if error_type in _MISSING_TYPES:
        return MissingField(path)
    if error_type in _NULLABLE_SHAPES and error["input"] is None and _names_field(loc):
        return MissingField(path)
    if error_type == "extra_forbidden":
        return UnknownField(path)
    if error_type == "union_tag_not_found":
        return MissingField(format_path(loc + ("type",), data))
    if error_type == "union_tag_invalid":
        loc = loc + ("type",)
        return UnknownVariant(format_path(loc, data), error["ctx"]["tag"], _legal_values(loc))
    if error_type in ("enum", "literal_error"):
        return UnknownVariant(path, error["input"], _legal_values(loc))

    expected = _EXPECTED_SHAPES.get(error_type, error["msg"])
    return TypeMismatch(path, expected, shape_of(error["input"]))


def _read_version(data: Dict[str, Any]) -> str:
    if "version" not in data or data["version"] is None:
        raise MissingField("version")
    version = data["version"]
    if isinstance(version, bool) or not isinstance(version, (str, int, float)):
        raise TypeMismatch("version", "string", shape_of(version))
    return str(version)


def root_model_for(version: str) -> Type[IncusCompose]:
    """Return the root model registered for a schema version."""
    try:
        return SCHEMA_VERSIONS[version]
    except KeyError:
        raise UnsupportedVersion(version, SUPPORTED_VERSIONS) from None


def parse_document(data: Any) -> IncusCompose:
    """Build an ``IncusCompose`` from already-parsed data.

    Raises the first ``StructuralError`` found; defaults are applied here so
    downstream code never has to guess them.
    """
    if not isinstance(data, dict):
        raise TypeMismatch("<root>", "mapping", shape_of(data))

    version = _read_version(data)
    model = root_model_for(version)

    payload = {**data, "version": version}
    try:
        compose = model.model_validate(payload)
    except ValidationError as e:
        errors = e.errors()
        logger.debug(f"Document rejected with {len(errors)} error(s)")
        raise translate_error(errors[0], payload) from e

    logger.debug(
        f"Parsed document v{version}: {len(compose.containers)} containers, "
        f"{len(compose.networks)} networks, {len(compose.storage)} pools, "
        f"{len(compose.profiles)} profiles"
    )
    return compose
