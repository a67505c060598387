"""Error types.

Structural errors are raised while turning raw data into the typed model and
stop processing. Semantic violations are plain records collected by the
validator and surfaced together through ``ValidationFailed``.
"""

from dataclasses import dataclass
from typing import Sequence, Tuple, Union


class ComposeError(Exception):
    """Base class for every error raised by incus-compose."""


class StructuralError(ComposeError):
    """The document cannot be parsed into the typed model."""

    kind = "structural"

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(message)


class DocumentSyntaxError(StructuralError):
    """The text is not well-formed YAML."""

    kind = "syntax"

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__("<root>", f"Invalid YAML: {detail}")


class MissingField(StructuralError):
    """A required field is absent or empty."""

    kind = "missing_field"

    def __init__(self, path: str):
        super().__init__(path, f"Missing required field: {path}")


class UnknownField(StructuralError):
    """A key that the schema does not define."""

    kind = "unknown_field"

    def __init__(self, path: str):
        super().__init__(path, f"Unknown field: {path}")


class TypeMismatch(StructuralError):
    """A field has the wrong shape."""

    kind = "type_mismatch"

    def __init__(self, path: str, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(path, f"{path}: expected {expected}, got {actual}")


class UnknownVariant(StructuralError):
    """An enumerated field holds a value outside its legal set."""

    kind = "unknown_variant"

    def __init__(self, path: str, value: object, legal: Sequence[str]):
        self.value = value
        self.legal = tuple(legal)
        choices = ", ".join(self.legal)
        super().__init__(path, f"{path}: unknown value {value!r}, expected one of: {choices}")


class UnsupportedVersion(StructuralError):
    """The document declares a schema version this tool does not handle."""

    kind = "unsupported_version"

    def __init__(self, found: str, supported: Sequence[str]):
        self.found = found
        self.supported = tuple(supported)
        super().__init__(
            "version",
            f"Unsupported schema version {found!r}, supported: {', '.join(self.supported)}",
        )


@dataclass(frozen=True)
class UnresolvedReference:
    """A container refers to a network, pool, profile or container that does not exist."""
    source: str
    field: str
    target: str

    kind = "unresolved_reference"

    @property
    def path(self) -> str:
        return f"containers.{self.source}.{self.field}"

    @property
    def message(self) -> str:
        return f"{self.path}: '{self.target}' is not defined"


@dataclass(frozen=True)
class SelfDependency:
    """A container lists itself in depends_on."""
    name: str

    kind = "self_dependency"

    @property
    def path(self) -> str:
        return f"containers.{self.name}.depends_on"

    @property
    def message(self) -> str:
        return f"{self.path}: container depends on itself"


@dataclass(frozen=True)
class DependencyCycle:
    """A loop in the depends_on graph."""
    cycle: Tuple[str, ...]

    kind = "dependency_cycle"

    @property
    def path(self) -> str:
        return f"containers.{self.cycle[0]}.depends_on"

    @property
    def message(self) -> str:
        loop = " -> ".join(self.cycle + self.cycle[:1])
        return f"Dependency cycle: {loop}"


@dataclass(frozen=True)
class InvalidDevice:
    """A device lacks a field its type requires."""
    container: str
    device_name: str
    missing_field: str
    scope: str = "containers"

    kind = "invalid_device"

    @property
    def path(self) -> str:
        return f"{self.scope}.{self.container}.devices.{self.device_name}.{self.missing_field}"

    @property
    def message(self) -> str:
        return f"{self.path}: required for this device type"


@dataclass(frozen=True)
class InvalidResourceValue:
    """A resource limit that is not a positive quantity."""
    container: str
    field: str
    raw_value: str

    kind = "invalid_resource_value"

    @property
    def path(self) -> str:
        return f"containers.{self.container}.{self.field}"

    @property
    def message(self) -> str:
        return f"{self.path}: {self.raw_value!r} is not a positive quantity"


class ValidationFailed(ComposeError):
    """The document parsed but describes an inconsistent topology."""

    def __init__(self, violations: Sequence[object]):
        self.violations = tuple(violations)
        lines = [v.message for v in self.violations]
        super().__init__(
            f"{len(self.violations)} validation error(s):\n" + "\n".join(f"  - {line}" for line in lines)
        )


Violation = Union[
    UnresolvedReference,
    SelfDependency,
    DependencyCycle,
    InvalidDevice,
    InvalidResourceValue,
]
