"""Parsing, validation and planning for incus-compose documents."""

from incus_compose.core.loader import ComposeLoader, dump_document
from incus_compose.core.parser import parse_document
from incus_compose.core.profiles import apply_profiles
from incus_compose.core.validator import ResolvedModel, ValidationResult, Validator

__all__ = [
    "ComposeLoader",
    "dump_document",
    "parse_document",
    "apply_profiles",
    "ResolvedModel",
    "ValidationResult",
    "Validator",
]
