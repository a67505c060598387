"""
Incus Compose - declarative topologies for Incus containers and VMs.

Describe instances, networks, storage pools and profiles in one YAML
document, validate the topology as a whole and get a deterministic start
order back.
"""

__version__ = "0.1.0"
__author__ = "Incus Compose Contributors"

# Re-export key components for easier access
from incus_compose.core import ComposeLoader, ResolvedModel, Validator, parse_document
from incus_compose.models.compose import IncusCompose
from incus_compose.models.container import Container

__all__ = [
    "ComposeLoader",
    "ResolvedModel",
    "Validator",
    "parse_document",
    "IncusCompose",
    "Container",
]
