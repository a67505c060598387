"""Semantic validation and start-order resolution."""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from incus_compose.core.graph import DependencyGraph
from incus_compose.core.profiles import effective_containers
from incus_compose.errors import (
    DependencyCycle,
    InvalidDevice,
    InvalidResourceValue,
    SelfDependency,
    UnresolvedReference,
    ValidationFailed,
    Violation,
)
from incus_compose.models.compose import IncusCompose
from incus_compose.models.container import Container
from incus_compose.models.values import is_positive_cpu, is_positive_memory


logger = logging.getLogger(__name__)


class ResolvedModel(BaseModel):
    """A validated document together with its computed start order."""
    model_config = ConfigDict(frozen=True)

    compose: IncusCompose
    start_order: Tuple[str, ...]
    start_batches: Tuple[Tuple[str, ...], ...]
    effective: Dict[str, Container]
    source_hash: Optional[str] = None


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a validation pass: a resolved model or the violations found."""
    resolved: Optional[ResolvedModel] = None
    violations: Tuple[Violation, ...] = ()

    @property
    def ok(self) -> bool:
        return self.resolved is not None


class Validator:
    """Checks a parsed document for cross-entity consistency.

    Every check runs against the same document and the violations of all of
    them are returned together.
    """

    def validate(self, compose: IncusCompose, source_hash: Optional[str] = None) -> ValidationResult:
        """Validate a document and resolve it when it is consistent."""
        graph_violations: List[Violation] = []
        graph_violations.extend(self.check_references(compose))
        graph_violations.extend(self.check_self_dependencies(compose))

        graph = DependencyGraph(
            {name: c.depends_on for name, c in compose.containers.items()},
            {name: c.boot_priority for name, c in compose.containers.items()},
        )
        graph_violations.extend(DependencyCycle(cycle) for cycle in graph.find_cycles())

        violations = graph_violations + self.check_devices(compose) + self.check_resources(compose)
        if violations:
            for violation in violations:
                logger.warning(violation.message)
            return ValidationResult(violations=tuple(violations))

        order = graph.start_order()
        resolved = ResolvedModel(
            compose=compose,
            start_order=tuple(order),
            start_batches=tuple(tuple(batch) for batch in graph.start_batches(order)),
            effective=effective_containers(compose),
            source_hash=source_hash,
        )
        logger.info(f"Document valid, start order: {', '.join(order)}")
        return ValidationResult(resolved=resolved)

    def resolve(self, compose: IncusCompose, source_hash: Optional[str] = None) -> ResolvedModel:
        """Return the resolved model or raise ``ValidationFailed``."""
        result = self.validate(compose, source_hash=source_hash)
        if not result.ok:
            raise ValidationFailed(result.violations)
        return result.resolved

    def check_references(self, compose: IncusCompose) -> List[Violation]:
        """Every referenced network, pool, profile and container must exist."""
        violations: List[Violation] = []
        for name in sorted(compose.containers):
            container = compose.containers[name]
            for network in container.networks:
                if network not in compose.networks:
                    violations.append(UnresolvedReference(name, "networks", network))
            for volume in container.volumes:
                if volume.pool is not None and volume.pool not in compose.storage:
                    violations.append(UnresolvedReference(name, "volumes.pool", volume.pool))
            for profile in container.profiles:
                if profile not in compose.profiles:
                    violations.append(UnresolvedReference(name, "profiles", profile))
            for dep in container.depends_on:
                if dep not in compose.containers:
                    violations.append(UnresolvedReference(name, "depends_on", dep))
        return violations

    def check_self_dependencies(self, compose: IncusCompose) -> List[Violation]:
        """A container must not depend on itself."""
        return [
            SelfDependency(name)
            for name in sorted(compose.containers)
            if name in compose.containers[name].depends_on
        ]

    def check_devices(self, compose: IncusCompose) -> List[Violation]:
        """Required device fields must hold a non-blank value."""
        violations: List[Violation] = []
        owners = [("containers", compose.containers), ("profiles", compose.profiles)]
        for scope, entities in owners:
            for owner in sorted(entities):
                devices = entities[owner].devices
                for device_name in sorted(devices):
                    device = devices[device_name]
                    for field in device.required_fields:
                        if not str(getattr(device, field, "") or "").strip():
                            violations.append(InvalidDevice(owner, device_name, field, scope=scope))
        return violations

    def check_resources(self, compose: IncusCompose) -> List[Violation]:
        """CPU and memory limits must be positive quantities."""
        violations: List[Violation] = []
        for name in sorted(compose.containers):
            container = compose.containers[name]
            if container.cpu is not None and container.cpu.limit is not None:
                if not is_positive_cpu(container.cpu.limit):
                    violations.append(InvalidResourceValue(name, "cpu.limit", container.cpu.limit))
            if container.memory is not None:
                if not is_positive_memory(container.memory.limit):
                    violations.append(InvalidResourceValue(name, "memory.limit", container.memory.limit))
        return violations
