"""Dry-run planning: the ``incus`` commands a resolved model translates to.

Nothing here talks to a server. The plan is a flat, ordered list of argv
vectors grouped into sections, rendered to a bash script on request.
"""

import logging
import shlex
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional

from incus_compose import __version__
from incus_compose.core.validator import ResolvedModel
from incus_compose.models.container import Container
from incus_compose.utils.templates import render_template


logger = logging.getLogger(__name__)

SECTION_STORAGE = "Storage Pools"
SECTION_NETWORKS = "Network Creation"
SECTION_PROFILES = "Profiles"
SECTION_INSTANCES = "Instance Creation and Configuration"
SECTION_START = "Instance Startup"

SCRIPT_TEMPLATE = """\
#!/bin/bash
# Generated by incus-compose
# Generated at: {{ generated_at }}
# Generator version: {{ version }}
{% if source_hash %}
# Source hash: {{ source_hash }}
{% endif %}

set -e  # Exit on any error

{% if verbose %}
echo 'Starting incus-compose deployment...'

{% endif %}
{% for section, steps in sections %}
# ============================================
# {{ section }}
# ============================================

{% for step in steps %}
{% if step.comment %}
# {{ step.comment }}
{% endif %}
{% if verbose %}
echo {{ ("Executing: " ~ step.shell) | shquote }}
{% endif %}
{{ step.shell }}
{% endfor %}

{% endfor %}
{% if verbose %}
echo 'Deployment completed successfully!'
{% endif %}
"""


@dataclass(frozen=True)
class PlanStep:
    """One command of the plan."""
    section: str
    argv: List[str]
    comment: Optional[str] = None

    @property
    def shell(self) -> str:
        return " ".join(shlex.quote(arg) for arg in self.argv)


@dataclass
class Plan:
    """Ordered commands that would realise a resolved model."""
    steps: List[PlanStep] = field(default_factory=list)
    source_hash: Optional[str] = None

    def add(self, section: str, *argv: str, comment: Optional[str] = None):
        if comment:
            comment = " ".join(comment.split())
        self.steps.append(PlanStep(section, list(argv), comment or None))

    def sections(self) -> List[tuple]:
        """Steps grouped by section, in first-seen order."""
        grouped: Dict[str, List[PlanStep]] = {}
        for step in self.steps:
            grouped.setdefault(step.section, []).append(step)
        return list(grouped.items())

    def commands(self) -> List[str]:
        return [step.shell for step in self.steps]


def _pairs(config: Dict[str, str]) -> List[str]:
    return [f"{key}={config[key]}" for key in sorted(config)]


def image_reference(container: Container) -> str:
    """Full image reference, e.g. ``images:ubuntu/22.04``."""
    server = container.image_server
    if not server:
        return container.image
    if not server.endswith(":"):
        server += ":"
    return f"{server}{container.image}"


def instance_config(container: Container) -> Dict[str, str]:
    """Instance config keys derived from the container's typed fields."""
    config = dict(container.config)
    if container.cpu is not None:
        if container.cpu.limit is not None:
            config["limits.cpu"] = container.cpu.limit
        if container.cpu.allowance is not None:
            config["limits.cpu.allowance"] = container.cpu.allowance
        if container.cpu.priority is not None:
            config["limits.cpu.priority"] = str(container.cpu.priority)
    if container.memory is not None:
        config["limits.memory"] = container.memory.limit
        if container.memory.swap is not None:
            config["limits.memory.swap"] = container.memory.swap
        if container.memory.swap_priority is not None:
            config["limits.memory.swap.priority"] = str(container.memory.swap_priority)
    for key, value in container.environment.items():
        config[f"environment.{key}"] = value
    config["boot.autostart"] = "true" if container.autostart else "false"
    if container.boot_priority:
        config["boot.autostart.priority"] = str(container.boot_priority)
    if container.cloud_init is not None:
        if container.cloud_init.user_data is not None:
            config["cloud-init.user-data"] = container.cloud_init.user_data
        if container.cloud_init.network_config is not None:
            config["cloud-init.network-config"] = container.cloud_init.network_config
        if container.cloud_init.vendor_data is not None:
            config["cloud-init.vendor-data"] = container.cloud_init.vendor_data
    return config


def build_plan(resolved: ResolvedModel) -> Plan:
    """Translate a resolved model into ``incus`` commands.

    Pools come first, then networks and profiles, then instances in start
    order; instances with ``autostart`` are started last, again in start
    order.
    """
    compose = resolved.compose
    plan = Plan(source_hash=resolved.source_hash)

    for name in sorted(compose.storage):
        pool = compose.storage[name]
        plan.add(SECTION_STORAGE, "incus", "storage", "create", name, pool.driver.value,
                 *_pairs(pool.config), comment=pool.description)

    for name in sorted(compose.networks):
        network = compose.networks[name]
        plan.add(SECTION_NETWORKS, "incus", "network", "create", name, f"--type={network.type.value}",
                 *_pairs(network.config), comment=network.description)

    for name in sorted(compose.profiles):
        profile = compose.profiles[name]
        plan.add(SECTION_PROFILES, "incus", "profile", "create", name, comment=profile.description)
        if profile.config:
            plan.add(SECTION_PROFILES, "incus", "profile", "set", name, *_pairs(profile.config))
        for device_name in sorted(profile.devices):
            device = profile.devices[device_name]
            plan.add(SECTION_PROFILES, "incus", "profile", "device", "add", name, device_name,
                     device.type, *_pairs(device.properties()))

    for name in resolved.start_order:
        container = compose.containers[name]
        argv = ["incus", "init", image_reference(container), name]
        if container.is_vm:
            argv.append("--vm")
        for profile in container.profiles:
            argv.extend(["--profile", profile])
        for pair in _pairs(instance_config(container)):
            argv.extend(["-c", pair])
        plan.add(SECTION_INSTANCES, *argv, comment=container.description)

        for device_name in sorted(container.devices):
            device = container.devices[device_name]
            plan.add(SECTION_INSTANCES, "incus", "config", "device", "add", name, device_name,
                     device.type, *_pairs(device.properties()))
        for index, volume in enumerate(container.volumes):
            props = {"source": volume.source, "path": volume.target}
            if volume.pool is not None:
                props["pool"] = volume.pool
            if volume.readonly:
                props["readonly"] = "true"
            plan.add(SECTION_INSTANCES, "incus", "config", "device", "add", name, f"volume{index}",
                     "disk", *_pairs(props))
        for network in container.networks:
            plan.add(SECTION_INSTANCES, "incus", "network", "attach", network, name)

    for name in resolved.start_order:
        if compose.containers[name].autostart:
            plan.add(SECTION_START, "incus", "start", name)

    logger.debug(f"Built plan with {len(plan.steps)} commands")
    return plan


def render_script(plan: Plan, verbose: bool = False, generated_at: Optional[datetime] = None) -> str:
    """Render a plan as an executable bash script."""
    generated_at = generated_at or datetime.now(timezone.utc)
    return render_template(
        SCRIPT_TEMPLATE,
        generated_at=generated_at.isoformat(),
        version=__version__,
        source_hash=plan.source_hash,
        sections=plan.sections(),
        verbose=verbose,
    )
