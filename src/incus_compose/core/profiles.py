"""Profile application: compute an instance's effective configuration."""

import logging
from typing import Dict

from incus_compose.models.compose import IncusCompose
from incus_compose.models.container import Container


logger = logging.getLogger(__name__)

ENVIRONMENT_PREFIX = "environment."


def apply_profiles(compose: IncusCompose, name: str) -> Container:
    """Merge a container's profiles into it.

    Profiles are applied left to right, later ones overriding earlier ones;
    the container's own ``config``, ``environment`` and ``devices`` override
    every profile. Devices merge by name. Profile ``environment.*`` config
    keys also seed the environment. Unknown profile names are skipped, as
    they are reported by the validator.
    """
    container = compose.containers[name]
    config: Dict[str, str] = {}
    environment: Dict[str, str] = {}
    devices = {}

    for profile_name in container.profiles:
        profile = compose.profiles.get(profile_name)
        if profile is None:
            logger.debug(f"Container {name}: skipping undefined profile {profile_name}")
            continue
        config.update(profile.config)
        devices.update(profile.devices)
        for key, value in profile.config.items():
            if key.startswith(ENVIRONMENT_PREFIX):
                environment[key[len(ENVIRONMENT_PREFIX):]] = value

    config.update(container.config)
    environment.update(container.environment)
    devices.update(container.devices)

    return container.model_copy(
        update={"config": config, "environment": environment, "devices": devices}
    )


def effective_containers(compose: IncusCompose) -> Dict[str, Container]:
    """Effective configuration of every container, keyed by name in sorted order."""
    return {name: apply_profiles(compose, name) for name in sorted(compose.containers)}
