"""Profile specification models."""

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from incus_compose.models.device import Device
from incus_compose.models.values import ConfigMap


class Profile(BaseModel):
    """Reusable bundle of configuration and devices."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    description: Optional[str] = None
    config: ConfigMap = Field(default_factory=dict)
    devices: Dict[str, Device] = Field(default_factory=dict)
