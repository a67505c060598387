"""Network specification models."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from incus_compose.models.values import ConfigMap


class NetworkType(str, Enum):
    """Network types supported by Incus."""
    BRIDGE = "bridge"
    MACVLAN = "macvlan"
    SRIOV = "sriov"
    OVN = "ovn"
    PHYSICAL = "physical"


class Network(BaseModel):
    """Managed network specification."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    type: NetworkType = Field(..., description="Network type")
    description: Optional[str] = None
    # ipv4.address, ipv4.nat, ... are passed through as-is
    config: ConfigMap = Field(default_factory=dict)
