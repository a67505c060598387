"""Storage pool specification models."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from incus_compose.models.values import ConfigMap


class StorageDriver(str, Enum):
    """Storage drivers supported by Incus."""
    DIR = "dir"
    BTRFS = "btrfs"
    LVM = "lvm"
    ZFS = "zfs"
    CEPH = "ceph"


class StoragePool(BaseModel):
    """Storage pool specification."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    driver: StorageDriver = Field(..., description="Pool driver")
    description: Optional[str] = None
    config: ConfigMap = Field(default_factory=dict)
