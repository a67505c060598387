"""Container and virtual machine specification models."""

from enum import Enum
from typing import Annotated, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

from incus_compose.models.device import Device
from incus_compose.models.values import ConfigMap, Quantity


class InstanceType(str, Enum):
    """Kind of instance to create."""
    CONTAINER = "container"
    VIRTUAL_MACHINE = "virtual-machine"


class CpuLimits(BaseModel):
    """CPU resource limits."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    limit: Optional[Quantity] = Field(None, description="Core count, range or set, e.g. 2 or 1-3")
    allowance: Optional[Quantity] = Field(None, description="Time allowance, e.g. 50%")
    priority: Optional[int] = Field(None, ge=0)


class MemoryLimits(BaseModel):
    """Memory resource limits."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    limit: Quantity = Field(..., description="Memory limit, e.g. 2GB or 512MiB")
    swap: Optional[Quantity] = None
    swap_priority: Optional[int] = Field(None, ge=0)


class Volume(BaseModel):
    """Storage volume or host path attached to an instance."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    source: str = Field(..., description="Source path or volume name")
    target: str = Field(..., description="Target path inside the instance")
    pool: Optional[str] = Field(None, description="Storage pool holding the volume")
    readonly: bool = Field(default=False)


class CloudInit(BaseModel):
    """Cloud-init payloads, passed through as raw text."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    user_data: Optional[str] = None
    network_config: Optional[str] = None
    vendor_data: Optional[str] = None


class Container(BaseModel):
    """Container or virtual machine specification.

    The instance name is the key under ``containers`` in the document and is
    not repeated here.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    instance_type: InstanceType = Field(default=InstanceType.CONTAINER)
    image: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)] = Field(
        ..., description="Image alias, e.g. ubuntu/22.04"
    )
    image_server: str = Field(default="images:", description="Image remote, e.g. images: or ubuntu:")
    description: Optional[str] = None
    cpu: Optional[CpuLimits] = None
    memory: Optional[MemoryLimits] = None
    networks: List[str] = Field(default_factory=list)
    volumes: List[Volume] = Field(default_factory=list)
    devices: Dict[str, Device] = Field(default_factory=dict)
    config: ConfigMap = Field(default_factory=dict)
    environment: ConfigMap = Field(default_factory=dict)
    autostart: bool = Field(default=True)
    boot_priority: int = Field(default=0, description="Higher starts first among independent instances")
    depends_on: List[str] = Field(default_factory=list)
    profiles: List[str] = Field(default_factory=list)
    cloud_init: Optional[CloudInit] = None

    @property
    def is_vm(self) -> bool:
        """Whether this instance is a virtual machine."""
        return self.instance_type == InstanceType.VIRTUAL_MACHINE
