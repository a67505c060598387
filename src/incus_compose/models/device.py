"""Device specification models.

Devices form a closed set tagged by ``type``. Each variant only carries the
fields that make sense for it, so a ``disk`` without ``path`` never makes it
past parsing.
"""

from typing import Annotated, ClassVar, Dict, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class BaseDevice(BaseModel):
    """Fields and behaviour shared by every device variant."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    # Names of the fields that must be present for this variant.
    required_fields: ClassVar[Tuple[str, ...]] = ()

    def properties(self) -> Dict[str, str]:
        """Device properties as ``key -> value`` strings, ``type`` excluded."""
        props = {}
        for key, value in self.model_dump(exclude={"type"}, exclude_none=True).items():
            if isinstance(value, bool):
                value = "true" if value else "false"
            props[key] = str(value)
        return props


class DiskDevice(BaseDevice):
    """Host path or volume mounted into the instance."""
    type: Literal["disk"] = "disk"
    source: str = Field(..., description="Host path or volume name")
    path: str = Field(..., description="Mount point inside the instance")
    readonly: Optional[bool] = None

    required_fields: ClassVar[Tuple[str, ...]] = ("source", "path")


class NicDevice(BaseDevice):
    """Network interface."""
    type: Literal["nic"] = "nic"
    network: str = Field(..., description="Managed network to attach to")
    name: Optional[str] = Field(None, description="Interface name inside the instance")
    hwaddr: Optional[str] = Field(None, description="MAC address")

    required_fields: ClassVar[Tuple[str, ...]] = ("network",)


class ProxyDevice(BaseDevice):
    """Port forward between the host and the instance."""
    type: Literal["proxy"] = "proxy"
    listen: str = Field(..., description="Listen address, e.g. tcp:0.0.0.0:80")
    connect: str = Field(..., description="Connect address, e.g. tcp:127.0.0.1:80")
    bind: Optional[str] = Field(None, description="Side to bind on: host or instance")

    required_fields: ClassVar[Tuple[str, ...]] = ("listen", "connect")


class GpuDevice(BaseDevice):
    """GPU passthrough."""
    type: Literal["gpu"] = "gpu"
    id: Optional[str] = None
    vendorid: Optional[str] = None
    productid: Optional[str] = None


class UsbDevice(BaseDevice):
    """USB passthrough."""
    type: Literal["usb"] = "usb"
    vendorid: Optional[str] = None
    productid: Optional[str] = None


DEVICE_TYPES = {
    "disk": DiskDevice,
    "nic": NicDevice,
    "proxy": ProxyDevice,
    "gpu": GpuDevice,
    "usb": UsbDevice,
}

Device = Annotated[
    Union[DiskDevice, NicDevice, ProxyDevice, GpuDevice, UsbDevice],
    Field(discriminator="type"),
]
