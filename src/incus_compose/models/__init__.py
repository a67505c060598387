"""Pydantic models for incus-compose documents."""

from incus_compose.models.compose import IncusCompose, SCHEMA_VERSIONS, SUPPORTED_VERSIONS
from incus_compose.models.config import ComposerConfig
from incus_compose.models.container import (
    CloudInit,
    Container,
    CpuLimits,
    InstanceType,
    MemoryLimits,
    Volume,
)
from incus_compose.models.device import (
    DEVICE_TYPES,
    Device,
    DiskDevice,
    GpuDevice,
    NicDevice,
    ProxyDevice,
    UsbDevice,
)
from incus_compose.models.network import Network, NetworkType
from incus_compose.models.profile import Profile
from incus_compose.models.storage import StorageDriver, StoragePool

__all__ = [
    "IncusCompose",
    "SCHEMA_VERSIONS",
    "SUPPORTED_VERSIONS",
    "ComposerConfig",
    "CloudInit",
    "Container",
    "CpuLimits",
    "InstanceType",
    "MemoryLimits",
    "Volume",
    "DEVICE_TYPES",
    "Device",
    "DiskDevice",
    "GpuDevice",
    "NicDevice",
    "ProxyDevice",
    "UsbDevice",
    "Network",
    "NetworkType",
    "Profile",
    "StorageDriver",
    "StoragePool",
]
