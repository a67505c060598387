"""Document root model."""

from typing import Any, Dict, Type

from pydantic import BaseModel, ConfigDict, Field

from incus_compose.models.container import Container
from incus_compose.models.network import Network
from incus_compose.models.profile import Profile
from incus_compose.models.storage import StoragePool


class IncusCompose(BaseModel):
    """Root of an incus-compose document, schema version 1.0."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    version: str = Field(..., description="Schema version")
    containers: Dict[str, Container] = Field(..., min_length=1)
    networks: Dict[str, Network] = Field(default_factory=dict)
    storage: Dict[str, StoragePool] = Field(default_factory=dict)
    profiles: Dict[str, Profile] = Field(default_factory=dict)

    def to_document(self) -> Dict[str, Any]:
        """Plain data suitable for YAML output; unset optionals are left out."""
        return self.model_dump(mode="json", exclude_none=True)


# Root model per schema version. Parsing picks the entry matching the
# document's ``version`` and refuses anything else.
SCHEMA_VERSIONS: Dict[str, Type[IncusCompose]] = {
    "1.0": IncusCompose,
}

SUPPORTED_VERSIONS = tuple(SCHEMA_VERSIONS)
