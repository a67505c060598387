"""YAML loading and dumping for incus-compose documents."""

import hashlib
import io
import logging
from pathlib import Path
from typing import Any, Optional, Union

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError
from ruamel.yaml.scalarstring import LiteralScalarString

from incus_compose.core.parser import parse_document
from incus_compose.errors import DocumentSyntaxError
from incus_compose.models.compose import IncusCompose


logger = logging.getLogger(__name__)


class ComposeLoader:
    """Reads incus-compose documents and remembers the hash of the last one."""

    def __init__(self):
        """Initialize loader."""
        self.yaml = YAML(typ="safe", pure=True)
        self.source_hash: Optional[str] = None

    def load(self, path: Union[str, Path]) -> IncusCompose:
        """Load and parse a document from a file."""
        file_path = Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {file_path}")

        logger.info(f"Loading configuration from {file_path}")
        try:
            text = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Read error: {e}")
            raise DocumentSyntaxError(f"cannot read {file_path}: {e}") from e
        return self.loads(text)

    def loads(self, text: str) -> IncusCompose:
        """Parse a document from YAML text."""
        data = self._read_yaml(text)
        return parse_document(data)

    def _read_yaml(self, text: str) -> Any:
        """Parse YAML text into plain data."""
        self.source_hash = hashlib.sha256(text.encode()).hexdigest()
        try:
            return self.yaml.load(text)
        except YAMLError as e:
            logger.debug(f"YAML error: {e}")
            raise DocumentSyntaxError(str(e)) from e


def _literal_blocks(value: Any) -> Any:
    """Switch multi-line strings to literal block style for readability."""
    if isinstance(value, dict):
        return {key: _literal_blocks(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_literal_blocks(item) for item in value]
    if isinstance(value, str) and "\n" in value:
        return LiteralScalarString(value)
    return value


def dump_document(compose: IncusCompose) -> str:
    """Serialize a document back to YAML text."""
    yaml = YAML()
    yaml.default_flow_style = False
    stream = io.StringIO()
    yaml.dump(_literal_blocks(compose.to_document()), stream)
    return stream.getvalue()
