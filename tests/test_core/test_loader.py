"""Tests for YAML loading and dumping."""

import hashlib

import pytest

from incus_compose.core.loader import ComposeLoader, dump_document
from incus_compose.core.parser import parse_document
from incus_compose.errors import DocumentSyntaxError, MissingField, TypeMismatch, UnknownVariant
from incus_compose.models.network import NetworkType


class TestComposeLoader:
    """Test ComposeLoader."""

    def test_loads_sample(self, sample_text):
        """Test the sample document parses completely."""
        compose = ComposeLoader().loads(sample_text)

        assert sorted(compose.containers) == ["db", "web", "worker"]
        assert compose.networks["frontend"].type == NetworkType.BRIDGE
        assert compose.networks["frontend"].config["ipv4.nat"] == "true"
        assert compose.containers["web"].cpu.limit == "2"
        assert compose.containers["worker"].is_vm is True
        assert compose.containers["web"].cloud_init.user_data.startswith("#cloud-config")

    def test_load_from_file(self, sample_file, sample_text):
        """Test loading from a path records the source hash."""
        loader = ComposeLoader()
        compose = loader.load(sample_file)

        assert "db" in compose.containers
        assert loader.source_hash == hashlib.sha256(sample_text.encode()).hexdigest()

    def test_missing_file(self, tmp_path):
        """Test a missing file."""
        with pytest.raises(FileNotFoundError):
            ComposeLoader().load(tmp_path / "absent.yaml")

    def test_directory_is_not_a_document(self, tmp_path):
        """Test a directory path is reported instead of raising an OS error."""
        with pytest.raises(DocumentSyntaxError) as exc_info:
            ComposeLoader().load(tmp_path)

        assert str(tmp_path) in exc_info.value.detail

    def test_undecodable_file(self, tmp_path):
        """Test bytes that are not UTF-8 are reported as a bad document."""
        path = tmp_path / "incus-compose.yaml"
        path.write_bytes(b"version: \"1.0\"\ncontainers:\n  web:\n    image: \xff\xfe\n")

        with pytest.raises(DocumentSyntaxError):
            ComposeLoader().load(path)

    def test_syntax_error(self):
        """Test malformed YAML."""
        with pytest.raises(DocumentSyntaxError):
            ComposeLoader().loads("version: '1.0'\ncontainers: [unclosed\n")

    def test_duplicate_keys(self):
        """Test duplicate container names are refused."""
        text = """\
version: "1.0"
containers:
  web:
    image: ubuntu/22.04
  web:
    image: debian/12
"""
        with pytest.raises(DocumentSyntaxError):
            ComposeLoader().loads(text)

    def test_empty_document(self):
        """Test an empty file is not a document."""
        with pytest.raises(TypeMismatch) as exc_info:
            ComposeLoader().loads("")

        assert exc_info.value.actual == "null"

    def test_key_without_value_is_missing(self):
        """Test a required key written with no value counts as absent."""
        with pytest.raises(MissingField) as exc_info:
            ComposeLoader().loads('version: "1.0"\ncontainers:\n')

        assert exc_info.value.path == "containers"

    def test_dates_in_config_kept_as_text(self):
        """Test unquoted YAML dates pass through config maps as ISO strings."""
        text = """\
version: "1.0"
containers:
  web:
    image: ubuntu/22.04
    config:
      user.built: 2024-01-01
"""
        compose = ComposeLoader().loads(text)

        assert compose.containers["web"].config["user.built"] == "2024-01-01"

    def test_structural_errors_pass_through(self):
        """Test parser errors surface unchanged."""
        text = """\
version: "1.0"
containers:
  web:
    image: ubuntu/22.04
    instance_type: vm-ish
"""
        with pytest.raises(UnknownVariant) as exc_info:
            ComposeLoader().loads(text)

        assert exc_info.value.path == "containers.web.instance_type"


class TestDumpDocument:
    """Test serialising documents."""

    def test_round_trip(self, sample_text):
        """Test dump then load yields an equal model."""
        loader = ComposeLoader()
        compose = loader.loads(sample_text)

        again = loader.loads(dump_document(compose))

        assert again == compose

    def test_defaults_written(self, minimal_data):
        """Test applied defaults are written out explicitly."""
        text = dump_document(parse_document(minimal_data))

        assert "instance_type: container" in text
        assert "autostart: true" in text
        assert "image_server: 'images:'" in text or 'image_server: "images:"' in text

    def test_multiline_literal_blocks(self, sample_text):
        """Test cloud-init payloads keep block style."""
        text = dump_document(ComposeLoader().loads(sample_text))

        assert "user_data: |" in text
