"""Tests for profile application."""

from incus_compose.core.parser import parse_document
from incus_compose.core.profiles import apply_profiles, effective_containers
from incus_compose.models.device import DiskDevice, NicDevice


def _compose(container, profiles):
    return parse_document({
        "version": "1.0",
        "containers": {"web": container},
        "profiles": profiles,
    })


PROFILES = {
    "base": {
        "config": {"security.nesting": "true", "limits.processes": "100", "environment.TZ": "UTC"},
        "devices": {
            "root": {"type": "disk", "source": "default", "path": "/"},
            "eth0": {"type": "nic", "network": "lan"},
        },
    },
    "big": {
        "config": {"limits.processes": "1000", "environment.TZ": "Europe/Berlin"},
        "devices": {"root": {"type": "disk", "source": "fast", "path": "/"}},
    },
}


class TestApplyProfiles:
    """Test effective configuration merging."""

    def test_no_profiles(self):
        """Test a container without profiles is unchanged."""
        compose = _compose({"image": "ubuntu/22.04", "config": {"a": "1"}}, {})

        assert apply_profiles(compose, "web") == compose.containers["web"]

    def test_later_profiles_override_earlier(self):
        """Test profiles merge left to right."""
        compose = _compose({"image": "ubuntu/22.04", "profiles": ["base", "big"]}, PROFILES)

        web = apply_profiles(compose, "web")

        assert web.config["security.nesting"] == "true"
        assert web.config["limits.processes"] == "1000"
        assert web.devices["root"] == DiskDevice(source="fast", path="/")
        assert web.devices["eth0"] == NicDevice(network="lan")
        assert web.environment == {"TZ": "Europe/Berlin"}

    def test_order_matters(self):
        """Test reversing the profile list reverses precedence."""
        compose = _compose({"image": "ubuntu/22.04", "profiles": ["big", "base"]}, PROFILES)

        web = apply_profiles(compose, "web")

        assert web.config["limits.processes"] == "100"
        assert web.devices["root"].source == "default"

    def test_container_overrides_profiles(self):
        """Test the container's own keys win over every profile."""
        compose = _compose(
            {
                "image": "ubuntu/22.04",
                "profiles": ["base", "big"],
                "config": {"limits.processes": "5"},
                "environment": {"TZ": "Asia/Tokyo", "APP": "web"},
                "devices": {"eth0": {"type": "nic", "network": "dmz"}},
            },
            PROFILES,
        )

        web = apply_profiles(compose, "web")

        assert web.config["limits.processes"] == "5"
        assert web.environment == {"TZ": "Asia/Tokyo", "APP": "web"}
        assert web.devices["eth0"].network == "dmz"
        assert web.devices["root"].source == "fast"

    def test_declared_container_untouched(self):
        """Test merging does not modify the parsed document."""
        compose = _compose({"image": "ubuntu/22.04", "profiles": ["base"]}, PROFILES)

        apply_profiles(compose, "web")

        assert compose.containers["web"].config == {}
        assert compose.containers["web"].devices == {}

    def test_undefined_profile_skipped(self):
        """Test unknown profiles are ignored here."""
        compose = _compose({"image": "ubuntu/22.04", "profiles": ["ghost", "base"]}, PROFILES)

        assert apply_profiles(compose, "web").config["security.nesting"] == "true"

    def test_effective_containers(self):
        """Test every container is merged."""
        compose = _compose({"image": "ubuntu/22.04", "profiles": ["base"]}, PROFILES)

        assert list(effective_containers(compose)) == ["web"]
