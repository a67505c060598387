"""Shared fixtures."""

import pytest


SAMPLE_DOCUMENT = """\
version: "1.0"

networks:
  frontend:
    type: bridge
    description: Public facing bridge
    config:
      ipv4.address: 10.10.0.1/24
      ipv4.nat: true

storage:
  fast:
    driver: zfs
    config:
      source: tank/incus

profiles:
  base:
    description: Common settings
    config:
      security.nesting: "true"
      environment.TZ: UTC
    devices:
      root:
        type: disk
        source: fast
        path: /

containers:
  db:
    image: debian/12
    boot_priority: 10
    networks: [frontend]
    profiles: [base]
    memory:
      limit: 2GB
    volumes:
      - source: pgdata
        target: /var/lib/postgresql
        pool: fast
  web:
    image: ubuntu/22.04
    description: Web server
    depends_on: [db]
    networks: [frontend]
    cpu:
      limit: 2
    environment:
      APP_ENV: production
    devices:
      http:
        type: proxy
        listen: tcp:0.0.0.0:80
        connect: tcp:127.0.0.1:80
    cloud_init:
      user_data: |
        #cloud-config
        packages: [nginx]
  worker:
    instance_type: virtual-machine
    image: ubuntu/24.04
    image_server: "ubuntu:"
    autostart: false
    depends_on: [db]
"""


@pytest.fixture
def sample_text():
    """A valid document exercising every entity kind."""
    return SAMPLE_DOCUMENT


@pytest.fixture
def sample_file(tmp_path):
    """The sample document written to disk."""
    path = tmp_path / "incus-compose.yaml"
    path.write_text(SAMPLE_DOCUMENT)
    return path


@pytest.fixture
def minimal_data():
    """Smallest valid document as plain data."""
    return {
        "version": "1.0",
        "containers": {
            "web": {"image": "ubuntu/22.04"},
        },
    }
