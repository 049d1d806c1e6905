"""Pytest configuration and fixtures for kship-lib tests."""

from pathlib import Path

import pytest
import yaml

from kship_lib.config.loaders import load_global_config
from kship_lib.config.schemas import GlobalConfig, Region

PUBLIC_KEY = "-----BEGIN PUBLIC KEY-----\nmy-key\n-----END PUBLIC KEY-----"

GLOBAL_CONFIG = {
    "defaults": {
        "imagePrefix": "quay.io/example",
        "chart": "base",
        "env": {"LOG_LEVEL": "info"},
        "kong": {
            "plugins": {
                "correlationId": {"header_name": "babylon-request-id"},
                "tcpLog": {"host": "logstash.internal", "port": 5000},
                "oauth2": False,
                "jwt": True,
                "jwtValidator": {
                    "allowed_audiences": ["https://babylonhealth.com"],
                    "expected_region": "dev-uk",
                },
                "jsonCookiesToHeaders": True,
                "jsonCookiesCsrf": True,
            }
        },
    },
    "teams": [
        {"name": "platform", "support": "#platform-support", "notifications": "#platform-alerts"},
        {"name": "data"},
    ],
    "clusters": {
        "kind-shipcat": {
            "teleport": "teleport.example.com",
            "clustername": "dev-uk-cluster",
            "regions": ["dev-uk"],
        },
        "legacy": {"regions": ["staging-uk"]},
    },
    "regions": [
        {
            "name": "dev-uk",
            "namespace": "dev",
            "environment": "dev",
            "cluster": "kind-shipcat",
            "defaults": {"replicaCount": 2, "env": {"REGION": "dev-uk"}},
            "kafka": {"brokers": ["kafka.dev:9092"]},
            "kong": {
                "configUrl": "https://admin.dev.something.domain.com",
                "hostPattern": "{{host}}.dev.something.domain.com",
                "consumers": {
                    "fake-ask": {"oauth2ClientId": "FAKEASKID", "oauth2ClientSecret": "FAKEASKSECRET"},
                },
                "jwtConsumers": {
                    "my-idp": {"kid": "https://my-issuer/", "publicKey": PUBLIC_KEY},
                },
            },
        },
        {
            "name": "staging-uk",
            "namespace": "staging",
            "environment": "staging",
            "cluster": "legacy",
        },
    ],
}

FAKE_ASK = {
    "name": "fake-ask",
    "regions": ["dev-uk", "staging-uk"],
    "version": "1.0.0",
    "metadata": {"team": "platform", "repo": "https://github.com/example/fake-ask"},
    "httpPort": 8000,
    "health": {"uri": "/health", "wait": 20},
    "configs": {
        "mount": "/config/",
        "files": [
            {"name": "app.conf", "dest": "app.conf"},
            {"name": "newrelic.yml", "dest": "newrelic.yml"},
        ],
    },
    "kong": {
        "enabled": True,
        "uris": "/ai-auth",
        "hosts": ["fake-ask", "fake.example.com"],
    },
}

FAKE_STORAGE = {
    "name": "fake-storage",
    "regions": ["dev-uk"],
    "version": "2.0.0",
    "metadata": {"team": "data", "support": "#storage"},
    "kafka": {"topics": ["storage-events"]},
    "dataHandling": {
        "stores": [
            {
                "backend": "Postgres",
                "encrypted": True,
                "fields": [{"name": "email", "spii": True}, {"name": "plan"}],
            }
        ]
    },
    "kong": {
        "enabled": True,
        "plugins": {"jsonCookiesToHeaders": False, "jsonCookiesCsrf": False},
    },
}


def write_yaml(path: Path, data: dict) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data, sort_keys=False))
    return path


@pytest.fixture
def manifests_root(tmp_path: Path) -> Path:
    """A manifests repository with two services in dev-uk."""
    write_yaml(tmp_path / "kship.yaml", GLOBAL_CONFIG)

    write_yaml(tmp_path / "services" / "fake-ask" / "manifest.yml", FAKE_ASK)
    write_yaml(tmp_path / "services" / "fake-ask" / "dev.yml", {"env": {"DEBUG": "true"}, "version": "1.1.0"})
    write_yaml(tmp_path / "services" / "fake-ask" / "dev-uk.yml", {"version": "1.2.0"})
    (tmp_path / "services" / "fake-ask" / "app.conf").write_text("listen = 8000\n")

    write_yaml(tmp_path / "services" / "fake-storage" / "manifest.yml", FAKE_STORAGE)

    templates = tmp_path / "templates"
    templates.mkdir()
    (templates / "newrelic.yml").write_text("license_key: shared\n")
    (templates / "deployment.yaml.j2").write_text(
        "image: {{ mf.image }}:{{ mf.version }}\n"
        "boottime: {{ boottime }}\n"
        "{% for dest, value in mounts.items() %}mount: {{ dest }}\n{% endfor %}"
    )
    return tmp_path


@pytest.fixture
def global_config(manifests_root: Path) -> GlobalConfig:
    return load_global_config(manifests_root)


@pytest.fixture
def dev_uk(global_config: GlobalConfig) -> Region:
    return global_config.get_region("dev-uk")


@pytest.fixture
def staging_uk(global_config: GlobalConfig) -> Region:
    return global_config.get_region("staging-uk")
