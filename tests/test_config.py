"""Tests for GatewaySyncConfig."""

from pathlib import Path

import pytest

from gateway_sync.config import (
    ApisixRouteVersion,
    AuthMode,
    GatewaySyncConfig,
    configure,
    get_config,
)


class TestGatewaySyncConfig:
    """Test configuration loading and validation."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("GATEWAY_SYNC_ADMIN_BASE_URL", raising=False)
        config = GatewaySyncConfig(_env_file=None)  # type: ignore[call-arg]

        assert config.admin_base_url == "http://127.0.0.1:9180/apisix/admin"
        assert config.apisix_route_version == ApisixRouteVersion.V2
        assert config.auth_mode == AuthMode.AUTO

    def test_env_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GATEWAY_SYNC_ADMIN_BASE_URL", "http://apisix:9180/apisix/admin/")
        monkeypatch.setenv("GATEWAY_SYNC_ADMIN_KEY", "edd1c9f034335f136f87ad84b625c8f1")
        monkeypatch.setenv("GATEWAY_SYNC_APISIX_ROUTE_VERSION", "apisix.apache.org/v2beta3")

        config = GatewaySyncConfig(_env_file=None)  # type: ignore[call-arg]

        assert config.admin_base_url == "http://apisix:9180/apisix/admin"
        assert config.admin_key == "edd1c9f034335f136f87ad84b625c8f1"
        assert config.apisix_route_version == ApisixRouteVersion.V2BETA3

    def test_invalid_timeout(self) -> None:
        with pytest.raises(ValueError):
            GatewaySyncConfig(admin_timeout=0)

    def test_token_auth_requires_server(self) -> None:
        config = GatewaySyncConfig(auth_mode=AuthMode.TOKEN, api_token="t")

        with pytest.raises(ValueError, match="api_server"):
            config.validate_auth_config()

    def test_kubeconfig_must_exist(self, tmp_path: Path) -> None:
        config = GatewaySyncConfig(
            auth_mode=AuthMode.KUBECONFIG, kubeconfig_path=tmp_path / "missing"
        )

        with pytest.raises(ValueError, match="Kubeconfig file not found"):
            config.validate_auth_config()

    def test_tls_skip_warns(self, tmp_path: Path) -> None:
        kubeconfig = tmp_path / "config"
        kubeconfig.write_text("apiVersion: v1\n")
        config = GatewaySyncConfig(
            auth_mode=AuthMode.KUBECONFIG,
            kubeconfig_path=kubeconfig,
            admin_skip_tls_verify=True,
        )

        assert config.validate_auth_config() == ["TLS verification disabled for the admin API"]

    def test_configure_replaces_global(self) -> None:
        config = configure(admin_timeout=9)

        assert get_config() is config
        assert get_config().admin_timeout == 9
