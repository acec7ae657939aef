"""Tests for VaultClient with hvac mocked out."""

from unittest.mock import MagicMock, patch

import pytest
from hvac.exceptions import Forbidden, InvalidPath

import clients.vault_client as vault_module
from clients.vault_client import VaultClient, get_database_url


@pytest.fixture
def vault_env(monkeypatch):
    monkeypatch.setenv("VAULT_ADDR", "http://vault.test:8200")
    monkeypatch.setenv("VAULT_ROLE_ID", "role")
    monkeypatch.setenv("VAULT_SECRET_ID", "secret")
    monkeypatch.delenv("VAULT_NAMESPACE", raising=False)
    vault_module.reset_vault_state()
    yield
    vault_module.reset_vault_state()


@pytest.fixture
def hvac_client(vault_env):
    with patch("clients.vault_client.hvac.Client") as client_cls:
        client = MagicMock()
        client.auth.approle.login.return_value = {"auth": {"client_token": "tok"}}
        client.is_authenticated.return_value = True
        client.secrets.kv.v2.read_secret_version.return_value = {
            "data": {"data": {"url": "postgresql://invoicing@db/invoicing"}}
        }
        client_cls.return_value = client
        yield client


class TestVaultClientInit:
    """Initialization and authentication."""

    def test_missing_vault_addr_raises(self, vault_env, monkeypatch):
        monkeypatch.delenv("VAULT_ADDR")
        with pytest.raises(ValueError, match="VAULT_ADDR"):
            VaultClient()

    def test_missing_approle_credentials_raises(self, vault_env, monkeypatch):
        monkeypatch.delenv("VAULT_ROLE_ID")
        with pytest.raises(ValueError, match="VAULT_ROLE_ID"):
            VaultClient()

    def test_rejected_approle_raises_permission_error(self, hvac_client):
        hvac_client.auth.approle.login.side_effect = Forbidden("denied")
        with pytest.raises(PermissionError, match="authentication"):
            VaultClient()

    def test_unauthenticated_client_raises(self, hvac_client):
        hvac_client.is_authenticated.return_value = False
        with pytest.raises(PermissionError):
            VaultClient()

    def test_token_set_after_login(self, hvac_client):
        VaultClient()
        assert hvac_client.token == "tok"


class TestGetSecret:
    """Secret retrieval - paths automatically scoped to invoicing/."""

    def test_scopes_path(self, hvac_client):
        url = VaultClient().get_secret("database", "url")

        assert url.startswith("postgresql://")
        kwargs = hvac_client.secrets.kv.v2.read_secret_version.call_args.kwargs
        assert kwargs["path"] == "invoicing/database"

    def test_missing_path_raises(self, hvac_client):
        hvac_client.secrets.kv.v2.read_secret_version.side_effect = InvalidPath("nope")
        with pytest.raises(PermissionError, match="not found"):
            VaultClient().get_secret("nonexistent", "field")

    def test_missing_field_raises_keyerror(self, hvac_client):
        with pytest.raises(KeyError, match="not found"):
            VaultClient().get_secret("database", "nonexistent_field")


class TestConvenienceFunctions:

    def test_get_database_url_is_cached(self, hvac_client):
        first = get_database_url()
        second = get_database_url()

        assert first == second == "postgresql://invoicing@db/invoicing"
        assert hvac_client.secrets.kv.v2.read_secret_version.call_count == 1
