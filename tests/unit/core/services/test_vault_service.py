"""Unit tests for the Vault bootstrap client."""

from pathlib import Path

import pytest

from bookstore.core.exceptions import AuthBootstrapError, SecretFetchError
from bookstore.core.services.vault_service import VaultClient, fetch_secret_bundle
from bookstore.runtime.config import ConfigStore, Settings
from tests.fixtures.dummies import VaultStub, kv2_body


@pytest.fixture
def token_file(tmp_path: Path) -> Path:
    path = tmp_path / "token"
    path.write_text("service-account-jwt\n")
    return path


def _vault_settings(token_file: Path, **extra: str) -> Settings:
    entries = {
        "VAULT_ADDR": "http://vault.test:8200",
        "VAULT_ROLE": "bookstore",
        "VAULT_KV_MOUNT": "secret",
        "VAULT_BOOKSTORE_ENV": "dev",
        "KUBE_SVC_ACCT_TOKEN": str(token_file),
    }
    entries.update(extra)
    return Settings.from_store(ConfigStore(entries))


class TestKubernetesLogin:
    def test_login_posts_role_and_token(self, token_file: Path):
        stub = VaultStub()
        client = VaultClient("http://vault.test:8200", transport=stub.transport)

        auth = client.login_kubernetes("bookstore", str(token_file))

        assert auth["client_token"] == "s.client-token"
        assert client.token == "s.client-token"
        assert stub.requests[0].url.path == "/v1/auth/kubernetes/login"
        assert stub.login_payload() == {
            "role": "bookstore",
            "jwt": "service-account-jwt",
        }

    def test_login_uses_custom_auth_mount(self, token_file: Path):
        stub = VaultStub()
        client = VaultClient("http://vault.test:8200", transport=stub.transport)

        client.login_kubernetes("bookstore", str(token_file), mount="k8s-prod")

        assert stub.requests[0].url.path == "/v1/auth/k8s-prod/login"

    def test_missing_token_file(self, tmp_path: Path):
        stub = VaultStub()
        client = VaultClient("http://vault.test:8200", transport=stub.transport)

        with pytest.raises(AuthBootstrapError, match="service account token"):
            client.login_kubernetes("bookstore", str(tmp_path / "absent"))
        assert stub.requests == []

    def test_rejected_login(self, token_file: Path):
        stub = VaultStub(login_status=403, login_body={"errors": ["permission denied"]})
        client = VaultClient("http://vault.test:8200", transport=stub.transport)

        with pytest.raises(AuthBootstrapError, match="unable to log in"):
            client.login_kubernetes("bookstore", str(token_file))
        assert client.token is None

    def test_login_without_auth_info(self, token_file: Path):
        stub = VaultStub(login_body={"auth": None, "warnings": ["no auth"]})
        client = VaultClient("http://vault.test:8200", transport=stub.transport)

        with pytest.raises(AuthBootstrapError, match="no auth info"):
            client.login_kubernetes("bookstore", str(token_file))


class TestReadKv2:
    def test_reads_latest_version_data(self, token_file: Path):
        stub = VaultStub(secret_body=kv2_body({"DB_USER": "app"}, version=4))
        client = VaultClient(
            "http://vault.test:8200",
            token="s.preset",
            namespace="team-a",
            transport=stub.transport,
        )

        data = client.read_kv2("secret", "dev")

        assert data == {"DB_USER": "app"}
        request = stub.requests[0]
        assert request.url.path == "/v1/secret/data/dev"
        assert request.headers["X-Vault-Token"] == "s.preset"
        assert request.headers["X-Vault-Namespace"] == "team-a"

    def test_missing_secret(self):
        stub = VaultStub(secret_status=404, secret_body={"errors": []})
        client = VaultClient("http://vault.test:8200", transport=stub.transport)

        with pytest.raises(SecretFetchError, match="unable to read secret"):
            client.read_kv2("secret", "dev")

    def test_deleted_version_has_no_data(self):
        stub = VaultStub(
            secret_body={"data": {"data": None, "metadata": {"deletion_time": "x"}}}
        )
        client = VaultClient("http://vault.test:8200", transport=stub.transport)

        with pytest.raises(SecretFetchError, match="no data"):
            client.read_kv2("secret", "dev")


class TestFetchSecretBundle:
    def test_login_then_read(self, token_file: Path):
        stub = VaultStub(secret_body=kv2_body({"DB_PASS": "s3cret"}))
        settings = _vault_settings(token_file)
        client = VaultClient.from_settings(settings, transport=stub.transport)

        bundle = fetch_secret_bundle(settings, client)

        assert bundle == {"DB_PASS": "s3cret"}
        read = stub.requests[-1]
        assert read.headers["X-Vault-Token"] == "s.client-token"

    def test_login_failure_is_not_fatal_by_default(self, token_file: Path):
        stub = VaultStub(login_status=500, secret_body=kv2_body({"DB_USER": "app"}))
        settings = _vault_settings(token_file)
        client = VaultClient.from_settings(settings, transport=stub.transport)

        bundle = fetch_secret_bundle(settings, client)

        assert bundle == {"DB_USER": "app"}
        assert [r.method for r in stub.requests] == ["POST", "GET"]

    def test_login_failure_is_fatal_when_required(self, token_file: Path):
        stub = VaultStub(login_status=500, secret_body=kv2_body({"DB_USER": "app"}))
        settings = _vault_settings(token_file, VAULT_AUTH_REQUIRED="true")
        client = VaultClient.from_settings(settings, transport=stub.transport)

        with pytest.raises(AuthBootstrapError):
            fetch_secret_bundle(settings, client)
        assert [r.method for r in stub.requests] == ["POST"]

    def test_read_failure_is_raised(self, token_file: Path):
        stub = VaultStub(secret_status=403, secret_body={"errors": ["denied"]})
        settings = _vault_settings(token_file)
        client = VaultClient.from_settings(settings, transport=stub.transport)

        with pytest.raises(SecretFetchError):
            fetch_secret_bundle(settings, client)

    def test_unreadable_ca_cert_is_a_fetch_error(self, token_file: Path, tmp_path: Path):
        settings = _vault_settings(
            token_file, VAULT_CACERT=str(tmp_path / "missing-ca.pem")
        )

        with pytest.raises(SecretFetchError, match="unable to create vault client"):
            fetch_secret_bundle(settings)
