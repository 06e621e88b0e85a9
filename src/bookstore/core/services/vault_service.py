"""Vault client used once at startup to fetch the database secret bundle."""

from __future__ import annotations

import ssl
from pathlib import Path
from typing import Any

import httpx
from loguru import logger

from bookstore.core.exceptions import AuthBootstrapError, SecretFetchError
from bookstore.runtime.config.settings import Settings


class VaultClient:
    """Minimal Vault HTTP API client: Kubernetes login and KV v2 reads."""

    def __init__(
        self,
        addr: str,
        *,
        token: str | None = None,
        namespace: str | None = None,
        timeout: float = 60.0,
        verify: bool | ssl.SSLContext = True,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        headers = {"X-Vault-Request": "true"}
        if namespace:
            headers["X-Vault-Namespace"] = namespace

        self._client = httpx.Client(
            base_url=addr.rstrip("/"),
            headers=headers,
            timeout=timeout,
            verify=verify,
            transport=transport,
        )
        self._token: str | None = None
        if token:
            self.set_token(token)

    @classmethod
    def from_settings(
        cls, settings: Settings, transport: httpx.BaseTransport | None = None
    ) -> VaultClient:
        verify: bool | ssl.SSLContext = True
        if settings.vault_skip_verify:
            verify = False
        elif settings.vault_cacert:
            verify = ssl.create_default_context(cafile=settings.vault_cacert)

        return cls(
            settings.vault_addr,
            token=settings.vault_token.get_secret_value() if settings.vault_token else None,
            namespace=settings.vault_namespace,
            timeout=settings.vault_client_timeout,
            verify=verify,
            transport=transport,
        )

    @property
    def token(self) -> str | None:
        return self._token

    def set_token(self, token: str) -> None:
        self._token = token
        self._client.headers["X-Vault-Token"] = token

    def login_kubernetes(
        self, role: str, token_path: str, mount: str = "kubernetes"
    ) -> dict[str, Any]:
        """Exchange a service-account token for a Vault client token.

        Args:
            role: Vault role bound to the service account.
            token_path: Path of the mounted service-account JWT.
            mount: Mount path of the Kubernetes auth method.

        Returns:
            The ``auth`` object of the login response.

        Raises:
            AuthBootstrapError: If the token cannot be read, the request fails,
                or Vault returns no auth info.
        """
        try:
            jwt = Path(token_path).read_text().strip()
        except OSError as exc:
            raise AuthBootstrapError(
                f"unable to read service account token from {token_path}: {exc}"
            ) from exc

        try:
            response = self._client.post(
                f"/v1/auth/{mount.strip('/')}/login",
                json={"role": role, "jwt": jwt},
            )
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise AuthBootstrapError(
                f"unable to log in with Kubernetes auth: {exc}"
            ) from exc

        auth = body.get("auth") if isinstance(body, dict) else None
        if not auth:
            raise AuthBootstrapError("no auth info was returned after login")

        client_token = auth.get("client_token")
        if client_token:
            self.set_token(client_token)

        logger.info(
            "Authenticated to Vault with Kubernetes role {} (lease {}s)",
            role,
            auth.get("lease_duration"),
        )
        return auth

    def read_kv2(self, mount: str, path: str) -> dict[str, Any]:
        """Read the latest version of a KV v2 secret.

        Raises:
            SecretFetchError: If the request fails or the secret has no data.
        """
        url = f"/v1/{mount.strip('/')}/data/{path.strip('/')}"
        try:
            response = self._client.get(url)
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise SecretFetchError(f"unable to read secret: {exc}") from exc

        outer = body.get("data") if isinstance(body, dict) else None
        data = outer.get("data") if isinstance(outer, dict) else None
        if data is None:
            raise SecretFetchError(
                f"unable to read secret: no data at {mount}/{path}"
            )

        version = (outer.get("metadata") or {}).get("version")
        logger.info("Read secret {}/{} (version {})", mount, path, version)
        return data

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> VaultClient:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def fetch_secret_bundle(
    settings: Settings, client: VaultClient | None = None
) -> dict[str, Any]:
    """Log in to Vault and read the bookstore secret bundle.

    A failed login is logged and the read is attempted anyway, unless
    ``VAULT_AUTH_REQUIRED`` is set.

    Raises:
        AuthBootstrapError: On login failure when auth is required.
        SecretFetchError: If the client cannot be built or the secret
            cannot be read.
    """
    owns_client = client is None
    if client is None:
        try:
            client = VaultClient.from_settings(settings)
        except (OSError, ValueError, httpx.InvalidURL) as exc:
            # Unreadable VAULT_CACERT or malformed VAULT_ADDR
            raise SecretFetchError(f"unable to create vault client: {exc}") from exc
    vault = client
    try:
        try:
            vault.login_kubernetes(
                settings.vault_role,
                settings.kube_svc_acct_token,
                mount=settings.vault_k8s_auth_mount,
            )
        except AuthBootstrapError as exc:
            if settings.vault_auth_required:
                raise
            logger.error("vault login failed: {}", exc)

        return vault.read_kv2(settings.vault_kv_mount, settings.vault_bookstore_env)
    finally:
        if owns_client:
            vault.close()
