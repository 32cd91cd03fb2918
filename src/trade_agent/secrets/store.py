"""OpenServ workspace secret store client.

Two endpoints are consumed:
- GET {api_url}/workspaces/{workspace_id}/agent-secrets
    -> JSON array of {"id", "name", ...}
- GET {api_url}/workspaces/{workspace_id}/agent-secrets/{secret_id}/value
    -> plaintext (often a JSON-quoted string)

Non-2xx responses, undecodable bodies, timeouts and transport errors all
surface as SecretStoreUnavailable. Nothing here retries.
"""

import asyncio
import json
from abc import ABC, abstractmethod

import aiohttp

from trade_agent.config import OpenServSettings
from trade_agent.exceptions import ConfigurationMissing, SecretStoreUnavailable
from trade_agent.logging import get_logger
from trade_agent.models import SecretEntry

logger = get_logger(__name__)


class SecretStore(ABC):
    """Abstract secret store. Used as an async context manager per request."""

    async def __aenter__(self) -> "SecretStore":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Release transport resources."""

    @abstractmethod
    async def list_secrets(self, workspace_id: str) -> list[SecretEntry]:
        """List every secret visible to the agent in a workspace."""
        ...

    @abstractmethod
    async def get_secret_value(self, workspace_id: str, secret_id: str) -> str:
        """Fetch the raw plaintext value of one secret."""
        ...


class OpenServSecretStore(SecretStore):
    """Secret store backed by the OpenServ agent-secrets REST API.

    Args:
        settings: OpenServ API settings (key, base URL, timeout).
        session: Optional pre-built aiohttp session. When omitted, one is
            created on first use and closed by close().
    """

    def __init__(
        self,
        settings: OpenServSettings,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        api_key = settings.api_key.get_secret_value()
        if not api_key:
            raise ConfigurationMissing("OPENSERV_API_KEY not configured")
        self._api_key = api_key
        self._base_url = settings.api_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=settings.timeout_seconds)
        self._session = session
        self._owns_session = session is None

    def _headers(self) -> dict[str, str]:
        return {"accept": "application/json", "x-openserv-key": self._api_key}

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession()
        return self._session

    async def close(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    async def list_secrets(self, workspace_id: str) -> list[SecretEntry]:
        url = f"{self._base_url}/workspaces/{workspace_id}/agent-secrets"
        try:
            async with self._get_session().get(
                url, headers=self._headers(), timeout=self._timeout
            ) as resp:
                if not (200 <= resp.status < 300):
                    raise SecretStoreUnavailable(
                        f"Failed to list secrets: {resp.status}",
                        status=resp.status,
                    )
                payload = await resp.json(content_type=None)
        except asyncio.TimeoutError as e:
            raise SecretStoreUnavailable(f"Failed to list secrets: timeout ({e})") from e
        except json.JSONDecodeError as e:
            raise SecretStoreUnavailable(f"Failed to list secrets: invalid JSON ({e})") from e
        except aiohttp.ClientError as e:
            raise SecretStoreUnavailable(f"Failed to list secrets: {e}") from e

        if not isinstance(payload, list):
            raise SecretStoreUnavailable("Failed to list secrets: unexpected payload")

        entries = [
            SecretEntry(id=str(item.get("id")), name=str(item.get("name")))
            for item in payload
            if isinstance(item, dict) and item.get("name") is not None
        ]
        logger.info("secrets_listed", workspace_id=workspace_id, count=len(entries))
        return entries

    async def get_secret_value(self, workspace_id: str, secret_id: str) -> str:
        url = (
            f"{self._base_url}/workspaces/{workspace_id}"
            f"/agent-secrets/{secret_id}/value"
        )
        try:
            async with self._get_session().get(
                url, headers=self._headers(), timeout=self._timeout
            ) as resp:
                if not (200 <= resp.status < 300):
                    raise SecretStoreUnavailable(
                        f"Failed to get secret {secret_id} value: {resp.status}",
                        status=resp.status,
                    )
                return await resp.text()
        except asyncio.TimeoutError as e:
            raise SecretStoreUnavailable(
                f"Failed to get secret {secret_id} value: timeout ({e})"
            ) from e
        except UnicodeDecodeError as e:
            raise SecretStoreUnavailable(
                f"Failed to get secret {secret_id} value: undecodable body ({e.reason})"
            ) from e
        except aiohttp.ClientError as e:
            raise SecretStoreUnavailable(
                f"Failed to get secret {secret_id} value: {e}"
            ) from e
