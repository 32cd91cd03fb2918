"""Resolve named secrets from a workspace into plaintext credentials.

Any secret name works: the caller passes the logical name, the resolver lists
the workspace's secrets, matches by exact name, then fetches the value by id.
Matching is a pure function of (name, listing) so it is testable without any
transport.
"""

import re

from trade_agent.exceptions import SecretNotFound, SecretStoreUnavailable
from trade_agent.logging import get_logger, mask_secret
from trade_agent.models import Network, ResolvedCredentials, SecretEntry
from trade_agent.secrets.store import SecretStore

logger = get_logger(__name__)

_ENCLOSING_QUOTES = re.compile(r'\A"|"\Z')


def strip_enclosing_quotes(value: str) -> str:
    """Strip one leading and one trailing double quote, if present.

    The value endpoint returns plaintext that is usually JSON-quoted.
    """
    return _ENCLOSING_QUOTES.sub("", value)


def find_secret(secret_name: str, listing: list[SecretEntry]) -> SecretEntry:
    """Return the entry whose name matches exactly.

    Raises:
        SecretNotFound: carrying every available name so the caller can
            self-correct.
    """
    for entry in listing:
        if entry.name == secret_name:
            return entry
    raise SecretNotFound(secret_name, [entry.name for entry in listing])


class SecretResolver:
    """Request-scoped resolver over one workspace.

    The listing is fetched once and reused for every name resolved through
    the same instance (private key, then vault address).

    Args:
        store: Secret store transport.
        workspace_id: Workspace whose secrets are visible to this request.
    """

    def __init__(self, store: SecretStore, workspace_id: str) -> None:
        self._store = store
        self._workspace_id = workspace_id
        self._listing: list[SecretEntry] | None = None

    async def listing(self) -> list[SecretEntry]:
        if self._listing is None:
            self._listing = await self._store.list_secrets(self._workspace_id)
        return self._listing

    async def resolve(self, secret_name: str) -> str:
        """Resolve a secret name to its plaintext value.

        Raises:
            SecretNotFound: No secret with this exact name.
            SecretStoreUnavailable: Listing or value fetch failed.
        """
        entry = find_secret(secret_name, await self.listing())
        logger.info("secret_found", secret_name=secret_name, secret_id=entry.id)
        raw = await self._store.get_secret_value(self._workspace_id, entry.id)
        return strip_enclosing_quotes(raw)

    async def resolve_optional(self, secret_name: str) -> str | None:
        """Resolve a secret that the trade can proceed without.

        A missing secret or failed value fetch is logged and yields None.
        A failed listing still raises, since nothing else can be resolved.
        """
        listing = await self.listing()
        try:
            entry = find_secret(secret_name, listing)
        except SecretNotFound:
            logger.warning(
                "optional_secret_not_found",
                secret_name=secret_name,
                note="continuing without it",
            )
            return None
        try:
            raw = await self._store.get_secret_value(self._workspace_id, entry.id)
        except SecretStoreUnavailable as e:
            logger.warning(
                "optional_secret_fetch_failed",
                secret_name=secret_name,
                error=e.message,
            )
            return None
        return strip_enclosing_quotes(raw)

    async def resolve_credentials(
        self,
        pk_name: str,
        vault_name: str | None,
        network: Network,
    ) -> ResolvedCredentials:
        """Resolve the wallet key and optional vault address for one trade."""
        private_key = await self.resolve(pk_name)
        vault_address = (
            await self.resolve_optional(vault_name) if vault_name else None
        )
        logger.info(
            "credentials_resolved",
            private_key=mask_secret(private_key),
            vault_address=vault_address,
            network=network.value,
        )
        return ResolvedCredentials(
            private_key=private_key,
            network=network,
            vault_address=vault_address,
        )
