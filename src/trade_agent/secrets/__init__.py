"""Workspace secret resolution -- OpenServ agent-secrets API via aiohttp."""

from trade_agent.secrets.resolver import SecretResolver, find_secret, strip_enclosing_quotes
from trade_agent.secrets.store import OpenServSecretStore, SecretStore

__all__ = [
    "OpenServSecretStore",
    "SecretResolver",
    "SecretStore",
    "find_secret",
    "strip_enclosing_quotes",
]
