"""
Credential resolution for provider API keys.

Storage and decryption live outside this package; the orchestrator only sees
the ``CredentialResolver`` protocol and asks for a key per provider and caller.
"""

from collections.abc import Mapping
from typing import Protocol, runtime_checkable

from ..logging import get_logger
from .models import ProviderKind

logger = get_logger(__name__)


@runtime_checkable
class CredentialResolver(Protocol):
    """Supplies a decrypted provider API key for one caller."""

    async def resolve(self, provider_kind: ProviderKind, caller_id: str | None) -> str | None:
        """Return the decrypted secret, or None when the caller has none configured."""
        ...


class StaticCredentialResolver:
    """Resolves every caller to the same keys, keyed by credential kind.

    Used for single-tenant deployments where keys come from settings, e.g.
    ``{"kie_api_key": "...", "openai_api_key": "..."}``.
    """

    def __init__(self, api_keys: Mapping[str, str]):
        self._api_keys = {kind: key for kind, key in api_keys.items() if key}
        logger.debug(
            "Static credentials configured",
            kinds=sorted(self._api_keys),
        )

    async def resolve(self, provider_kind: ProviderKind, caller_id: str | None) -> str | None:
        _ = caller_id
        return self._api_keys.get(provider_kind.credential_kind)


class ChainedCredentialResolver:
    """Tries several resolvers in order and returns the first key found.

    Lets a per-caller store take precedence over deployment-wide keys.
    """

    def __init__(self, *resolvers: CredentialResolver):
        self._resolvers = resolvers

    async def resolve(self, provider_kind: ProviderKind, caller_id: str | None) -> str | None:
        for resolver in self._resolvers:
            secret = await resolver.resolve(provider_kind, caller_id)
            if secret:
                return secret
        return None


def missing_credential_message(provider_kind: ProviderKind) -> str:
    return (
        f"No {provider_kind.display_name} API key configured. "
        f"Configure your {provider_kind.display_name} key ({provider_kind.credential_kind}) "
        "in settings to use this model."
    )
