"""Identity services package."""

from registro_contable.services.identity.provider import (
    AnonymousIdentityProvider,
    FallbackIdentityProvider,
    Identity,
    IdentityError,
    IdentityProvider,
    StaticIdentityProvider,
    identity_provider_from_settings,
)

__all__ = [
    "AnonymousIdentityProvider",
    "FallbackIdentityProvider",
    "Identity",
    "IdentityError",
    "IdentityProvider",
    "StaticIdentityProvider",
    "identity_provider_from_settings",
]
