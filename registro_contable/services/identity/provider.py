"""
Identity Providers

Identity is only a scoping key here: it picks which collection in the
record store belongs to this session. Authentication itself is the
identity provider's business, not ours.

A configured user id wins. Without one, the session signs in
anonymously with a freshly generated id.
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field

from registro_contable.config import IdentitySettings
from registro_contable.log import get_logger


logger = get_logger(__name__)


class Identity(BaseModel):
    """Who this session is, as far as the record store cares."""

    user_id: str = Field(..., min_length=1)
    is_anonymous: bool = False


class IdentityError(Exception):
    """The identity provider could not produce an identity."""
    pass


class IdentityProvider(ABC):
    """Supplies a stable identifier for the current session."""

    @abstractmethod
    def resolve(self) -> Identity:
        """
        Resolve the session identity.

        Raises:
            IdentityError: If no identity can be established
        """
        pass


class StaticIdentityProvider(IdentityProvider):
    """A fixed, configured user id."""

    def __init__(self, user_id: str):
        self._user_id = user_id

    def resolve(self) -> Identity:
        if not self._user_id or not self._user_id.strip():
            raise IdentityError("Configured user id is empty")
        return Identity(user_id=self._user_id.strip())


class AnonymousIdentityProvider(IdentityProvider):
    """A random id, generated once per provider instance."""

    def __init__(self):
        self._user_id: Optional[str] = None

    def resolve(self) -> Identity:
        if self._user_id is None:
            self._user_id = uuid4().hex
        return Identity(user_id=self._user_id, is_anonymous=True)


class FallbackIdentityProvider(IdentityProvider):
    """Try a primary provider; fall back to another if it fails."""

    def __init__(self, primary: IdentityProvider, fallback: IdentityProvider):
        self._primary = primary
        self._fallback = fallback

    def resolve(self) -> Identity:
        try:
            return self._primary.resolve()
        except IdentityError as e:
            logger.warning("identity_fallback", error=str(e))
            return self._fallback.resolve()


def identity_provider_from_settings(settings: IdentitySettings) -> IdentityProvider:
    """Configured id when set (falling back to anonymous), else anonymous."""
    if settings.user_id is not None:
        return FallbackIdentityProvider(
            StaticIdentityProvider(settings.user_id),
            AnonymousIdentityProvider(),
        )
    return AnonymousIdentityProvider()
