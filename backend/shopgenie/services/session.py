"""
Auth session gate.

Session acquisition and refresh belong to the hosting application. The store
engine only asks whether a session exists and how to end it.
"""

import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class SessionRequiredError(Exception):
    """Raised when an operation needs a signed-in user and there is none."""
    pass


class SessionProvider(ABC):
    """
    Abstract Base Class for auth session sources.
    """

    @abstractmethod
    def has_session(self) -> bool:
        pass

    @abstractmethod
    def sign_out(self):
        pass


class StaticSessionProvider(SessionProvider):
    """Session flag held in memory; used for local runs and tests."""

    def __init__(self, signed_in: bool = True):
        self.signed_in = signed_in

    def has_session(self) -> bool:
        return self.signed_in

    def sign_out(self):
        self.signed_in = False


class SessionGuard:

    def __init__(self, provider: SessionProvider):
        self.provider = provider

    @property
    def is_authenticated(self) -> bool:
        return bool(self.provider.has_session())

    def require(self):
        if not self.is_authenticated:
            raise SessionRequiredError("An active session is required")

    def sign_out(self):
        self.provider.sign_out()
        logger.info("Session signed out")
