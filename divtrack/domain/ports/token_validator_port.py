"""
Port (interface) for bearer token validators.
Infrastructure adapters (e.g. SharedSecretTokenValidator) must implement this interface.
"""

from abc import ABC, abstractmethod


class ITokenValidator(ABC):
    @abstractmethod
    def validate(self, token: str) -> dict:
        """Validate a JWT and return its decoded claims.

        Raises:
            InvalidCredential: if the token is malformed, badly signed or expired.
            ConfigurationError: if the verification secret is not provisioned.
        """
        ...
