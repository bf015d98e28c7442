"""
Infrastructure adapter: shared-secret (HS256) JWT verification → ITokenValidator.

Validates tokens issued by the identity provider (e.g. Supabase) with the
provider's JWT secret: signature, structure and expiry. The audience is
checked only when one is configured, since provider tokens carry audiences
such as "authenticated" that the engine does not otherwise care about.
"""

from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt

from divtrack.domain.errors import ConfigurationError, InvalidCredential
from divtrack.domain.ports.token_validator_port import ITokenValidator


class SharedSecretTokenValidator(ITokenValidator):
    """Validates HS256-signed bearer tokens against a shared secret."""

    ALGORITHMS = ["HS256"]

    def __init__(self, secret: Optional[str], audience: Optional[str] = None) -> None:
        self._secret = secret
        self._audience = audience

    def validate(self, token: str) -> dict:
        """Decode and validate *token*.

        Raises:
            ConfigurationError: if no secret is provisioned.
            InvalidCredential: on any validation failure (bad signature, expiry,
                               malformed token, wrong audience).
        """
        if not self._secret:
            raise ConfigurationError("SUPABASE_JWT_SECRET not configured")
        try:
            return jwt.decode(
                token,
                self._secret,
                algorithms=self.ALGORITHMS,
                audience=self._audience,
                options={"verify_aud": self._audience is not None, "require_exp": True},
            )
        except ExpiredSignatureError as exc:
            raise InvalidCredential("Token has expired") from exc
        except JWTError as exc:
            raise InvalidCredential(f"Invalid token: {exc}") from exc
