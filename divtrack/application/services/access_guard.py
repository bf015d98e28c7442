"""
Application service: Access Guard.
Turns a presented bearer credential into the owner id that scopes every
holding operation. The owner id comes only from the verified ``sub`` claim.
"""

from typing import Optional

from divtrack.domain.errors import InvalidCredential, MissingCredential
from divtrack.domain.ports.token_validator_port import ITokenValidator

_BEARER_PREFIX = "bearer "


class AccessGuard:
    def __init__(self, validator: ITokenValidator) -> None:
        self._validator = validator

    def authorize(self, credential: Optional[str]) -> str:
        """Verify *credential* and return its subject as the owner id.

        *credential* is an Authorization header value (``Bearer <jwt>``) or a
        bare token.

        Raises:
            MissingCredential: if no credential is presented.
            InvalidCredential: on bad signature, malformed or expired token,
                               or a token without a subject.
            ConfigurationError: if the verification secret is not provisioned.
        """
        token = _extract_token(credential)
        claims = self._validator.validate(token)
        subject = claims.get("sub")
        if not isinstance(subject, str) or not subject:
            raise InvalidCredential("Token has no subject claim")
        return subject


def _extract_token(credential: Optional[str]) -> str:
    if credential is None or not credential.strip():
        raise MissingCredential("Authorization header required")
    value = credential.strip()
    if value.lower().startswith(_BEARER_PREFIX):
        value = value[len(_BEARER_PREFIX):].strip()
    if not value:
        raise MissingCredential("Authorization header required")
    return value
