"""
Domain error taxonomy.
Zero external dependencies. Infrastructure adapters translate library
exceptions (httpx, SQLAlchemy, python-jose, yfinance) into these types so the
application layer only ever handles DivTrackError subclasses.
"""


class DivTrackError(Exception):
    """Base class for every error raised by the engine."""


class UpstreamUnavailable(DivTrackError):
    """An external data source failed (transport, status or timeout). Retry later."""


class SymbolNotFound(DivTrackError):
    """The data source answered, but knows nothing about the ticker."""


class InvalidInput(DivTrackError):
    """Malformed ticker or share count supplied by the caller."""


class DuplicateHolding(DivTrackError):
    """The owner already holds this ticker."""


class NotFound(DivTrackError):
    """No holding with this id exists for the owner."""


class MissingCredential(DivTrackError):
    """No bearer credential was presented."""


class InvalidCredential(DivTrackError):
    """The credential failed signature, format or expiry checks."""


class ConfigurationError(DivTrackError):
    """A required secret or setting is absent from the running environment."""


class StorageUnavailable(DivTrackError):
    """The backing store could not be reached."""
