"""Exception hierarchy for the update checker.

These are internal signals. Public operations convert them into
notifications (checks) or booleans (catalog refresh) before they reach
the caller.
"""


class UpdateCheckerError(Exception):
    """Base class for all update checker errors."""


class TransportError(UpdateCheckerError):
    """A BLE operation against a peripheral failed."""


class ConnectionFailure(TransportError):
    """The link to the peripheral could not be established."""


class ServiceAbsent(UpdateCheckerError):
    """The peripheral does not expose a required service."""


class IdentityReadIncomplete(ServiceAbsent):
    """A mandatory identity characteristic could not be read."""


class CatalogError(UpdateCheckerError):
    """Base class for releases catalog errors."""


class CatalogParseError(CatalogError):
    """The releases catalog document is malformed."""


class CatalogUnavailable(CatalogError):
    """The releases catalog could not be fetched."""
