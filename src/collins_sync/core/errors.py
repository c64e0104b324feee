"""
Error taxonomy.

We separate error types so callers can react correctly.
Example:
ConfigurationError is a startup fault and should never be retried.
CapabilityError is a programming error in a domain class.
TransitionFailed means Collins rejected a write and the set call stopped there.
"""


class CollinsSyncError(Exception):
    """Base class for all collins_sync exceptions."""


class ConfigurationError(CollinsSyncError):
    """Raised when a required Collins setting is missing."""


class CapabilityError(CollinsSyncError, NotImplementedError):
    """Raised when a participating class does not implement collins_asset."""


class TransitionFailed(CollinsSyncError):
    """
    Raised when Collins rejects a status, state or attribute write.

    Writes made earlier in the same set call are not rolled back.
    """


class UnknownAttribute(CollinsSyncError, KeyError):
    """Raised when an accessor was never declared for a class."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class CollinsRequestError(CollinsSyncError):
    """Raised when the Collins http transport fails."""
