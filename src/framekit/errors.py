"""Error taxonomy for framekit.

Every error is a deterministic precondition violation: the same inputs
always fail the same way, so nothing here is ever retried.
"""


class FramekitError(Exception):
    """Base class for all framekit errors."""


class ConfigurationError(FramekitError, ValueError):
    """Malformed breakpoints, spring parameters, timeline nodes or manifests."""


class OutOfRangeError(FramekitError, ValueError):
    """Frame requested outside a composition's declared duration."""


class DuplicateIdError(FramekitError, ValueError):
    """Composition id registered twice."""


class NotFoundError(FramekitError, LookupError):
    """Composition id not present in the registry."""
