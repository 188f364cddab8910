"""
Waqf engine exception hierarchy.

All library exceptions inherit from WaqfEngineError, making it easy for consumers
to catch engine-level errors while still distinguishing specific failure modes.

Business-rule outcomes (validation failures, rejected contributions) are never
raised; they come back as result values.
"""


class WaqfEngineError(Exception):
    """Base exception class for all waqf engine errors."""


class ConfigurationError(WaqfEngineError):
    """Raised for configuration errors (missing keys, invalid values)."""


class WireFormatError(WaqfEngineError):
    """Raised when a persistence payload cannot be mapped to the internal schema."""
