"""Exceptions raised by visual features and the servo task."""


class FeatureError(Exception):
    """Base class for feature errors."""


class DimensionMismatchError(FeatureError, ValueError):
    """A vector or matrix does not match the feature dimension (or 6 DOFs)."""


class NotReadyError(FeatureError, RuntimeError):
    """The injected error was never set, or was already consumed."""
