from __future__ import annotations


class LastGreenError(RuntimeError):
    """Base class for errors that end a resolution."""


class ConfigError(LastGreenError):
    """Missing or empty required input. Raised before any network call."""


class OutputSinkError(LastGreenError):
    """The GITHUB_OUTPUT file cannot be written."""


class DefaultBranchError(LastGreenError):
    """The default-branch fallback could not produce a SHA."""
