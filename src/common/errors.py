"""
Error taxonomy for discovery and enrichment.

Adapter-local failures never surface as exceptions (they become "no contribution"),
so only the caller-facing categories live here.
"""


class ConfigurationError(Exception):
    """A credential required by a top-level operation is missing."""

    def __init__(self, provider: str, setting: str):
        self.provider = provider
        self.setting = setting
        super().__init__(f"{provider} API key not configured ({setting.upper()})")


class LeadValidationError(ValueError):
    """Caller input rejected before any network call was made."""


class DiscoveryError(Exception):
    """The discovery provider failed before returning any results."""
