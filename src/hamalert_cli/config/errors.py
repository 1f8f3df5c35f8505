from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Credentials or settings could not be read."""


class MissingConfigurationError(ConfigurationError):
    """A required setting (credential, config file) is absent or blank."""
