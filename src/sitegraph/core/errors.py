"""Exception hierarchy for sitegraph."""


class SiteGraphError(Exception):
    """Base class for all sitegraph errors."""


class GraphDocumentError(SiteGraphError):
    """The graph document is missing or does not match the expected schema."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        if path:
            message = f"{path}: {message}"
        super().__init__(message)


class ConfigError(SiteGraphError):
    """A configuration value is unknown or out of range."""
