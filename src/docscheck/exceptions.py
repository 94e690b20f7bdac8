"""Exceptions raised by docscheck."""


class DocsCheckError(Exception):
    """Base class for docscheck errors."""


class ConfigError(DocsCheckError):
    """Raised when a configuration file or environment value is invalid."""


class BrowserLaunchError(DocsCheckError):
    """Raised when the browser session cannot be started. Fatal for a crawl."""


class SidebarError(DocsCheckError):
    """Raised when the sidebar file cannot be read or written."""
    def __init__(self, message: str, path: str = None):
        self.message = message
        self.path = path
        super().__init__(message)
