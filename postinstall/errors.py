# fedora-postinstall/postinstall/errors.py

class PostInstallError(Exception):
    """Base class for errors raised by the provisioner itself."""


class ConfigurationError(PostInstallError):
    """The package catalog could not be loaded."""


class PreflightError(PostInstallError):
    """A preflight check failed. Nothing has been changed on the system yet."""


class DownloadError(PostInstallError):
    """A download kept failing after every retry attempt."""

    def __init__(self, url: str, attempts: int, last_error: Exception | None = None):
        self.url = url
        self.attempts = attempts
        self.last_error = last_error
        detail = f": {last_error}" if last_error else ""
        super().__init__(f"Failed to download {url} after {attempts} attempts{detail}")


class ExtensionInstallError(PostInstallError):
    """A downloaded extension archive could not be unpacked."""
