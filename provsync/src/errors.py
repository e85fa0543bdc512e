class ProvsyncError(Exception):
    """Base class for every fatal error raised while syncing a profile."""


class ConfigurationError(ProvsyncError):
    """Bad or missing paths and inputs."""


class ExternalToolError(ProvsyncError):
    """A shelled-out command failed or printed something we could not parse."""


class MalformedProfileError(ProvsyncError):
    """The decoded provisioning profile is missing a required field."""


class MalformedCertificateError(ProvsyncError):
    """The developer certificate does not carry a usable identity."""


class PersistError(ProvsyncError):
    """The updated project could not be written back to disk."""
