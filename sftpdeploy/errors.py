"""
Deployment exceptions.

Everything except DeployCancelled ends the run with exit code 1.
"""


class DeployError(Exception):
    """Base class for fatal deployment failures."""
    pass


class ConfigError(DeployError):
    """
    Raised when configuration cannot be resolved.

    Examples:
        - SFTP_HOST / SFTP_USER / SFTP_PASS / SFTP_PATH missing
        - sftp.config.yaml is not valid YAML/JSON
        - malformed extraFolders or exclude entry
    """
    pass


class LocalSourceError(DeployError):
    """Raised when the local build folder does not exist."""
    pass


class DeployConnectionError(DeployError):
    """Raised when the SSH handshake fails or the connection is lost mid-run."""
    pass


class DeployCancelled(Exception):
    """Raised when the operator declines a confirmation prompt."""
    pass
