"""sftpdeploy — upload a build folder to a server over SFTP"""

__version__ = "1.0.0"
