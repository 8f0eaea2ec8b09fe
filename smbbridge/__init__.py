"""smbclient-bridge: SMB share operations through the smbclient CLI."""

__version__ = "1.0.0"
