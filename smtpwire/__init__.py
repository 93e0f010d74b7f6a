"""SMTP wire protocol: commands, addresses, enhanced status codes and DATA streams."""

__version__ = "0.1.0"