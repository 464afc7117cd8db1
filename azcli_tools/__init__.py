"""Azure CLI Tools API."""

__version__ = "0.1.0"
