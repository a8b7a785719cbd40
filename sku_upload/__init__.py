"""CSV SKU upload: local validation, remote validation and cart submission."""

__version__ = "0.1.0"
