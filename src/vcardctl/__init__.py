"""vcardctl — version-aware vCard generation, validation, and QR export."""

__version__ = "0.1.0"
