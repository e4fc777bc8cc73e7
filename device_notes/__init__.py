"""Look up or update the notes field of a managed device."""

__version__ = "0.1.0"
