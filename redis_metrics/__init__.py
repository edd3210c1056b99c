"""Redis INFO metrics collector for open-falcon."""

__version__ = "0.2.0"
