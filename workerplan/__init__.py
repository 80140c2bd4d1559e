"""Worker node plan building and change detection for RKE clusters."""

__version__ = "0.1.0"
