"""Record management for organizations, users, protocols and protocol templates."""

__version__ = "1.0.0"
