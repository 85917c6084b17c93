"""devbootstrap — idempotent development machine bootstrapper."""

__version__ = "0.1.0"
