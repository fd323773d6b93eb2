"""Two-step verification credential derivation and notification-key core."""

__version__ = "1.0.0"
