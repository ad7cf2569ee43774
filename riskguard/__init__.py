"""Risk limits, order validation, position tracking and a risk manager for trading systems."""

__version__ = "0.1.0"
__all__ = ["limits", "validation", "position", "manager"]