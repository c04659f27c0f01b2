"""Point-by-point reconstruction and match insights for racquet sports."""

__version__ = "0.1.0"
