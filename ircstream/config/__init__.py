"""Configuration package exports."""

from .model import ConnectionConfig

__all__ = ["ConnectionConfig"]
