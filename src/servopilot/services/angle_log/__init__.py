"""Persistent log of commanded servo angles."""

from .store import AngleLogStore

__all__ = ["AngleLogStore"]
