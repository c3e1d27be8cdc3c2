"""Shared enums used across the messaging package."""

from .types import MessageType

__all__ = ["MessageType"]
