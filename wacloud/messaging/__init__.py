"""Outbound messaging for wacloud."""
