"""
Data types and enums shared by the outbound messaging layer.
"""

from enum import Enum


class MessageType(str, Enum):
    """Message types accepted by the Cloud API `type` field.

    The value doubles as the name of the payload field in the request body,
    which is how replies key their content.
    """

    TEXT = "text"
    IMAGE = "image"
    AUDIO = "audio"
    VIDEO = "video"
    DOCUMENT = "document"
    STICKER = "sticker"
    LOCATION = "location"
    CONTACTS = "contacts"
    INTERACTIVE = "interactive"
    TEMPLATE = "template"
    REACTION = "reaction"
