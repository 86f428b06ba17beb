"""
Slack Integration Layer

This module provides the GitHub → Slack identity directory and
the Slack message sender.
"""

from .client import MessageSender, SlackAPIError, SlackClient
from .directory import DecodeError, IdentityDirectory, decode_payload

__all__ = [
    'MessageSender',
    'SlackAPIError',
    'SlackClient',
    'DecodeError',
    'IdentityDirectory',
    'decode_payload',
]
