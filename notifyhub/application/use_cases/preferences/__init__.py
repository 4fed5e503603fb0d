"""Preference-related use cases."""

from .can_receive import can_receive
from .get_or_create_preferences import get_or_create_preferences
from .opt_in_out import OPT_IN, OPT_OUT, opt_in_out, verify_channel
from .preferred_channel import PreferredChannel, preferred_channel
from .update_preferences import update_channel_preference, update_preferences

__all__ = [
    "OPT_IN",
    "OPT_OUT",
    "PreferredChannel",
    "can_receive",
    "get_or_create_preferences",
    "opt_in_out",
    "preferred_channel",
    "update_channel_preference",
    "update_preferences",
    "verify_channel",
]
