"""
Game Core State Sync.

Transport-safe snapshots of engine states and the codec used to exchange
them with a remote peer.
"""

from gamecore.sync.codec import dump_state, kind_of, load_state
from gamecore.sync.models import (
    AyoSnapshot,
    CardModel,
    LudoSnapshot,
    PendingActionModel,
    WhotSnapshot,
)

__all__ = [
    "AyoSnapshot",
    "CardModel",
    "LudoSnapshot",
    "PendingActionModel",
    "WhotSnapshot",
    "dump_state",
    "kind_of",
    "load_state",
]
