"""
Game Core - State Codec

Converts engine states to and from transport payloads. Every remotely
sourced state passes through load_state, which normalizes enum casing via the
snapshot models, so engines only ever see canonical values.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from gamecore.engine.ayo import AyoState
from gamecore.engine.base import GameKind
from gamecore.engine.ludo import LudoState
from gamecore.engine.whot_state import WhotState
from gamecore.sync.models import AyoSnapshot, LudoSnapshot, SnapshotModel, WhotSnapshot

logger = logging.getLogger(__name__)

EngineState = AyoState | LudoState | WhotState

_SNAPSHOTS: dict[GameKind, type[SnapshotModel]] = {
    GameKind.AYO: AyoSnapshot,
    GameKind.LUDO: LudoSnapshot,
    GameKind.WHOT: WhotSnapshot,
}

_STATE_KINDS: dict[type, GameKind] = {
    AyoState: GameKind.AYO,
    LudoState: GameKind.LUDO,
    WhotState: GameKind.WHOT,
}


def kind_of(state: EngineState) -> GameKind:
    """Return the game a state belongs to."""
    try:
        return _STATE_KINDS[type(state)]
    except KeyError:
        raise TypeError(f"Not an engine state: {type(state).__name__}") from None


def dump_state(state: EngineState) -> dict[str, Any]:
    """Serialize an engine state to a JSON-safe payload."""
    snapshot_cls = _SNAPSHOTS[kind_of(state)]
    return snapshot_cls.from_state(state).to_payload()


def load_state(kind: GameKind | str, payload: dict[str, Any]) -> EngineState:
    """
    Rebuild an engine state from a (possibly remote) payload.

    Args:
        kind: Game the payload belongs to
        payload: Dict with camelCase or snake_case keys

    Returns:
        The engine state with every enum field in canonical form

    Raises:
        pydantic.ValidationError: If the payload does not describe a valid state
    """
    kind = GameKind(kind.lower() if isinstance(kind, str) else kind)
    snapshot_cls = _SNAPSHOTS[kind]
    try:
        snapshot = snapshot_cls.model_validate(payload)
    except ValidationError:
        logger.warning("Rejected %s payload with %d top-level keys", kind.value, len(payload))
        raise
    return snapshot.to_state()
