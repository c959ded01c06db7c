"""
Game Core - Ayo Online Mode

Play against a remote peer. The peer's published state is the source of
truth: local moves are validated and applied optimistically, and any state
fetched from the peer replaces the local one wholesale (last writer wins).
Fetching and publishing are the transport layer's job.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any

from gamecore.config.settings import Settings, get_settings
from gamecore.engine.ayo import AyoEngine, AyoState
from gamecore.engine.base import GameConfig, GameKind, PlayMode
from gamecore.engine.validators import validate_player_index
from gamecore.modes.base import Side, is_eligible, side_of
from gamecore.sync.codec import dump_state, load_state

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OnlineState:
    """
    Online wrapper around an Ayo game.

    Attributes:
        game: Underlying engine state, in the shared (absolute) seating
        stake: Amount staked by each side
        local_player: Engine index of the local user's seat
        current_side: Whose move it is, from the local point of view
        is_finished: Whether the game has ended
        winner: Winning side, None while running or after a draw
    """
    game: AyoState
    stake: int
    local_player: int = 0
    current_side: Side = Side.ME
    is_finished: bool = False
    winner: Side | None = None


class OnlineMode:
    """Stateless online-mode bookkeeping over AyoEngine."""

    @classmethod
    def initialize(
        cls,
        local_player: int = 0,
        stake: int | None = None,
        balance: int | None = None,
        settings: Settings | None = None
    ) -> OnlineState:
        """
        Start an online game from the local seat.

        Raises:
            ValueError: If the seat or stake is invalid, or the balance cannot cover it
        """
        settings = settings or get_settings()
        validate_player_index(local_player, 2)
        config = GameConfig(
            kind=GameKind.AYO,
            mode=PlayMode.ONLINE,
            stake=stake if stake is not None else settings.online_stake,
        )
        if balance is not None and not is_eligible(balance, config.stake):
            raise ValueError(f"Balance {balance} cannot cover a stake of {config.stake}.")

        game = AyoEngine.initialize(turn_seconds=settings.ayo_turn_seconds)
        return OnlineState(
            game=game,
            stake=config.stake,
            local_player=local_player,
            current_side=side_of(game.current_player, local_player),
        )

    @classmethod
    def play_local_turn(cls, state: OnlineState, pit_index: int) -> OnlineState:
        """
        Validate and apply the local user's move before it is published.

        Returns:
            New OnlineState, or the same state if the move is not allowed
        """
        if state.is_finished or state.current_side != Side.ME:
            logger.debug("Ignoring local move: not our turn")
            return state

        game = AyoEngine.apply_move(state.game, pit_index)
        if game is state.game:
            return state
        return cls._settle(replace(state, game=game))

    @classmethod
    def accept_remote(cls, state: OnlineState, payload: dict[str, Any]) -> OnlineState:
        """
        Adopt the peer's published game state.

        Raises:
            pydantic.ValidationError: If the payload is not a valid Ayo state
        """
        game = load_state(GameKind.AYO, payload)
        if game == state.game:
            return state
        logger.debug("Adopting remote state, %s to move", game.current_player)
        return cls._settle(replace(state, game=game))

    @classmethod
    def outgoing_payload(cls, state: OnlineState) -> dict[str, Any]:
        """Payload to publish after a local move."""
        return dump_state(state.game)

    @classmethod
    def _settle(cls, state: OnlineState) -> OnlineState:
        game = state.game
        current_side = side_of(game.current_player, state.local_player)
        if not game.is_game_over:
            return replace(state, current_side=current_side, is_finished=False, winner=None)

        winner_index = AyoEngine.get_winner(game)
        winner = side_of(winner_index, state.local_player) if winner_index is not None else None
        logger.info("Online game finished, winner: %s", winner.value if winner else "draw")
        return replace(state, current_side=current_side, is_finished=True, winner=winner)
