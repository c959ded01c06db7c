"""
Game Core - Ayo Battle Mode

Local stake play: two people share a device and the winner takes the pot.
The game ends when the engine says it does (empty row or expired clock).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from gamecore.config.settings import Settings, get_settings
from gamecore.engine.ayo import AyoEngine, AyoState
from gamecore.engine.base import GameConfig, GameKind, PlayMode
from gamecore.modes.base import Side, is_eligible, side_of

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BattleState:
    """
    Battle wrapper around an Ayo game.

    Attributes:
        game: Underlying engine state (player 0 is ME)
        m_stake: Stake chosen by the player
        r_stake: Fixed background stake
        current_side: Whose move it is
        is_finished: Whether the game has ended
        winner: Winning side, None while running or after a draw
    """
    game: AyoState
    m_stake: int
    r_stake: int
    current_side: Side = Side.ME
    is_finished: bool = False
    winner: Side | None = None


class BattleMode:
    """Stateless battle-mode bookkeeping over AyoEngine."""

    @classmethod
    def initialize(
        cls,
        m_stake: int,
        balance: int | None = None,
        settings: Settings | None = None
    ) -> BattleState:
        """
        Start a battle.

        Args:
            m_stake: Stake placed by the player
            balance: Player's balance, checked against the stake when given
            settings: Optional settings override

        Raises:
            ValueError: If the stake is invalid or the balance cannot cover it
        """
        settings = settings or get_settings()
        config = GameConfig(kind=GameKind.AYO, mode=PlayMode.BATTLE, stake=m_stake)
        if balance is not None and not is_eligible(balance, config.stake):
            raise ValueError(f"Balance {balance} cannot cover a stake of {config.stake}.")

        return BattleState(
            game=AyoEngine.initialize(turn_seconds=settings.ayo_turn_seconds),
            m_stake=config.stake,
            r_stake=settings.battle_background_stake,
        )

    @classmethod
    def play_turn(cls, state: BattleState, pit_index: int, side: Side) -> BattleState:
        """
        Apply a move for one side.

        Returns:
            New BattleState, or the same state if the game is over, it is not
            that side's move, or the engine rejected the pit
        """
        if state.is_finished or state.current_side != side:
            logger.debug("Ignoring move from %s: not their turn", side.value)
            return state

        game = AyoEngine.apply_move(state.game, pit_index)
        if game is state.game:
            return state
        return cls._settle(replace(state, game=game))

    @classmethod
    def tick(cls, state: BattleState, elapsed: float) -> BattleState:
        """Run the active clock; a timeout finishes the battle."""
        if state.is_finished:
            return state
        return cls._settle(replace(state, game=AyoEngine.tick(state.game, elapsed)))

    @classmethod
    def _settle(cls, state: BattleState) -> BattleState:
        game = state.game
        if not game.is_game_over:
            return replace(state, current_side=side_of(game.current_player))

        winner_index = AyoEngine.get_winner(game)
        winner = side_of(winner_index) if winner_index is not None else None
        logger.info(
            "Battle finished %d-%d, winner: %s",
            game.scores[0], game.scores[1], winner.value if winner else "draw",
        )
        return replace(
            state,
            current_side=side_of(game.current_player),
            is_finished=True,
            winner=winner,
        )

    @classmethod
    def payout(cls, state: BattleState) -> int:
        """
        Amount returned to the player once the battle is over.

        Returns:
            Twice the stake for a win, the stake back for a draw, else 0
        """
        if not state.is_finished:
            return 0
        if state.winner is Side.ME:
            return state.m_stake * 2
        if state.winner is None:
            return state.m_stake
        return 0
