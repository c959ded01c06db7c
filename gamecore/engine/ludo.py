"""
Game Core - Ludo Game Engine

A 2-player race game: each player moves four tokens from house to home along
their own 58-cell path using two D6 dice.

Game Rules:
- A token leaves house only on a 6 and enters its path at position 0
- An active token moves `position + value`; reaching exactly 58 finishes it,
  overshooting is not allowed
- Each die is used by exactly one move; dice are never combined
- With a die still unused the same player keeps moving without re-rolling
- When both dice are used the turn passes, except after a double six which
  grants the same player a fresh roll
- A player with no legal move must pass (the caller invokes pass_turn)
- First player with all four tokens finished wins

Captures are off by default. With capture enabled, landing on a main-track
cell held by an opposing token sends that token back to house.

All methods are stateless class methods operating on immutable data.
"""

import random
from dataclasses import dataclass, replace
from enum import Enum
from typing import ClassVar, Sequence

from gamecore.engine.base import DiceRoll


class PlayerColor(Enum):
    """Token colors, in board order."""
    RED = "red"
    GREEN = "green"
    YELLOW = "yellow"
    BLUE = "blue"


HOUSE_POSITION = -1
FINISH_POSITION = 58


@dataclass(frozen=True)
class LudoToken:
    """
    A single token.

    Attributes:
        id: Stable identifier, e.g. "red-0"
        position: HOUSE_POSITION, a path index 0-57, or FINISH_POSITION
    """
    id: str
    position: int = HOUSE_POSITION

    def __post_init__(self) -> None:
        if not (HOUSE_POSITION <= self.position <= FINISH_POSITION):
            raise ValueError(f"Invalid position {self.position} for token {self.id}")

    @property
    def is_in_house(self) -> bool:
        return self.position == HOUSE_POSITION

    @property
    def is_finished(self) -> bool:
        return self.position == FINISH_POSITION


@dataclass(frozen=True)
class LudoPlayer:
    """A seat at the board and its four tokens."""
    id: str
    color: PlayerColor
    tokens: tuple[LudoToken, ...]

    @property
    def has_finished(self) -> bool:
        """True once every token is home."""
        return all(t.is_finished for t in self.tokens)


@dataclass(frozen=True)
class MoveAction:
    """
    A legal token move.

    Attributes:
        token_index: Index of the token in the mover's token tuple
        die_indices: Dice consumed by the move
        target_position: Position after the move (FINISH_POSITION when it goes home)
        is_capture: Whether the move sends an opposing token back to house
    """
    token_index: int
    die_indices: tuple[int, ...]
    target_position: int
    is_capture: bool = False


@dataclass(frozen=True)
class LudoState:
    """
    Complete state of a Ludo game.

    Attributes:
        players: Exactly two players
        current_player_index: Whose turn it is (0 or 1)
        dice: Values of the current roll (empty before rolling)
        dice_used: Per-die used flags, aligned with dice
        waiting_for_roll: True until the current player rolls
        winner: Id of the winning player, None while the game runs
        log: Human-readable history of the game
        capture_enabled: Whether landing on an opposing token captures it
    """
    players: tuple[LudoPlayer, LudoPlayer]
    current_player_index: int = 0
    dice: tuple[int, ...] = ()
    dice_used: tuple[bool, ...] = ()
    waiting_for_roll: bool = True
    winner: str | None = None
    log: tuple[str, ...] = ()
    capture_enabled: bool = False

    @property
    def current_player(self) -> LudoPlayer:
        return self.players[self.current_player_index]

    @property
    def opponent_index(self) -> int:
        return 1 - self.current_player_index


class LudoEngine:
    """
    Stateless engine for Ludo.

    All methods are class methods operating on immutable data.
    State is passed in and returned, never stored.
    """

    TOKENS_PER_PLAYER: ClassVar[int] = 4
    NUM_DICE: ClassVar[int] = 2
    ENTRY_VALUE: ClassVar[int] = 6
    MAIN_TRACK_END: ClassVar[int] = 50
    BOARD_CELLS: ClassVar[int] = 52

    # Start offsets of each color on the shared ring (collision checks only)
    GLOBAL_OFFSETS: ClassVar[dict[PlayerColor, int]] = {
        PlayerColor.RED: 0,
        PlayerColor.GREEN: 13,
        PlayerColor.YELLOW: 26,
        PlayerColor.BLUE: 39,
    }

    @classmethod
    def initialize(
        cls,
        color_a: PlayerColor = PlayerColor.RED,
        color_b: PlayerColor = PlayerColor.YELLOW,
        capture_enabled: bool = False
    ) -> LudoState:
        """
        Create a new game with every token in house.

        Raises:
            ValueError: If both players pick the same color
        """
        if color_a == color_b:
            raise ValueError(f"Players must use different colors, both chose {color_a.value}")

        players = tuple(
            LudoPlayer(
                id=f"p{seat + 1}",
                color=color,
                tokens=tuple(
                    LudoToken(id=f"{color.value}-{i}")
                    for i in range(cls.TOKENS_PER_PLAYER)
                ),
            )
            for seat, color in enumerate((color_a, color_b))
        )
        return LudoState(
            players=players,
            capture_enabled=capture_enabled,
            log=("Game started",),
        )

    @classmethod
    def roll_dice(
        cls,
        state: LudoState,
        roll: DiceRoll | Sequence[int] | None = None,
        rng: random.Random | None = None
    ) -> LudoState:
        """
        Roll both dice for the current player.

        Args:
            state: Current game state
            roll: Optional pre-determined roll (for testing and replays), either a
                DiceRoll or a plain sequence of two values
            rng: Optional random source used when no roll is given

        Returns:
            New state with fresh, unused dice; the same state if no roll is expected
        """
        if not state.waiting_for_roll or state.winner is not None:
            return state

        if roll is None:
            source = rng or random
            roll = DiceRoll(values=tuple(source.randint(1, 6) for _ in range(cls.NUM_DICE)))
        else:
            roll = DiceRoll.from_sequence(roll)
        if len(roll) != cls.NUM_DICE:
            raise ValueError(f"Ludo is played with {cls.NUM_DICE} dice, got {len(roll)}")

        return replace(
            state,
            dice=roll.values,
            dice_used=(False,) * len(roll),
            waiting_for_roll=False,
            log=state.log + (f"{state.current_player.id} rolled {list(roll.values)}",),
        )

    @classmethod
    def to_global_cell(cls, position: int, color: PlayerColor) -> int | None:
        """
        Map a path position onto the shared 52-cell ring.

        Returns:
            Ring cell index, or None for house, home column and finished tokens
        """
        if not (0 <= position <= cls.MAIN_TRACK_END):
            return None
        return (position + cls.GLOBAL_OFFSETS[color]) % cls.BOARD_CELLS

    @classmethod
    def _target_for(cls, token: LudoToken, value: int) -> int | None:
        """Where a die value takes a token, or None if it cannot move."""
        if token.is_finished:
            return None
        if token.is_in_house:
            return 0 if value == cls.ENTRY_VALUE else None
        target = token.position + value
        return target if target <= FINISH_POSITION else None

    @classmethod
    def _captures(cls, state: LudoState, target: int) -> bool:
        if not state.capture_enabled:
            return False
        cell = cls.to_global_cell(target, state.current_player.color)
        if cell is None:
            return False
        opponent = state.players[state.opponent_index]
        return any(
            cls.to_global_cell(t.position, opponent.color) == cell
            for t in opponent.tokens
        )

    @classmethod
    def get_valid_moves(cls, state: LudoState) -> list[MoveAction]:
        """
        Enumerate every legal move for the current player.

        Moves are listed per unused die, then per token; each move consumes
        exactly one die.

        Returns:
            List of MoveAction (empty while waiting for a roll or after a win)
        """
        if state.waiting_for_roll or state.winner is not None:
            return []

        moves: list[MoveAction] = []
        for die_index, value in enumerate(state.dice):
            if state.dice_used[die_index]:
                continue
            for token_index, token in enumerate(state.current_player.tokens):
                target = cls._target_for(token, value)
                if target is None:
                    continue
                moves.append(MoveAction(
                    token_index=token_index,
                    die_indices=(die_index,),
                    target_position=target,
                    is_capture=cls._captures(state, target),
                ))
        return moves

    @classmethod
    def apply_move(cls, state: LudoState, move: MoveAction) -> LudoState:
        """
        Apply a legal move and resolve whose turn it is next.

        Args:
            state: Current game state
            move: One of the moves returned by get_valid_moves

        Returns:
            New LudoState, or the same state object if the move is not legal
        """
        if move not in cls.get_valid_moves(state):
            return state

        mover_index = state.current_player_index
        mover = state.current_player
        players = list(state.players)

        if move.is_capture:
            opponent = players[state.opponent_index]
            cell = cls.to_global_cell(move.target_position, mover.color)
            players[state.opponent_index] = replace(
                opponent,
                tokens=tuple(
                    replace(t, position=HOUSE_POSITION)
                    if cls.to_global_cell(t.position, opponent.color) == cell else t
                    for t in opponent.tokens
                ),
            )

        tokens = list(mover.tokens)
        tokens[move.token_index] = replace(
            tokens[move.token_index], position=move.target_position
        )
        mover = replace(mover, tokens=tuple(tokens))
        players[mover_index] = mover

        dice_used = list(state.dice_used)
        for index in move.die_indices:
            dice_used[index] = True

        log = state.log + (
            f"{mover.id} moved {tokens[move.token_index].id} to {move.target_position}",
        )

        if mover.has_finished:
            return replace(
                state,
                players=(players[0], players[1]),
                dice_used=tuple(dice_used),
                winner=mover.id,
                log=log + (f"{mover.id} wins",),
            )

        if not all(dice_used):
            return replace(
                state,
                players=(players[0], players[1]),
                dice_used=tuple(dice_used),
                waiting_for_roll=False,
                log=log,
            )

        # Only a double six earns another roll
        bonus = DiceRoll.from_sequence(state.dice).is_double_six
        next_index = mover_index if bonus else 1 - mover_index
        return replace(
            state,
            players=(players[0], players[1]),
            current_player_index=next_index,
            dice=(),
            dice_used=(),
            waiting_for_roll=True,
            log=log,
        )

    @classmethod
    def pass_turn(cls, state: LudoState) -> LudoState:
        """Hand the turn to the other player after a roll with no legal moves."""
        if state.winner is not None:
            return state
        return replace(
            state,
            current_player_index=state.opponent_index,
            dice=(),
            dice_used=(),
            waiting_for_roll=True,
            log=state.log + (f"{state.current_player.id} passed",),
        )
