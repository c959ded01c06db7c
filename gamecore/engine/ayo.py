"""
Game Core - Ayo Game Engine

A 2-player Mancala-family sowing game on a 2×6 board.

Game Rules:
- Pits 0-5 belong to player 0 (left to right), pits 6-11 to player 1
- Each pit starts with 4 seeds; the mover lifts every seed from one of their pits
- Sowing drops one seed per pit in increasing index order, wrapping from 11 to 0,
  skipping no pits (a lap of 12+ seeds refills the origin pit)
- Capture: if the last seed lands on the opponent's row and leaves an even,
  non-zero count there, those seeds are captured; the previous opponent pits
  are checked in turn and captured while they also hold an even, non-zero count
- The turn always passes to the other player
- Game ends when either row is empty or the mover's clock runs out; the seeds
  left on the board go to the owner of the row they sit in
"""

from dataclasses import dataclass, replace
from typing import ClassVar


@dataclass(frozen=True)
class AyoState:
    """
    Immutable representation of an Ayo game.

    Attributes:
        pits: Seed counts for all 12 pits (0-5 player 0, 6-11 player 1)
        scores: Captured seeds per player
        current_player: Index of the player to move (0 or 1)
        is_game_over: Whether the game has ended
        timers: Seconds left on each player's clock
        timer_running: Index of the player whose clock is running, None when stopped
    """
    pits: tuple[int, ...]
    scores: tuple[int, int] = (0, 0)
    current_player: int = 0
    is_game_over: bool = False
    timers: tuple[float, float] = (30.0, 30.0)
    timer_running: int | None = 0

    def __post_init__(self) -> None:
        """Validate board structure."""
        if len(self.pits) != AyoEngine.NUM_PITS:
            raise ValueError(f"Board must have exactly {AyoEngine.NUM_PITS} pits")
        for i, count in enumerate(self.pits):
            if count < 0:
                raise ValueError(f"Pit {i} has a negative seed count")
        if self.current_player not in (0, 1):
            raise ValueError(f"Current player must be 0 or 1, got {self.current_player}")

    def row(self, player: int) -> tuple[int, ...]:
        """Seed counts of one player's row."""
        start = player * AyoEngine.PITS_PER_ROW
        return self.pits[start:start + AyoEngine.PITS_PER_ROW]


class AyoEngine:
    """Stateless engine for Ayo game logic."""

    PITS_PER_ROW: ClassVar[int] = 6
    NUM_PITS: ClassVar[int] = 12
    SEEDS_PER_PIT: ClassVar[int] = 4
    TURN_SECONDS: ClassVar[float] = 30.0

    @classmethod
    def initialize(
        cls,
        seeds_per_pit: int = SEEDS_PER_PIT,
        turn_seconds: float = TURN_SECONDS
    ) -> AyoState:
        """
        Create the opening position.

        Args:
            seeds_per_pit: Seeds placed in every pit
            turn_seconds: Starting clock for each player

        Returns:
            AyoState with player 0 to move and their clock running
        """
        if seeds_per_pit <= 0:
            raise ValueError(f"Seeds per pit must be positive, got {seeds_per_pit}")
        if turn_seconds <= 0:
            raise ValueError(f"Turn seconds must be positive, got {turn_seconds}")

        return AyoState(
            pits=(seeds_per_pit,) * cls.NUM_PITS,
            timers=(float(turn_seconds), float(turn_seconds)),
            timer_running=0,
        )

    @classmethod
    def owner_of(cls, pit_index: int) -> int:
        """Return the player whose row contains the pit."""
        return pit_index // cls.PITS_PER_ROW

    @classmethod
    def get_valid_moves(cls, state: AyoState) -> list[int]:
        """
        List the pits the current player may sow from.

        Returns:
            Non-empty pit indices in the mover's row (empty once the game is over)
        """
        if state.is_game_over:
            return []
        start = state.current_player * cls.PITS_PER_ROW
        return [
            i for i in range(start, start + cls.PITS_PER_ROW)
            if state.pits[i] > 0
        ]

    @classmethod
    def is_capture(cls, count: int) -> bool:
        """Capture predicate: an even, non-zero count after sowing."""
        return count > 0 and count % 2 == 0

    @classmethod
    def apply_move(cls, state: AyoState, pit_index: int) -> AyoState:
        """
        Sow the seeds of one pit and resolve captures.

        Steps:
        1. Lift all seeds from the chosen pit
        2. Drop them one by one into the following pits
        3. Capture backwards along the opponent's row from the last pit
        4. Pass the turn (and the running clock) to the other player
        5. End the game if a row is now empty

        Args:
            state: Current game state
            pit_index: Pit to sow from (0-11)

        Returns:
            New AyoState, or the same state object if the move is not legal
        """
        if pit_index not in cls.get_valid_moves(state):
            return state

        mover = state.current_player
        opponent = 1 - mover
        pits = list(state.pits)

        seeds = pits[pit_index]
        pits[pit_index] = 0
        position = pit_index
        while seeds > 0:
            position = (position + 1) % cls.NUM_PITS
            pits[position] += 1
            seeds -= 1

        # Walk back through the opponent's row while the predicate holds
        captured = 0
        while cls.owner_of(position) == opponent and cls.is_capture(pits[position]):
            captured += pits[position]
            pits[position] = 0
            if position % cls.PITS_PER_ROW == 0:
                break
            position -= 1

        scores = list(state.scores)
        scores[mover] += captured

        new_state = replace(
            state,
            pits=tuple(pits),
            scores=(scores[0], scores[1]),
            current_player=opponent,
            timer_running=opponent,
        )

        if not any(new_state.row(0)) or not any(new_state.row(1)):
            return cls._finish(new_state)
        return new_state

    @classmethod
    def tick(cls, state: AyoState, elapsed: float) -> AyoState:
        """
        Run the active clock down.

        Args:
            state: Current game state
            elapsed: Seconds elapsed since the last tick

        Returns:
            New state with the running timer reduced; the game ends when it hits zero
        """
        if state.is_game_over or state.timer_running is None or elapsed <= 0:
            return state

        timers = list(state.timers)
        timers[state.timer_running] = max(0.0, timers[state.timer_running] - elapsed)
        new_state = replace(state, timers=(timers[0], timers[1]))

        if timers[state.timer_running] == 0.0:
            return cls._finish(new_state)
        return new_state

    @classmethod
    def _finish(cls, state: AyoState) -> AyoState:
        """Sweep every row into its owner's score and stop the clocks."""
        return replace(
            state,
            pits=(0,) * cls.NUM_PITS,
            scores=(
                state.scores[0] + sum(state.row(0)),
                state.scores[1] + sum(state.row(1)),
            ),
            is_game_over=True,
            timer_running=None,
        )

    @classmethod
    def get_winner(cls, state: AyoState) -> int | None:
        """
        Determine the winner based on final scores.

        Returns:
            0 or 1 for the winning player, None for a draw or an unfinished game
        """
        if not state.is_game_over:
            return None

        p0_score, p1_score = state.scores
        if p0_score > p1_score:
            return 0
        elif p1_score > p0_score:
            return 1
        else:
            return None  # Draw

    @classmethod
    def total_seeds(cls, state: AyoState) -> int:
        """Seeds on the board plus seeds captured (constant through a game)."""
        return sum(state.pits) + sum(state.scores)
