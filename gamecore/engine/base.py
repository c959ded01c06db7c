"""
Game Core - Engine Base Classes

This module defines the foundational data structures, enums and faults used
by every rule engine. All classes are immutable (frozen dataclasses) so that
a transition always produces a new state value instead of editing the old one.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Sequence


class GameKind(Enum):
    """Games bundled in the application."""
    AYO = "ayo"
    LUDO = "ludo"
    WHOT = "whot"


class PlayMode(Enum):
    """How a game is being played."""
    COMPUTER = "computer"
    BATTLE = "battle"
    ONLINE = "online"


class InvalidMoveError(ValueError):
    """Raised by the card engine when a play is not legal in the current state."""


class InvalidSuitCallError(InvalidMoveError):
    """Raised when a suit is called without a pending suit call for the caller."""


@dataclass(frozen=True)
class DiceRoll:
    """
    Immutable representation of a D6 roll.

    Attributes:
        values: Tuple of dice face values
    """
    values: tuple[int, ...]

    FACES = 6

    def __post_init__(self) -> None:
        """Validate dice values are within valid range."""
        for value in self.values:
            if not (1 <= value <= self.FACES):
                raise ValueError(
                    f"Invalid die value {value}. "
                    f"Must be between 1 and {self.FACES}."
                )

    def __len__(self) -> int:
        return len(self.values)

    def __getitem__(self, index: int) -> int:
        return self.values[index]

    @property
    def is_double_six(self) -> bool:
        """Returns True if every die shows a six."""
        return len(self.values) > 1 and all(v == 6 for v in self.values)

    @classmethod
    def from_sequence(cls, values: Sequence[int]) -> "DiceRoll":
        """Create a DiceRoll from any sequence type."""
        return cls(values=tuple(values))


@dataclass(frozen=True)
class GameConfig:
    """
    Configuration for a game session.

    Attributes:
        kind: Which game is played
        mode: Computer, battle or online play
        stake: Amount staked on the outcome (0 against the computer)
        num_players: Number of seats at the table
    """
    kind: GameKind
    mode: PlayMode
    stake: int = 0
    num_players: int = 2

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.kind == GameKind.WHOT:
            if not 2 <= self.num_players <= 4:
                raise ValueError("Number of players for Whot must be between 2 and 4.")
        else:
            # Ayo and Ludo are head-to-head only
            if self.num_players != 2:
                raise ValueError(f"{self.kind.name.title()} requires exactly 2 players.")

        if self.mode == PlayMode.COMPUTER:
            if self.stake != 0:
                raise ValueError("Games against the computer cannot carry a stake.")
        elif not isinstance(self.stake, int) or self.stake <= 0:
            raise ValueError(
                f"Stake for {self.mode.value} play must be a positive integer, got {self.stake}."
            )
