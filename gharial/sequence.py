"""Phase tracking for the compositor's manage/render sequence loop.

Each manage sequence bumps a generation counter; the render sequence that
follows reuses the generation of the manage sequence before it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

_U64_MASK = 0xFFFF_FFFF_FFFF_FFFF


class PhaseKind(Enum):
    """Which part of the sequence loop is running."""

    IDLE = "idle"
    MANAGING = "managing"
    RENDERING = "rendering"


@dataclass(frozen=True)
class Phase:
    """The current phase and, outside idle, its generation."""

    kind: PhaseKind
    generation: int | None = None


IDLE = Phase(PhaseKind.IDLE)


class Sequence:
    """State machine for entering and leaving manage and render sequences."""

    def __init__(self) -> None:
        self._phase = IDLE
        self._generation = 0

    @property
    def phase(self) -> Phase:
        """The current phase."""
        return self._phase

    def enter_manage(self) -> None:
        """Start a manage sequence with a fresh generation."""
        self._generation = (self._generation + 1) & _U64_MASK
        self._phase = Phase(PhaseKind.MANAGING, self._generation)

    def exit_manage(self) -> None:
        """Leave the manage sequence."""
        self._phase = IDLE

    def enter_render(self) -> None:
        """Start a render sequence under the preceding manage generation."""
        self._phase = Phase(PhaseKind.RENDERING, self._generation)

    def exit_render(self) -> None:
        """Leave the render sequence."""
        self._phase = IDLE