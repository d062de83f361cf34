from abc import ABC, abstractmethod
from typing import override

from utils import Suit, Tile, num_copies


class PostMoveMetric(ABC):
    """Abstract base class for metrics evaluated after each move."""

    @abstractmethod
    def __call__(self, **kwargs) -> None:
        raise NotImplementedError

    @property
    @abstractmethod
    def final_value(self) -> int | float:
        raise NotImplementedError


class CriticalDiscardMetric(PostMoveMetric):
    """
    Count tiles thrown away (discarded or misplayed) that were the last live copy
    of an identity the team still needed.
    """

    _count: int

    def __init__(self) -> None:
        self._count = 0

    @override
    def __call__(
        self,
        lost_tile: Tile | None = None,
        discard: list[Tile] | None = None,
        next_play: dict[Suit, int] | None = None,
        **kwargs,
    ) -> None:
        if lost_tile is None:
            return
        if discard is None or next_play is None:
            raise ValueError(
                "Unable to count critical discards: discard and next_play cannot be None"
            )

        if next_play[lost_tile.suit] > lost_tile.number:
            return
        # `discard` already contains the lost tile
        copies_gone = sum(1 for t in discard if t.same(lost_tile))
        if copies_gone == num_copies(lost_tile.number):
            self._count += 1

    @property
    @override
    def final_value(self) -> int:
        return self._count


class DeadDiscardMetric(PostMoveMetric):
    """Count discards of tiles that had already been played past."""

    _count: int

    def __init__(self) -> None:
        self._count = 0

    @override
    def __call__(
        self,
        lost_tile: Tile | None = None,
        next_play: dict[Suit, int] | None = None,
        misplay: bool = False,
        **kwargs,
    ) -> None:
        if lost_tile is None or misplay:
            return
        if next_play is None:
            raise ValueError("Unable to count dead discards: next_play cannot be None")
        if next_play[lost_tile.suit] > lost_tile.number:
            self._count += 1

    @property
    @override
    def final_value(self) -> int:
        return self._count
