from typing import Callable, Iterable

from infotracker.errors import ContradictionError
from utils import Suit, Tile, TileIdentity, all_identities, format_possible

type Constraint = Suit | int | TileIdentity | Tile


def _matcher(constraint: Constraint) -> Callable[[TileIdentity], bool]:
    # Suit is an IntEnum, so it has to be checked before int
    if isinstance(constraint, Suit):
        return lambda t: t.suit == constraint
    if isinstance(constraint, Tile):
        identity = constraint.identity
        return lambda t: t == identity
    if isinstance(constraint, TileIdentity):
        return lambda t: t == constraint
    if isinstance(constraint, int) and not isinstance(constraint, bool):
        return lambda t: t.number == constraint
    raise TypeError(f"Can't narrow a tile by {constraint!r}")


class UnknownTile:
    """
    Bookkeeping for a tile whose owner can't see it: every identity it might
    still have, how strongly it has been signalled as playable, and how long ago
    it last got info.
    """

    uid: int
    possible: list[TileIdentity]
    reasons: list[str]
    play_strength: int
    info_age: int
    """-1 until the tile gets info, then turns elapsed since the last info"""

    def __init__(self, uid: int):
        self.uid = uid
        self.possible = all_identities()
        self.reasons = []
        self.play_strength = 0
        self.info_age = -1

    def got_info(self) -> None:
        self.info_age = 0

    def age_info(self) -> None:
        if self.info_age >= 0:
            self.info_age += 1

    def _narrow(self, keep: Callable[[TileIdentity], bool], label: str) -> None:
        narrowed = [t for t in self.possible if keep(t)]
        if not narrowed:
            raise ContradictionError(
                f"tile {self.uid}: {label} leaves no possibilities "
                f"(was {format_possible(self.possible)}); history: {self.reasons}"
            )
        if len(narrowed) != len(self.possible):
            self.possible = narrowed
            self.reasons.append(f"{label} - {self}")

    def must_be(self, constraint: Constraint, reason: str = "") -> None:
        match = _matcher(constraint)
        self._narrow(match, f"MustBe({constraint}) {reason}".rstrip())

    def cannot_be(self, constraint: Constraint, reason: str = "") -> None:
        match = _matcher(constraint)
        self._narrow(lambda t: not match(t), f"CannotBe({constraint}) {reason}".rstrip())

    def cannot_be_any(self, constraints: Iterable[Constraint], reason: str = "") -> None:
        for constraint in constraints:
            self.cannot_be(constraint, reason)

    def is_known_suit(self) -> bool:
        return len(set(t.suit for t in self.possible)) == 1

    def is_known_number(self) -> bool:
        return len(set(t.number for t in self.possible)) == 1

    def is_possibly_playable(self, next_play: dict[Suit, int]) -> bool:
        return any(next_play[t.suit] == t.number for t in self.possible)

    def is_definitely_playable(self, next_play: dict[Suit, int]) -> bool:
        return all(next_play[t.suit] == t.number for t in self.possible)

    def is_unplayable(self, next_play: dict[Suit, int]) -> bool:
        return not self.is_possibly_playable(next_play)

    def is_dead(self, next_play: dict[Suit, int]) -> bool:
        return all(next_play[t.suit] > t.number for t in self.possible)

    def __str__(self) -> str:
        return format_possible(self.possible)

    def __repr__(self) -> str:
        return (
            f"UnknownTile({self.uid}, {self}, strength={self.play_strength}, "
            f"age={self.info_age})"
        )
