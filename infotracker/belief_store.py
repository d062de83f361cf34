from collections import Counter
from typing import Iterator

from infotracker.unknown_tile import UnknownTile
from utils import GameState, TileIdentity, num_copies


class BeliefStore:
    """
    What every tile's owner knows about it, keyed by tile id.

    Records are created on first lookup and never replaced, so callers can hold
    on to the returned object.
    """

    def __init__(self) -> None:
        self._lookup: dict[int, UnknownTile] = {}

    def lookup(self, tile_id: int) -> UnknownTile:
        if tile_id not in self._lookup:
            self._lookup[tile_id] = UnknownTile(tile_id)
        return self._lookup[tile_id]

    def get(self, tile_id: int) -> UnknownTile:
        """
        Like lookup, but never inserts: unseen ids get a detached fresh record.
        """
        if tile_id in self._lookup:
            return self._lookup[tile_id]
        return UnknownTile(tile_id)

    def __contains__(self, tile_id: int) -> bool:
        return tile_id in self._lookup

    def __len__(self) -> int:
        return len(self._lookup)

    def __iter__(self) -> Iterator[UnknownTile]:
        return iter(self._lookup.values())


def eliminated_identities(gs: GameState, viewpoint: int) -> list[TileIdentity]:
    """
    Identities whose every copy is visible from `viewpoint`, so none of them can
    be in that player's hand.

    For a viewpoint other than the snapshot's own, this only counts tiles the
    snapshot can see too, which is a subset of what that player sees.
    """
    visible = list(gs.discard) + list(gs.played)
    for pnr, hand in gs.hands.items():
        if pnr != viewpoint:
            visible.extend(hand)

    seen = Counter(t.identity for t in visible)
    return sorted(
        identity
        for identity, count in seen.items()
        if count >= num_copies(identity.number)
    )
