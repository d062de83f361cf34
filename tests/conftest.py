import itertools

import pytest

from utils import GameState, Suit, Tile


@pytest.fixture
def new_tile():
    """Make tiles with fresh ids (starting at 100) for synthetic snapshots."""
    ids = itertools.count(100)

    def make(suit: Suit, number: int) -> Tile:
        return Tile(suit, number, next(ids))

    return make


@pytest.fixture
def make_state():
    def make(
        viewpoint=0,
        your_hand=(),
        hands=None,
        discard=(),
        played=(),
        next_play=None,
        tokens=8,
        fuses=0,
        history=(),
    ) -> GameState:
        if next_play is None:
            next_play = {s: 1 for s in Suit}
            for t in played:
                next_play[t.suit] = max(next_play[t.suit], t.number + 1)
        return GameState(
            viewpoint=viewpoint,
            tokens=tokens,
            discard=list(discard),
            played=list(played),
            your_hand=list(your_hand),
            hands={pnr: list(h) for pnr, h in (hands or {}).items()},
            next_play=dict(next_play),
            fuses=fuses,
            history=list(history),
        )

    return make
