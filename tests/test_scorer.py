from infotracker import ActionScorer, BeliefStore, Candidate, FinesseTracker
from infotracker.scorer import rank
from utils import Discard, GiveInfo, InfoType, Play, Suit, Tile, TileIdentity

MY_HAND = [10, 11, 12, 13]


def scorer(use_finesse=True):
    return ActionScorer(BeliefStore(), FinesseTracker(), use_finesse)


def quiet_hands():
    """Nothing playable, nothing chained."""
    return {
        1: [Tile(Suit.GREEN, 3, 20), Tile(Suit.WHITE, 4, 21)],
        2: [Tile(Suit.BLUE, 5, 30), Tile(Suit.YELLOW, 3, 31)],
    }


def test_no_info_without_tokens(make_state):
    hands = {1: [Tile(Suit.RED, 1, 20)], 2: [Tile(Suit.BLUE, 1, 30)]}
    gs = make_state(viewpoint=0, your_hand=MY_HAND, hands=hands, tokens=0)
    actions = [c.action for c in scorer().score(gs)]
    assert actions
    assert not any(isinstance(a, GiveInfo) for a in actions)
    assert Discard(10) in actions


def test_no_discard_with_full_tokens(make_state):
    gs = make_state(viewpoint=0, your_hand=MY_HAND, hands=quiet_hands(), tokens=8)
    candidates = scorer().score(gs)
    assert not any(isinstance(c.action, Discard) for c in candidates)
    # only the least playable tile is left to talk about
    assert [(c.fitness, c.action) for c in candidates] == [
        (0, GiveInfo(2, InfoType.NUMBER, 5))
    ]


def test_certain_play(make_state):
    s = scorer()
    s.store.lookup(12).must_be(TileIdentity(Suit.RED, 1))
    gs = make_state(viewpoint=0, your_hand=MY_HAND, hands=quiet_hands(), tokens=5)
    best = s.score(gs)[0]
    assert best.action == Play(12)
    assert best.fitness == 1000


def test_play_threshold_depends_on_fuses(make_state):
    s = scorer()
    s.store.lookup(11).play_strength = 20
    calm = make_state(viewpoint=0, your_hand=MY_HAND, hands=quiet_hands(), tokens=5)
    tense = make_state(
        viewpoint=0, your_hand=MY_HAND, hands=quiet_hands(), tokens=5, fuses=2
    )
    assert ActionScorer.required_play_strength(calm) == 15
    assert ActionScorer.required_play_strength(tense) == 50

    assert s.score(calm)[0].action == Play(11)
    assert s.score(calm)[0].fitness == 20
    assert Play(11) not in [c.action for c in s.score(tense)]


def test_unplayable_tile_is_never_played(make_state):
    s = scorer()
    tile = s.store.lookup(11)
    tile.play_strength = 80
    tile.must_be(Suit.RED)
    tile.cannot_be(1)
    gs = make_state(viewpoint=0, your_hand=MY_HAND, hands=quiet_hands(), tokens=5)
    assert Play(11) not in [c.action for c in s.score(gs)]


def test_direct_info_prefers_number_when_it_covers_more(make_state):
    hands = {
        1: [Tile(Suit.RED, 1, 20), Tile(Suit.GREEN, 4, 21), Tile(Suit.BLUE, 1, 22)],
        2: [Tile(Suit.YELLOW, 3, 30)],
    }
    gs = make_state(viewpoint=0, your_hand=MY_HAND, hands=hands, tokens=5)
    best = scorer().score(gs)[0]
    assert best.action == GiveInfo(1, InfoType.NUMBER, 1)
    assert best.fitness == 40


def test_direct_info_prefers_suit_on_a_tie(make_state):
    hands = {1: [Tile(Suit.RED, 1, 20), Tile(Suit.GREEN, 4, 21)], 2: []}
    gs = make_state(viewpoint=0, your_hand=MY_HAND, hands=hands, tokens=5)
    best = scorer().score(gs)[0]
    assert best.action == GiveInfo(1, InfoType.SUIT, Suit.RED)
    assert best.fitness == 20


def test_recent_info_is_not_repeated(make_state):
    hands = {1: [Tile(Suit.RED, 1, 20), Tile(Suit.GREEN, 4, 21)], 2: []}
    gs = make_state(viewpoint=0, your_hand=MY_HAND, hands=hands, tokens=5)

    s = scorer()
    s.store.lookup(20).got_info()
    assert not any(isinstance(c.action, GiveInfo) for c in s.score(gs))

    # long enough ago to be worth repeating
    s.store.lookup(20).info_age = 21
    assert GiveInfo(1, InfoType.SUIT, Suit.RED) in [c.action for c in s.score(gs)]


def test_copy_with_newer_info_suppresses_info(make_state):
    hands = {1: [Tile(Suit.RED, 1, 20)], 2: [Tile(Suit.RED, 1, 30)]}
    gs = make_state(viewpoint=0, your_hand=MY_HAND, hands=hands, tokens=5)
    s = scorer()
    s.store.lookup(30).got_info()
    s.store.lookup(30).info_age = 2
    assert not any(isinstance(c.action, GiveInfo) for c in s.score(gs))


def test_finesse_info_beats_direct_info(make_state):
    hands = {
        1: [Tile(Suit.BLUE, 4, 20), Tile(Suit.RED, 2, 21)],
        2: [Tile(Suit.GREEN, 3, 30), Tile(Suit.RED, 1, 31)],
    }
    gs = make_state(viewpoint=0, your_hand=MY_HAND, hands=hands, tokens=8)

    candidates = scorer().score(gs)
    assert candidates[0].action == GiveInfo(1, InfoType.SUIT, Suit.RED)
    assert candidates[0].fitness == 25
    assert candidates[1].action == GiveInfo(2, InfoType.SUIT, Suit.RED)
    assert candidates[1].fitness == 20

    plain = scorer(use_finesse=False).score(gs)
    assert plain[0].action == GiveInfo(2, InfoType.SUIT, Suit.RED)
    assert GiveInfo(1, InfoType.SUIT, Suit.RED) not in [c.action for c in plain]


def test_finesse_info_needs_holder_without_copy(make_state):
    # player 1 already holds a red 1, so they would just play that
    hands = {
        1: [Tile(Suit.RED, 1, 22), Tile(Suit.RED, 2, 21)],
        2: [Tile(Suit.GREEN, 3, 30), Tile(Suit.RED, 1, 31)],
    }
    gs = make_state(viewpoint=0, your_hand=MY_HAND, hands=hands, tokens=5)
    assert all(c.fitness < 25 for c in scorer().score(gs))


def test_dead_tile_is_discarded(make_state):
    s = scorer()
    tile = s.store.lookup(13)
    tile.must_be(Suit.RED)
    for n in (3, 4, 5):
        tile.cannot_be(n)
    played = [Tile(Suit.RED, 1, 40), Tile(Suit.RED, 2, 41)]
    gs = make_state(
        viewpoint=0, your_hand=MY_HAND, hands=quiet_hands(), played=played, tokens=5
    )
    candidates = s.score(gs)
    assert candidates[0] == Candidate(5, Discard(13), "dead tile")
    assert candidates[1].action == Discard(10)


def test_tile_behind_a_lost_number_is_discarded(make_state):
    s = scorer()
    tile = s.store.lookup(11)
    tile.must_be(Suit.RED)
    tile.cannot_be(1)
    tile.cannot_be(2)
    # both red 2s are gone, so red 3 to 5 can never be played
    discard = [Tile(Suit.RED, 2, 40), Tile(Suit.RED, 2, 41)]
    gs = make_state(
        viewpoint=0, your_hand=MY_HAND, hands=quiet_hands(), discard=discard, tokens=5
    )
    assert not tile.is_dead(gs.next_play)

    candidates = s.score(gs)
    assert candidates[0] == Candidate(5, Discard(11), "dead tile")
    assert candidates[1].action == Discard(10)


def test_scoring_is_deterministic_and_pure(make_state):
    hands = {
        1: [Tile(Suit.BLUE, 4, 20), Tile(Suit.RED, 2, 21)],
        2: [Tile(Suit.GREEN, 1, 30), Tile(Suit.RED, 1, 31)],
    }
    gs = make_state(viewpoint=0, your_hand=MY_HAND, hands=hands, tokens=4)
    s = scorer()
    first = s.score(gs)
    assert s.score(gs) == first
    assert len(s.store) == 0
    assert len(s.finesses) == 0


def test_rank_ties():
    candidates = [
        Candidate(5, Discard(1)),
        Candidate(5, GiveInfo(1, InfoType.NUMBER, 2)),
        Candidate(5, Play(2)),
        Candidate(7, Discard(4)),
        Candidate(5, Play(3)),
    ]
    assert [c.action for c in rank(candidates)] == [
        Discard(4),
        Play(2),
        Play(3),
        GiveInfo(1, InfoType.NUMBER, 2),
        Discard(1),
    ]
