import random
from dataclasses import dataclass, field
from enum import Enum, IntEnum, unique
from typing import Final, NamedTuple


COUNTS = [3, 2, 2, 2, 1]
NUMBERS: Final[range] = range(1, 6)

MAX_HINT_TOKENS: Final[int] = 8
MAX_FUSES: Final[int] = 3


@unique
class Suit(IntEnum):
    RED = 0
    GREEN = 1
    BLUE = 2
    YELLOW = 3
    WHITE = 4
    RAINBOW = 5

    @property
    def display_name(self) -> str:
        return self.name.lower()

    def __str__(self) -> str:
        return self.display_name


def num_copies(number: int) -> int:
    return COUNTS[number - 1]


class TileIdentity(NamedTuple):
    suit: Suit
    number: int

    def __str__(self) -> str:
        return f"{self.suit.display_name} {self.number}"


def all_identities() -> list[TileIdentity]:
    """
    Every identity in the deck, ordered by suit then number.
    """
    return [TileIdentity(suit, num) for suit in Suit for num in NUMBERS]


@dataclass(frozen=True)
class Tile:
    """
    A physical tile. `uid` is the only thing its owner gets to see.
    """

    suit: Suit
    number: int
    uid: int

    @property
    def identity(self) -> TileIdentity:
        return TileIdentity(self.suit, self.number)

    def same(self, other: "Tile") -> bool:
        """Is this a copy of `other` (same suit and number)?"""
        return self.suit == other.suit and self.number == other.number

    def __str__(self) -> str:
        return f"{self.suit.display_name} {self.number}"


@unique
class InfoType(Enum):
    SUIT = 0
    NUMBER = 1


@dataclass(frozen=True)
class Play:
    tile_id: int

    def __str__(self) -> str:
        return f"plays tile {self.tile_id}"


@dataclass(frozen=True)
class Discard:
    tile_id: int

    def __str__(self) -> str:
        return f"discards tile {self.tile_id}"


@dataclass(frozen=True)
class GiveInfo:
    target_player: int
    info_type: InfoType
    value: Suit | int

    def __post_init__(self):
        if self.info_type is InfoType.SUIT and not isinstance(self.value, Suit):
            raise ValueError(f"Suit info needs a Suit, got {self.value!r}")
        if self.info_type is InfoType.NUMBER and (
            isinstance(self.value, Suit) or self.value not in NUMBERS
        ):
            raise ValueError(f"Number info needs a number in 1..5, got {self.value!r}")

    def matches(self, tile: Tile) -> bool:
        if self.info_type is InfoType.SUIT:
            return tile.suit == self.value
        return tile.number == self.value

    def __str__(self) -> str:
        if self.info_type is InfoType.SUIT:
            assert isinstance(self.value, Suit)
            return (
                f"tells player {self.target_player} about all their "
                f"{self.value.display_name} tiles"
            )
        return f"tells player {self.target_player} about all their {self.value}s"


type Action = Play | Discard | GiveInfo


@dataclass(frozen=True)
class Turn:
    """
    One history entry. `targeted_tiles` is only filled in for info actions.
    """

    action: Action
    acting_player: int
    targeted_tiles: tuple[int, ...] = ()


@dataclass
class GameState:
    """
    A player-facing snapshot of the game from one seat.

    `hands` holds the fully visible tiles of every *other* seat; the viewpoint's
    own hand is only known by tile id, oldest first.
    """

    viewpoint: int
    tokens: int
    discard: list[Tile]
    played: list[Tile]
    your_hand: list[int]
    hands: dict[int, list[Tile]]
    next_play: dict[Suit, int]
    fuses: int = 0
    history: list[Turn] = field(default_factory=list)

    @property
    def num_players(self) -> int:
        return len(self.hands) + 1

    @property
    def turn_number(self) -> int:
        """Index of the turn about to be taken."""
        return len(self.history)

    def is_playable(self, tile: Tile | TileIdentity) -> bool:
        return self.next_play[tile.suit] == tile.number

    def all_hands(self) -> list[Tile]:
        tiles = []
        for pnr in sorted(self.hands):
            tiles.extend(self.hands[pnr])
        return tiles

    def is_dead(self, suit: Suit, number: int) -> bool:
        """
        Is this identity no longer needed? Either it's been played past, or some
        lower identity of the suit has had every copy discarded.
        """
        if self.next_play[suit] > number:
            return True
        for lower in range(1, number):
            discarded = sum(
                1 for t in self.discard if t.suit == suit and t.number == lower
            )
            if discarded == num_copies(lower):
                return True
        return False

    def tiles_in_hand(self, pnr: int) -> list[int]:
        if pnr == self.viewpoint:
            return list(self.your_hand)
        return [t.uid for t in self.hands[pnr]]

    def seat_distance(self, from_pnr: int, to_pnr: int) -> int:
        """How many turns after `from_pnr` acts until `to_pnr` acts."""
        return (to_pnr - from_pnr) % self.num_players

    def valid_actions(self) -> list[Action]:
        valid: list[Action] = []
        for uid in self.your_hand:
            valid.append(Play(uid))
            if self.tokens < MAX_HINT_TOKENS:
                valid.append(Discard(uid))
        if self.tokens > 0:
            for pnr in sorted(self.hands):
                hand = self.hands[pnr]
                for suit in sorted(set(t.suit for t in hand)):
                    valid.append(GiveInfo(pnr, InfoType.SUIT, suit))
                for num in sorted(set(t.number for t in hand)):
                    valid.append(GiveInfo(pnr, InfoType.NUMBER, num))
        return valid


class Log:
    outfile: str
    num_turns: int

    def __init__(self, outfile):
        """
        Appends a plain-text transcript of every game to `outfile`.
        """
        self.outfile = outfile
        self.num_turns = 0

    def log_game_start(self, num_players: int, deck: list[Tile]):
        self.num_turns = 0
        with open(self.outfile, "a") as file:
            file.write(
                f"NEW: starting a new game of {num_players} players "
                f"with the following deck:\n{format_hand(deck)}\n"
            )

    def log_action(self, pnr: int, action: Action):
        self.num_turns += 1
        with open(self.outfile, "a") as file:
            file.write(f"Turn {self.num_turns}: Player {pnr} {action}\n")

    def log_game_end(self, points: int, reason: str):
        with open(self.outfile, "a") as file:
            file.write(f"END: {points} points ({reason})\n")


def make_deck() -> list[Tile]:
    identities = []
    for suit in Suit:
        for num, cnt in enumerate(COUNTS):
            for _ in range(cnt):
                identities.append((suit, num + 1))
    random.shuffle(identities)
    # ids are handed out after the shuffle so they say nothing about the tile
    return [Tile(suit, num, uid) for uid, (suit, num) in enumerate(identities)]


def format_hand(hand) -> str:
    return ", ".join(map(str, hand))


def format_possible(possible: list[TileIdentity]) -> str:
    if len(possible) <= 5:
        return " ".join(map(str, possible))
    return f"{len(possible)} possibilities"


class NullStream:
    def write(self, _):
        pass

    def flush(self):
        pass

    def writelines(self, _):
        pass
