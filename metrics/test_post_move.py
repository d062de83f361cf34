from metrics.post_move import CriticalDiscardMetric, DeadDiscardMetric
from utils import Suit, Tile


def fresh_board():
    return {s: 1 for s in Suit}


def test_critical_discards():
    critical = CriticalDiscardMetric()
    board = fresh_board()

    first = Tile(Suit.GREEN, 3, 1)
    critical(lost_tile=first, discard=[first], next_play=board)
    assert critical.final_value == 0

    second = Tile(Suit.GREEN, 3, 2)
    critical(lost_tile=second, discard=[first, second], next_play=board)
    assert critical.final_value == 1

    five = Tile(Suit.WHITE, 5, 3)
    critical(lost_tile=five, discard=[first, second, five], next_play=board)
    assert critical.final_value == 2


def test_already_played_is_not_critical():
    critical = CriticalDiscardMetric()
    board = fresh_board()
    board[Suit.RED] = 6
    five = Tile(Suit.RED, 5, 1)
    critical(lost_tile=five, discard=[five], next_play=board)
    assert critical.final_value == 0


def test_moves_without_lost_tiles_are_ignored():
    critical = CriticalDiscardMetric()
    dead = DeadDiscardMetric()
    critical()
    dead()
    assert critical.final_value == dead.final_value == 0


def test_dead_discards():
    dead = DeadDiscardMetric()
    board = fresh_board()
    board[Suit.BLUE] = 3

    dead(lost_tile=Tile(Suit.BLUE, 2, 1), next_play=board)
    dead(lost_tile=Tile(Suit.BLUE, 3, 2), next_play=board)
    # a misplay isn't a choice to throw the tile away
    dead(lost_tile=Tile(Suit.BLUE, 1, 3), next_play=board, misplay=True)
    assert dead.final_value == 1


if __name__ == "__main__":
    test_critical_discards()
    test_dead_discards()
