from .base import Player
from .dummy import DummyPlayer
from .info_giver import InfoGiverPlayer

__all__ = [
    "Player",
    "DummyPlayer",
    "InfoGiverPlayer",
]
