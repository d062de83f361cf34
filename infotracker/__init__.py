from .errors import ContradictionError, NoLegalActionError
from .unknown_tile import UnknownTile
from .belief_store import BeliefStore, eliminated_identities
from .finesse import Finesse, FinesseTracker
from .scorer import ActionScorer, Candidate
from .tracker import InfoTracker

__all__ = [
    "ContradictionError",
    "NoLegalActionError",
    "UnknownTile",
    "BeliefStore",
    "eliminated_identities",
    "Finesse",
    "FinesseTracker",
    "ActionScorer",
    "Candidate",
    "InfoTracker",
]
