class ContradictionError(RuntimeError):
    """
    A tile's set of possible identities would become empty.

    This can't happen in a legal game with correct bookkeeping, so the current
    game can't be trusted any more and should be abandoned.
    """


class NoLegalActionError(RuntimeError):
    """The scorer produced no candidate at all."""
