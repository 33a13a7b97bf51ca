"""
Rejections raised by the Euchre rules engine.

Every error leaves the game state it was raised against unchanged. They
subclass ValueError so callers catching rule violations generically keep
working.
"""


class EuchreError(ValueError):
    """Base class for every rejected action"""


class TurnError(EuchreError):
    """Action submitted by a player who does not hold the turn or bid"""


class PhaseError(EuchreError):
    """Action submitted outside the phase it requires"""


class IllegalCardError(EuchreError):
    """Card breaks the follow-suit rule or cannot be played"""


class CardNotInHandError(IllegalCardError):
    """Card is not held by the player"""


class IllegalBidError(EuchreError):
    """Calling the turned-up suit or an unrecognized suit"""


class StructuralError(EuchreError):
    """Round or trick construction that breaks the table layout"""


class DealError(StructuralError):
    """Cards cannot be dealt, e.g. fewer than four seated players"""


class CapacityError(EuchreError):
    """Joining a game that is full or finished"""


class InvalidActionError(EuchreError):
    """Unknown action name or malformed action payload"""


class GameNotFoundError(EuchreError):
    """No game stored under the requested code"""


class ConcurrentUpdateError(EuchreError):
    """A game kept changing underneath an update until retries ran out"""
