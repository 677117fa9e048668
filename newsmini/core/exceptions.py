"""Custom exception hierarchy for mini crossword construction."""


class CrosswordError(Exception):
    """Base exception for engine failures."""


class TemplateError(CrosswordError):
    """Raised when a grid template or its authored slots are malformed."""


class GridIncompleteError(CrosswordError):
    """Raised when the final grid is not fully lettered. Fatal to a run."""


class ClueProviderError(CrosswordError):
    """Raised by clue providers when a clue cannot be produced."""


class FeedError(CrosswordError):
    """Raised when a syndication feed cannot be fetched or parsed."""


class SlotPlacementError(CrosswordError):
    """Raised when a word cannot be written into a slot without a letter clash."""
