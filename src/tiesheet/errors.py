"""
Exceptions raised by the bracket engine.

An empty team list is not an error: build and reseed return None instead.
"""


class BracketError(ValueError):
    """Base class for bracket engine failures."""


class InvalidSelectionError(BracketError):
    """A winner selection points outside the bracket or at an empty slot."""


class StructuralMismatchError(BracketError):
    """A bracket's round/match shape does not fit the requested operation."""


class ConfigurationError(BracketError):
    """Bracket settings contain an unknown key or an invalid value."""
