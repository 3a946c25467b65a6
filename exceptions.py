# exceptions.py
"""
Custom exceptions for the matchmaker.

"No match can be generated right now" is not an error: proposers return
None for it. These exceptions cover bad caller input.
"""


class MatchmakerError(Exception):
    """Base exception for all matchmaker errors."""

    pass


class ValidationError(MatchmakerError):
    """Raised when input validation fails."""

    pass
