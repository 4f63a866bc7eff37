"""Domain exceptions for vocabulary, quiz and history operations."""


class VocabError(Exception):
    """Base exception for all vocabdash domain errors."""
    pass


class ValidationError(VocabError):
    """Caller supplied invalid input (blank required field, bad quiz count)."""
    pass


class NotFoundError(VocabError):
    """Referenced word does not exist for the current user."""
    pass


class NoCandidatesError(VocabError):
    """Quiz filters matched no words."""
    pass


class InvalidStateError(VocabError):
    """Quiz action is not allowed in the current session state."""
    pass


class StoreError(VocabError):
    """Database failed or is unreachable."""
    pass
