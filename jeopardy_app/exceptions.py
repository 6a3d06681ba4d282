class JeopardyError(Exception):
    """Base exception for the jeopardy board."""
    pass


class BoardLoadError(JeopardyError):
    """Raised when a board could not be loaded from the trivia provider."""
    pass


class ProviderError(BoardLoadError):
    """Raised when the trivia provider is unreachable or answers with an error status."""
    pass


class MalformedResponseError(BoardLoadError):
    """Raised when the trivia provider returns a payload we cannot use."""
    pass


class InsufficientDataError(BoardLoadError):
    """Raised when the provider returns fewer categories or clues than requested."""
    pass


class InvalidCellError(JeopardyError):
    """Raised when a cell key is malformed or outside the board."""
    pass


class NoBoardError(JeopardyError):
    """Raised when a cell is clicked before any board was loaded."""
    pass


class LoadInProgressError(JeopardyError):
    """Raised when a new game is requested while another load is still running."""
    pass
