"""
Tinyshot exceptions
"""


class TinyshotError(Exception):
    """Base exception for Tinyshot"""
    pass


class InputTooLarge(TinyshotError):
    """HTML exceeds the processing ceiling; retrying the same input will fail again"""

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"HTML too large for processing: {size} chars (limit {limit})")


class ParseFailure(TinyshotError):
    """Structured DOM pass could not build a document (handled internally)"""
    pass


class SnapshotToolError(TinyshotError):
    """Browser snapshot tool call could not be compressed"""
    pass
