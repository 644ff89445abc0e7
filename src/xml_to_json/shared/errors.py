"""Exception hierarchy for XML to JSON conversion.

Only structural failures are raised. Malformed markup and undecodable
fragments are absorbed by the reader and reported as diagnostics instead.
"""


class XMLToJSONError(Exception):
    """Base exception for all errors raised by this package."""


class ConversionError(XMLToJSONError):
    """Raised when a document cannot be converted at all."""


class DepthLimitExceededError(ConversionError):
    """Raised when element nesting goes deeper than the configured limit."""

    def __init__(self, depth: int, max_depth: int) -> None:
        super().__init__(
            f"Element nesting depth {depth} exceeds the maximum of {max_depth}"
        )
        self.depth = depth
        self.max_depth = max_depth
