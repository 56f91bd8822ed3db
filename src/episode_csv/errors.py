"""Exceptions raised by the episode CSV engine.

Structural problems (padding, truncation, repair data loss) are never raised;
they are returned as ParseWarning lists.  Only conditions that make the
requested operation impossible end up here.
"""


class EpisodeCsvError(Exception):
    """Base class for all engine errors."""


class ColumnNotFoundError(EpisodeCsvError):
    """No header matched any of the candidate names.

    This is a configuration problem for the caller to surface to the user;
    retrying with the same headers and candidates cannot succeed.
    """

    def __init__(self, headers, candidates):
        self.headers = list(headers)
        self.candidates = list(candidates)
        super().__init__(f"No episode column found in headers {self.headers} (searched {self.candidates})")


class MalformedInputError(EpisodeCsvError):
    """The raw bytes could not be decoded as UTF-8 text."""
