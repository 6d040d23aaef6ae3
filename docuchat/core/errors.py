"""Exception types raised by the translation core."""


class DocuchatError(Exception):
    """Base class for all docuchat errors."""


class OCRError(DocuchatError):
    """Text extraction failed for one or more documents."""


class TranslationError(DocuchatError):
    """A translation backend failed to produce a translation."""


class GenerationError(DocuchatError):
    """The generative backend failed before producing any output."""


class PollingTimeoutError(DocuchatError):
    """An asynchronous job did not reach a terminal state in time."""

    def __init__(self, message: str, attempts: int):
        super().__init__(message)
        self.attempts = attempts


class HistoryStoreError(DocuchatError):
    """The chat history store could not be read or written."""
