"""Custom exception hierarchy for mergetok errors."""

import regex as re

from .types import TokenId


class MergeTokError(Exception):
    """Base exception for all mergetok errors."""


class ModelLoadError(MergeTokError):
    """Raised when a serialized vocabulary cannot be parsed."""

    def __init__(
        self,
        message: str,
        *,
        model_path: str | None = None,
        offset: int | None = None,
        line_no: int | None = None,
    ) -> None:
        extra = " "
        if model_path:
            extra += f"(path: {model_path}) "
        # binary layout: byte offset of the bad record
        if offset is not None:
            extra += f"(offset: {offset}) "
        # rank layout: 1-based line number
        if line_no is not None:
            extra += f"(line: {line_no}) "
        super().__init__(message + extra)
        self.model_path = model_path
        self.offset = offset
        self.line_no = line_no


class VocabularyError(MergeTokError):
    """Raised when vocabulary operations fail."""

    def __init__(
        self,
        message: str,
        *,
        vocab_size: int | None = None,
        invalid_tok: TokenId | None = None,
    ) -> None:
        """Initialize with optional token and vocab_size that get appended to the message."""
        extra = " "
        if vocab_size is not None:
            extra += f"(vocab size: {vocab_size}) "
        if invalid_tok is not None:
            extra += f"(invalid token: {invalid_tok}) "
        super().__init__(message + extra)
        self.vocab_size = vocab_size
        self.invalid_tok = invalid_tok


class TokenIdError(VocabularyError, IndexError):
    """Raised when decoding a token id outside the vocabulary."""


class HandleError(MergeTokError, LookupError):
    """Raised when a sequence node is accessed through a handle that is not live."""

    def __init__(self, message: str, *, handle: int) -> None:
        super().__init__(f"{message} (handle: {handle})")
        self.handle = handle


class FormatError(MergeTokError):
    """Raised when a configuration name is not found in its registry."""

    def __init__(
        self,
        message: str,
        *,
        invalid_name: str | None = None,
        available: list[str] | None = None,
    ) -> None:
        extra = " "
        if invalid_name:
            extra += f"(available: {available}) (got {invalid_name}) "
        super().__init__(message + extra)
        self.invalid_name = invalid_name
        self.available = available


class PatternError(MergeTokError):
    """Raised when compiling a pre-tokenization regex pattern fails."""

    def __init__(
        self,
        message: str,
        *,
        pattern: str | None = None,
        regex_err: re.error | None = None,
    ) -> None:
        """
        Initialize PatternError with pattern details.

        :param message: Error message.
        :param pattern: The regex pattern that failed.
        :param regex_err: The underlying error from the regex library.
        """
        extra = " "
        if pattern:
            extra += f"(pattern: {pattern!r}) "
        if regex_err:
            extra += f"(reason: {regex_err}) "
        super().__init__(message + extra)
        self.pattern = pattern
        self.regex_err = regex_err
