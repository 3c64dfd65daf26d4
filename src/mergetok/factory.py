"""Factory functions for creating tokenizers."""

from pathlib import Path
from typing import Final, Literal

from .errors import FormatError, ModelLoadError
from . import formats
from .formats import VocabFormat
from .order import Granularity, ScoreOrder
from .pattern import TokenPattern
from .tokenizer import Tokenizer

FormatName = Literal["binary", "ranks"]
PatternName = Literal["gpt2", "cl100k", "llama3"]

_SUFFIX_FORMATS: Final[dict[str, VocabFormat]] = {
    ".bin": VocabFormat.BINARY,
    ".tiktoken": VocabFormat.RANKS,
    ".ranks": VocabFormat.RANKS,
    ".txt": VocabFormat.RANKS,
}


def list_formats() -> list[str]:
    """Return names of all supported vocabulary formats."""
    return [fmt.value for fmt in VocabFormat]


def get_format(name: FormatName) -> VocabFormat:
    return VocabFormat.get(name)


def list_patterns() -> list[str]:
    """Return names of all available built-in split patterns."""
    return [pat.name for pat in TokenPattern]


def get_pattern(name: PatternName) -> str:
    return TokenPattern.get(name)


def _detect_format(path: Path) -> VocabFormat:
    """Infer the vocabulary layout from the file suffix."""
    try:
        return _SUFFIX_FORMATS[path.suffix.lower()]
    except KeyError:
        raise FormatError(
            "cannot infer vocabulary format from suffix",
            invalid_name=path.suffix or "<none>",
            available=list(_SUFFIX_FORMATS),
        )


def load_tokenizer(
    path: str | Path,
    fmt: FormatName | VocabFormat | None = None,
    *,
    order: ScoreOrder | str | None = None,
    granularity: Granularity | str | None = None,
    byteorder: str = "little",
    pattern: TokenPattern | str | None = None,
) -> Tokenizer:
    """
    Load a tokenizer from a serialized vocabulary file.

    :param path: Vocabulary file.
    :param fmt: ``"binary"`` or ``"ranks"``; inferred from the suffix when omitted.
    :param order: Override the format's default merge preference.
    :param granularity: Override the format's default unit size.
    :param byteorder: Integer byte order of the binary layout.
    :param pattern: Optional ``TokenPattern`` member or raw regex; use
        :func:`get_pattern` to resolve a pattern by name.
    :raises ModelLoadError: If the file does not exist or is malformed.
    :raises FormatError: If the format cannot be determined.

    .. code-block:: python

        tok = load_tokenizer("tokenizer.bin")
        tok = load_tokenizer("cl100k_base.tiktoken", pattern=TokenPattern.CL100K)
    """
    path = Path(path)
    if not path.exists():
        raise ModelLoadError("vocabulary filepath does not exist", model_path=str(path))

    if fmt is None:
        fmt = _detect_format(path)
    elif isinstance(fmt, str):
        fmt = VocabFormat.get(fmt)
    if isinstance(order, str):
        order = ScoreOrder.get(order)
    if isinstance(granularity, str):
        granularity = Granularity.get(granularity)

    data = path.read_bytes()

    if fmt is VocabFormat.BINARY:
        vocab = formats.parse_binary(
            data,
            order=order or fmt.default_order,
            granularity=granularity or fmt.default_granularity,
            byteorder=byteorder,
            model_path=str(path),
        )
    else:
        vocab = formats.parse_ranks(
            data,
            order=order or fmt.default_order,
            granularity=granularity or fmt.default_granularity,
            model_path=str(path),
        )
    return Tokenizer(vocab, pattern)


__all__ = [
    "FormatName",
    "PatternName",
    "list_formats",
    "get_format",
    "list_patterns",
    "get_pattern",
    "load_tokenizer",
]
