"""MergeTok: score- and rank-driven BPE tokenization."""

from .errors import (
    FormatError,
    HandleError,
    MergeTokError,
    ModelLoadError,
    PatternError,
    TokenIdError,
    VocabularyError,
)
from .factory import (
    get_format,
    get_pattern,
    list_formats,
    list_patterns,
    load_tokenizer,
)
from .formats import VocabFormat, dump_binary, dump_ranks, parse_binary, parse_ranks
from .order import Granularity, ScoreOrder
from .pattern import TokenPattern
from .tokenizer import Token, Tokenizer
from .vocab import VocabEntry, Vocabulary

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("mergetok")
except PackageNotFoundError:
    __version__ = "dev"

__all__ = [
    "Tokenizer",
    "Token",
    "Vocabulary",
    "VocabEntry",
    "VocabFormat",
    "ScoreOrder",
    "Granularity",
    "TokenPattern",
    "parse_binary",
    "parse_ranks",
    "dump_binary",
    "dump_ranks",
    "load_tokenizer",
    "get_format",
    "get_pattern",
    "list_formats",
    "list_patterns",
    "MergeTokError",
    "ModelLoadError",
    "VocabularyError",
    "TokenIdError",
    "HandleError",
    "FormatError",
    "PatternError",
]
