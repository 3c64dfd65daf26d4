"""
Readers and writers for the two serialized vocabulary layouts.

``binary``: a 4-byte max-token-length header, then ``{float32 score,
int32 length, length bytes}`` records until the buffer ends.

``ranks``: one ``<base64 token> <rank>`` pair per non-empty line, the
layout of tiktoken's ``.tiktoken`` files.
"""

import base64
import binascii
import logging
import math
import struct
from enum import Enum

import tiktoken

from ._decorators import measure_time
from .errors import FormatError, ModelLoadError, VocabularyError
from .order import Granularity, ScoreOrder
from .types import Piece
from .vocab import Vocabulary

log = logging.getLogger(__name__)

_BYTEORDERS: dict[str, str] = {"little": "<", "big": ">", "native": "="}


class VocabFormat(str, Enum):
    """Supported serialized vocabulary layouts."""

    BINARY = "binary"
    RANKS = "ranks"

    @property
    def default_order(self) -> ScoreOrder:
        if self is VocabFormat.BINARY:
            return ScoreOrder.DESCENDING
        return ScoreOrder.ASCENDING

    @property
    def default_granularity(self) -> Granularity:
        if self is VocabFormat.BINARY:
            return Granularity.CHAR
        return Granularity.BYTE

    @classmethod
    def get(cls, name: str) -> "VocabFormat":
        """Get format by name (case-insensitive)."""
        try:
            return cls[name.upper()]
        except KeyError:
            raise FormatError(
                "unknown vocabulary format",
                invalid_name=name,
                available=[fmt.value for fmt in cls],
            )


def _struct_prefix(byteorder: str) -> str:
    try:
        return _BYTEORDERS[byteorder]
    except KeyError:
        raise FormatError(
            "unknown byte order",
            invalid_name=byteorder,
            available=list(_BYTEORDERS),
        )


def _decode_text(
    raw: bytes, granularity: Granularity, **where: int | str | None
) -> Piece:
    """Turn raw token bytes into the piece type ``granularity`` stores."""
    if granularity is Granularity.BYTE:
        return raw
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ModelLoadError(f"token is not valid utf-8: {raw!r}", **where) from e


def _encode_text(text: Piece) -> bytes:
    return text if isinstance(text, bytes) else text.encode("utf-8")


@measure_time
def parse_binary(
    data: bytes,
    *,
    order: ScoreOrder = ScoreOrder.DESCENDING,
    granularity: Granularity = Granularity.CHAR,
    byteorder: str = "little",
    model_path: str | None = None,
) -> Vocabulary:
    """
    Parse the fixed-binary layout into a frozen vocabulary.

    The header value (max token length) is read and otherwise ignored.

    :param data: Entire file contents.
    :param order: Merge preference for the resulting vocabulary.
    :param granularity: ``char`` decodes token bytes as UTF-8, ``byte`` keeps them raw.
    :param byteorder: ``"little"``, ``"big"`` or ``"native"``.
    :param model_path: Source path, only used in error messages.
    :raises ModelLoadError: On a truncated header or record, a negative
        length, or (for ``char``) a token that is not UTF-8.
    """
    prefix = _struct_prefix(byteorder)
    header = struct.Struct(prefix + "i")
    record = struct.Struct(prefix + "fi")

    if len(data) < header.size:
        raise ModelLoadError(
            "missing max token length header", model_path=model_path, offset=0
        )
    (max_token_length,) = header.unpack_from(data, 0)
    log.debug(f"binary vocab header: max token length {max_token_length}")

    vocab = Vocabulary(order=order, granularity=granularity)
    pos = header.size
    end = len(data)
    while pos < end:
        if end - pos < record.size:
            raise ModelLoadError(
                "truncated record header", model_path=model_path, offset=pos
            )
        score, length = record.unpack_from(data, pos)
        if not math.isfinite(score):
            raise ModelLoadError(
                f"non-finite score {score}", model_path=model_path, offset=pos
            )
        if length < 0:
            raise ModelLoadError(
                f"negative token length {length}", model_path=model_path, offset=pos
            )
        start = pos + record.size
        if end - start < length:
            raise ModelLoadError(
                f"token needs {length} bytes, {end - start} left",
                model_path=model_path,
                offset=pos,
            )
        raw = data[start : start + length]
        vocab.add_entry(
            _decode_text(raw, granularity, model_path=model_path, offset=pos), score
        )
        pos = start + length

    log.info(f"parsed {len(vocab)} entries from binary vocabulary")
    return vocab.freeze()


@measure_time
def parse_ranks(
    data: bytes | str,
    *,
    order: ScoreOrder = ScoreOrder.ASCENDING,
    granularity: Granularity = Granularity.BYTE,
    model_path: str | None = None,
) -> Vocabulary:
    """
    Parse ``<base64 token> <rank>`` lines into a frozen vocabulary.

    The rank becomes the entry's score. Blank lines are skipped.

    :raises ModelLoadError: On a line without exactly two fields, invalid
        base64, or a non-integer rank.
    """
    if isinstance(data, bytes):
        try:
            data = data.decode("ascii")
        except UnicodeDecodeError as e:
            raise ModelLoadError("rank file is not ascii", model_path=model_path) from e

    vocab = Vocabulary(order=order, granularity=granularity)
    n_misplaced = 0
    for line_no, line in enumerate(data.splitlines(), start=1):
        if not line.strip():
            continue
        fields = line.split()
        if len(fields) != 2:
            raise ModelLoadError(
                f"expected '<token> <rank>', got {line!r}",
                model_path=model_path,
                line_no=line_no,
            )
        b64_tok, rank_str = fields
        try:
            raw = base64.b64decode(b64_tok, validate=True)
        except binascii.Error as e:
            raise ModelLoadError(
                f"invalid base64 token {b64_tok!r}",
                model_path=model_path,
                line_no=line_no,
            ) from e
        # plain decimal digits only: int() would also take "+5" and "1_000"
        if not (rank_str.isascii() and rank_str.isdigit()):
            raise ModelLoadError(
                f"rank is not a number: {rank_str}",
                model_path=model_path,
                line_no=line_no,
            )
        rank = int(rank_str)
        idx = vocab.add_entry(
            _decode_text(raw, granularity, model_path=model_path, line_no=line_no),
            float(rank),
        )
        if idx != rank:
            n_misplaced += 1

    if n_misplaced:
        log.warning(
            f"{n_misplaced} ranks differ from their line position; "
            "token ids follow line position"
        )
    log.info(f"parsed {len(vocab)} entries from rank vocabulary")
    return vocab.freeze()


def dump_binary(
    vocab: Vocabulary,
    *,
    max_token_length: int | None = None,
    byteorder: str = "little",
) -> bytes:
    """Serialize ``vocab`` to the fixed-binary layout."""
    prefix = _struct_prefix(byteorder)
    record = struct.Struct(prefix + "fi")
    raws = [_encode_text(e.text) for e in vocab]
    if max_token_length is None:
        max_token_length = max((len(r) for r in raws), default=0)

    parts = [struct.pack(prefix + "i", max_token_length)]
    for entry, raw in zip(vocab, raws, strict=True):
        parts.append(record.pack(entry.score, len(raw)))
        parts.append(raw)
    return b"".join(parts)


def dump_ranks(vocab: Vocabulary) -> bytes:
    """
    Serialize ``vocab`` to ``<base64 token> <rank>`` lines.

    :raises VocabularyError: If a score is not a whole number, since the
        layout cannot hold it without changing merge order.
    """
    lines = []
    for idx, e in enumerate(vocab):
        if not float(e.score).is_integer():
            raise VocabularyError(
                f"score {e.score} is not an integer rank", invalid_tok=idx
            )
        b64_tok = base64.b64encode(_encode_text(e.text)).decode("ascii")
        lines.append(f"{b64_tok} {int(e.score)}\n")
    return "".join(lines).encode("ascii")


def from_tiktoken(name: str) -> tuple[Vocabulary, str]:
    """
    Build a vocabulary and split pattern from a named tiktoken encoding.

    Special tokens are not included: their ids are not contiguous with the
    mergeable ranks.

    :param name: Encoding name, e.g. ``"cl100k_base"``.
    :returns: An ascending, byte-granular vocabulary and the encoding's regex.
    """
    enc = tiktoken.get_encoding(name)
    ranks: dict[bytes, int] = enc._mergeable_ranks
    vocab = Vocabulary(order=ScoreOrder.ASCENDING, granularity=Granularity.BYTE)
    for raw, rank in sorted(ranks.items(), key=lambda x: x[1]):
        vocab.add_entry(raw, float(rank))
    log.info(f"loaded {len(vocab)} ranks from tiktoken encoding {name}")
    return vocab.freeze(), enc._pat_str


__all__ = [
    "VocabFormat",
    "parse_binary",
    "parse_ranks",
    "dump_binary",
    "dump_ranks",
    "from_tiktoken",
]
