"""Score- or rank-driven BPE tokenizer over a frozen vocabulary."""

import logging
from dataclasses import dataclass
from pathlib import Path

import regex as re

from . import formats
from ._bpe import merge_pieces
from ._sanitise import render_piece
from .formats import VocabFormat
from .order import Granularity, ScoreOrder
from .pattern import TokenPattern, compile_pattern
from .types import Piece, TokenId
from .vocab import Vocabulary

log = logging.getLogger(__name__)

# id emitted for a piece with no vocabulary entry
UNKNOWN_ID: TokenId = 0


@dataclass(frozen=True, slots=True)
class Token:
    """One encoded piece and its vocabulary id."""

    text: Piece
    id: TokenId


class Tokenizer:
    """
    Encode text by greedily merging adjacent units into vocabulary pieces.

    The vocabulary decides the merge preference (``ScoreOrder``) and the unit
    size (``Granularity``). Each :meth:`encode` call builds its own working
    state, so a single tokenizer can be used from several threads.

    Example:
       >>> vocab = Vocabulary.from_entries({"a": 1.0, "b": 1.0, "ab": 5.0})
       >>> Tokenizer(vocab).encode_ids("ab")
       [2]
    """

    def __init__(
        self, vocab: Vocabulary, pattern: TokenPattern | str | None = None
    ) -> None:
        """
        :param vocab: Vocabulary to encode against; frozen if it is not already.
        :param pattern: Optional ``TokenPattern`` member or raw pre-tokenization
            regex. Merges never cross a chunk boundary.
        """
        self.vocab = vocab if vocab.frozen else vocab.freeze()
        self.pat: str = ""
        self.compiled_pat: re.Pattern | None = None
        if pattern:
            # a plain str is always a regex, even if it spells a pattern name
            if isinstance(pattern, TokenPattern):
                pattern = pattern.value
            self.pat = pattern
            self.compiled_pat = compile_pattern(pattern)

    # constructors
    # -------------------------------------------------------------------------

    @classmethod
    def from_binary(
        cls,
        data: bytes,
        *,
        order: ScoreOrder | None = None,
        granularity: Granularity | None = None,
        byteorder: str = "little",
        pattern: TokenPattern | str | None = None,
    ) -> "Tokenizer":
        """Build a tokenizer from fixed-binary vocabulary bytes."""
        fmt = VocabFormat.BINARY
        vocab = formats.parse_binary(
            data,
            order=order or fmt.default_order,
            granularity=granularity or fmt.default_granularity,
            byteorder=byteorder,
        )
        return cls(vocab, pattern)

    @classmethod
    def from_ranks(
        cls,
        data: bytes | str,
        *,
        order: ScoreOrder | None = None,
        granularity: Granularity | None = None,
        pattern: TokenPattern | str | None = None,
    ) -> "Tokenizer":
        """Build a tokenizer from ``<base64> <rank>`` vocabulary lines."""
        fmt = VocabFormat.RANKS
        vocab = formats.parse_ranks(
            data,
            order=order or fmt.default_order,
            granularity=granularity or fmt.default_granularity,
        )
        return cls(vocab, pattern)

    @classmethod
    def from_tiktoken(cls, name: str) -> "Tokenizer":
        """Build a tokenizer from a named tiktoken encoding and its split pattern."""
        vocab, pattern = formats.from_tiktoken(name)
        return cls(vocab, pattern)

    # encoding
    # -------------------------------------------------------------------------

    def encode(
        self,
        text: str,
        bos: str | None = None,
        eos: str | None = None,
    ) -> list[Token]:
        """
        Encode text into (piece, id) tokens.

        ``bos`` and ``eos`` are emitted around the output when they are in
        the vocabulary and silently skipped otherwise. Pieces with no
        vocabulary entry get id 0.

        :param text: Text to encode.
        :param bos: Optional begin-of-sequence piece.
        :param eos: Optional end-of-sequence piece.
        :returns: Encoded token sequence.
        """
        out: list[Token] = []

        if bos is not None:
            self._emit_special(out, bos, "bos")

        if self.compiled_pat is None:
            chunks = [text] if text else []
        else:
            chunks = [m.group(0) for m in self.compiled_pat.finditer(text)]

        granularity = self.vocab.granularity
        for chunk in chunks:
            result = merge_pieces(granularity.split(chunk), self.vocab)
            for piece in result.pieces:
                tok_id = self.vocab.lookup(piece)
                out.append(Token(piece, UNKNOWN_ID if tok_id is None else tok_id))

        if eos is not None:
            self._emit_special(out, eos, "eos")

        return out

    def encode_ids(
        self,
        text: str,
        bos: str | None = None,
        eos: str | None = None,
    ) -> list[TokenId]:
        """Encode text and return only the token ids."""
        return [tok.id for tok in self.encode(text, bos=bos, eos=eos)]

    def _emit_special(self, out: list[Token], text: str, kind: str) -> None:
        piece = self._as_piece(text)
        tok_id = self.vocab.lookup(piece)
        if tok_id is None:
            log.debug(f"{kind} {text!r} not in vocabulary, skipped")
            return
        out.append(Token(piece, tok_id))

    def _as_piece(self, text: str) -> Piece:
        if self.vocab.granularity is Granularity.BYTE:
            return text.encode("utf-8")
        return text

    # decoding
    # -------------------------------------------------------------------------

    def decode(self, tok_id: TokenId) -> Piece:
        """
        Return the vocabulary piece for ``tok_id``.

        :raises TokenIdError: If ``tok_id`` is out of range.
        """
        return self.vocab.entry(tok_id).text

    def decode_ids(self, ids: list[TokenId]) -> str:
        """
        Decode a sequence of ids back into text.

        Byte-granular pieces are joined and decoded as UTF-8 with invalid
        sequences replaced.
        """
        return self.vocab.granularity.join([self.decode(i) for i in ids])

    def token_to_id(self, text: Piece) -> TokenId | None:
        return self.vocab.lookup(text)

    def id_to_token(self, tok_id: TokenId) -> Piece:
        return self.decode(tok_id)

    def vocab_size(self) -> int:
        """Return the number of entries in the vocabulary."""
        return len(self.vocab)

    # serialization
    # -------------------------------------------------------------------------

    def save(self, path: str | Path, fmt: VocabFormat | str | None = None) -> None:
        """
        Write the vocabulary to ``path`` in the given layout.

        Without ``fmt``, ascending vocabularies are written as ``ranks`` and
        descending ones as ``binary`` so that reloading keeps their order.

        :raises FormatError: If ``fmt`` is not a known format name.
        """
        if fmt is None:
            fmt = (
                VocabFormat.RANKS
                if self.vocab.order is ScoreOrder.ASCENDING
                else VocabFormat.BINARY
            )
        elif isinstance(fmt, str):
            fmt = VocabFormat.get(fmt)
        if fmt.default_order is not self.vocab.order:
            log.warning(
                f"saving a {self.vocab.order.value} vocabulary as {fmt.value}; "
                f"reload with order={self.vocab.order.value!r} to keep merge priority"
            )
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        if fmt is VocabFormat.BINARY:
            data = formats.dump_binary(self.vocab)
        else:
            data = formats.dump_ranks(self.vocab)
        path.write_bytes(data)
        log.info(f"saved {len(self.vocab)} entries to {path} ({fmt.value})")

    def save_vocab(self, path: str | Path) -> None:
        """Write a human-readable ``[id] piece score`` listing."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8", newline="\n") as f:
            for idx, entry in enumerate(self.vocab):
                line = f"[{idx}] [{render_piece(entry.text)}] {entry.score:g}"
                # later duplicates are never produced by encode
                if self.vocab.lookup(entry.text) != idx:
                    line += " (shadowed)"
                f.write(line + "\n")
        log.info(f"vocabulary listing written to {path}")

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.vocab!r}, pattern={bool(self.pat)})"

