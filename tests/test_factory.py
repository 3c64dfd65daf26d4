"""Unit tests for file loading and configuration registries."""

import struct

import pytest

import mergetok as mt
from mergetok import Granularity, ScoreOrder, VocabFormat
from mergetok.errors import FormatError, ModelLoadError, PatternError


def _write_binary(path, entries):
    buf = struct.pack("<i", 4)
    for text, score in entries:
        raw = text.encode("utf-8")
        buf += struct.pack("<fi", score, len(raw)) + raw
    path.write_bytes(buf)
    return path


def test_registries():
    """Formats and patterns are listed by name."""
    assert mt.list_formats() == ["binary", "ranks"]
    assert mt.get_format("ranks") is VocabFormat.RANKS
    assert "CL100K" in mt.list_patterns()
    assert mt.get_pattern("cl100k") == mt.TokenPattern.CL100K.value
    with pytest.raises(PatternError):
        mt.get_pattern("gpt5")


def test_load_infers_binary(tmp_path):
    """A .bin file loads as a descending char vocabulary."""
    path = _write_binary(tmp_path / "tok.bin", [("a", 0.0), ("b", 0.0), ("ab", 1.0)])
    tok = mt.load_tokenizer(path)
    assert tok.vocab.order is ScoreOrder.DESCENDING
    assert tok.vocab.granularity is Granularity.CHAR
    assert tok.encode_ids("ab") == [2]


def test_explicit_format_and_overrides(tmp_path):
    """fmt, order and granularity can be given by name."""
    path = _write_binary(
        tmp_path / "tok.data", [("a", 0.0), ("b", 0.0), ("c", 0.0), ("ab", 1.0), ("bc", 0.0)]
    )
    tok = mt.load_tokenizer(path, "binary", order="ascending", granularity="byte")
    assert tok.vocab.granularity is Granularity.BYTE
    assert [t.text for t in tok.encode("abc")] == [b"a", b"bc"]


def test_unknown_suffix(tmp_path):
    path = tmp_path / "tok.json"
    path.write_text("{}")
    with pytest.raises(FormatError):
        mt.load_tokenizer(path)


def test_unknown_order_name(tmp_path):
    path = _write_binary(tmp_path / "tok.bin", [("a", 0.0)])
    with pytest.raises(FormatError):
        mt.load_tokenizer(path, order="sideways")


def test_missing_file(tmp_path):
    with pytest.raises(ModelLoadError):
        mt.load_tokenizer(tmp_path / "absent.bin")


def test_malformed_file_reports_path(tmp_path):
    """Parse errors carry the source path."""
    path = tmp_path / "tok.bin"
    path.write_bytes(struct.pack("<ifi", 4, 1.0, 10) + b"ab")
    with pytest.raises(ModelLoadError) as exc:
        mt.load_tokenizer(path)
    assert exc.value.model_path == str(path)
    assert exc.value.offset == 4
