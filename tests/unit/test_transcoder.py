from __future__ import annotations

import base64
import hashlib
import zlib

import pytest

from common.transcoder import CorruptDataError, from_text, to_text


@pytest.mark.parametrize(
    "data",
    [
        b"",
        b"a",
        b'{"#":[],"?":1}',
        bytes(range(256)) * 4,
        "Καλημέρα, 世界".encode("utf-8"),
    ],
)
def test_roundtrip(data: bytes):
    assert from_text(to_text(data)) == data


def test_output_is_url_safe():
    # Hash output barely compresses, so both '+' and '/' show up in plain base64
    data = b"".join(hashlib.sha256(str(i).encode()).digest() for i in range(64))
    text = to_text(data)
    assert "+" not in text
    assert "/" not in text
    standard = base64.b64encode(zlib.compress(data)).decode("ascii")
    assert text == standard.replace("+", "-").replace("/", "_")


def test_output_is_zlib_stream():
    text = to_text(b"hello hello hello")
    raw = base64.urlsafe_b64decode(text)
    assert zlib.decompress(raw) == b"hello hello hello"


def test_accepts_stripped_padding():
    for n in range(1, 12):
        data = b"x" * n
        assert from_text(to_text(data).rstrip("=")) == data


def test_compression_level_does_not_change_decoding():
    data = b"abcabcabc" * 50
    assert from_text(to_text(data, level=0)) == data
    assert from_text(to_text(data, level=9)) == data


@pytest.mark.parametrize("text", ["not-valid-base64!!", "ab cd", "é"])
def test_invalid_base64_raises(text: str):
    with pytest.raises(CorruptDataError):
        from_text(text)


def test_invalid_compressed_stream_raises():
    text = base64.urlsafe_b64encode(b"definitely not zlib").decode("ascii")
    with pytest.raises(CorruptDataError):
        from_text(text)


def test_truncated_stream_raises():
    raw = zlib.compress(b"some longer payload " * 20)
    text = base64.urlsafe_b64encode(raw[: len(raw) // 2]).decode("ascii")
    with pytest.raises(CorruptDataError):
        from_text(text)


def test_corrupt_data_error_is_value_error():
    with pytest.raises(ValueError):
        from_text("")
