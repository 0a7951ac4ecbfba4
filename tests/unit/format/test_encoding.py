"""Unit tests for wtcodec.format.encoding module."""

import base64

import pytest

from wtcodec.errors import BadEncodingError, ErrorKind, TooLargeError
from wtcodec.format.encoding import decode_payload, decoded_length_upper_bound


class TestDecodePayload:
    """Tests for base64 payload decoding."""

    def test_padded_roundtrip(self):
        data = bytes(range(256))
        assert decode_payload(base64.b64encode(data).decode()) == data

    def test_unpadded_input(self):
        encoded = base64.b64encode(b"HNFPv1\x00").decode().rstrip("=")
        assert decode_payload(encoded) == b"HNFPv1\x00"

    def test_whitespace_is_ignored(self):
        encoded = base64.b64encode(b"wavetable payload").decode()
        wrapped = "\n".join(encoded[i : i + 8] for i in range(0, len(encoded), 8))
        assert decode_payload(f"  {wrapped}\n") == b"wavetable payload"

    @pytest.mark.parametrize("text", ["abc$", "SE5G*HYx", "A", "ab=c", "é012"])
    def test_invalid_characters(self, text):
        with pytest.raises(BadEncodingError) as exc_info:
            decode_payload(text)
        assert exc_info.value.kind == ErrorKind.BAD_ENCODING
        assert exc_info.value.stage == "base64"

    def test_too_large_before_decoding(self):
        encoded = base64.b64encode(b"\x00" * 300).decode()
        with pytest.raises(TooLargeError):
            decode_payload(encoded, max_bytes=100)

    def test_exact_limit_is_accepted(self):
        encoded = base64.b64encode(b"\x01" * 100).decode()
        assert len(decode_payload(encoded, max_bytes=100)) == 100

    def test_one_over_limit_is_rejected(self):
        encoded = base64.b64encode(b"\x01" * 101).decode()
        with pytest.raises(TooLargeError) as exc_info:
            decode_payload(encoded, max_bytes=100)
        assert exc_info.value.kind == ErrorKind.TOO_LARGE

    def test_upper_bound(self):
        assert decoded_length_upper_bound("") == 0
        assert decoded_length_upper_bound("AAAA") == 3
        assert decoded_length_upper_bound("AAAAA") == 6
