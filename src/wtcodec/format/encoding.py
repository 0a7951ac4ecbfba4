"""Base64 decoding of the embedded framepack payload."""

import base64
import binascii
import logging

from wtcodec.config import DEFAULT_MAX_PAYLOAD_BYTES
from wtcodec.errors import BadEncodingError, TooLargeError

logger = logging.getLogger(__name__)

_STAGE = "base64"


def decoded_length_upper_bound(text: str) -> int:
    """Upper bound on the decoded size of a base64 string."""
    return (len(text) + 3) // 4 * 3


def decode_payload(text: str, max_bytes: int = DEFAULT_MAX_PAYLOAD_BYTES) -> bytes:
    """Decode standard base64 (padding permitted) into a byte buffer.

    Surrounding and embedded whitespace is ignored, as line-wrapped base64 is
    common in hand-edited documents.

    Args:
        text: The base64 text taken from ``program.nodes[0].p.data``.
        max_bytes: Largest decoded payload accepted.

    Returns:
        The decoded payload.

    Raises:
        TooLargeError: If the payload would exceed ``max_bytes``.
        BadEncodingError: If the text contains characters outside the
            base64 alphabet or has invalid padding.
    """
    compact = "".join(text.split())

    # Reject before allocating: base64 expands 3 bytes into 4 characters.
    if decoded_length_upper_bound(compact) - 2 > max_bytes:
        raise TooLargeError(
            f"payload of ~{decoded_length_upper_bound(compact)} bytes exceeds limit of {max_bytes}",
            stage=_STAGE,
        )

    # Accept unpadded input by restoring the padding the encoder dropped.
    if len(compact) % 4:
        compact += "=" * (-len(compact) % 4)

    try:
        payload = base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as e:
        raise BadEncodingError(f"invalid base64 ({e})", stage=_STAGE) from e

    if len(payload) > max_bytes:
        raise TooLargeError(
            f"payload of {len(payload)} bytes exceeds limit of {max_bytes}", stage=_STAGE
        )

    logger.debug("decoded %d base64 characters into %d bytes", len(compact), len(payload))
    return payload
