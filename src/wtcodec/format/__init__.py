"""wtgen-1 container format.

This subpackage parses the textual wtgen-1 document and decodes the HNFPv1
framepack it carries:

    +----------------------------------------+
    | wtgen-1 document (JSON)                |
    |   schema / program.nodes[0].op / codec |
    |   codec parameters                     |
    |   data: base64 --------------------+   |
    +------------------------------------|---+
                                         v
    +----------------------------------------+
    | HNFPv1 framepack (little-endian)       |
    |   magic, N, F, H, B                    |
    |   F x (H harmonics, B bands, 3 rsvd)   |
    +----------------------------------------+
"""

from wtcodec.format.document import CODEC_ID, SCHEMA_ID, SPECTRAL_OP, CodecParams, parse_document
from wtcodec.format.encoding import decode_payload
from wtcodec.format.framepack import (
    MAGIC,
    FramepackHeader,
    FrameRecord,
    dequantize_harmonics,
    dequantize_noise,
    iter_frames,
    read_header,
)
from wtcodec.format.reader import ByteReader

__all__ = [
    # Document
    "SCHEMA_ID",
    "SPECTRAL_OP",
    "CODEC_ID",
    "CodecParams",
    "parse_document",
    "decode_payload",
    # Framepack
    "MAGIC",
    "ByteReader",
    "FramepackHeader",
    "FrameRecord",
    "read_header",
    "iter_frames",
    "dequantize_harmonics",
    "dequantize_noise",
]
