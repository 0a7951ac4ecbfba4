"""Parser and schema validator for wtgen-1 documents.

A wtgen-1 document is a JSON object describing a one-node program whose node
carries a spectral framepack::

    {"schema": "wtgen-1",
     "program": {"nodes": [
        {"op": "spectralData",
         "p": {"codec": "harm-noise-framepack-v1",
               "tableSize": 2048, "frames": 64,
               "harmonics": {"count": 128, "ampScale": 1.0},
               "noise": {"bands": 16, "dbRange": 60, "quantDb": 120,
                         "banding": {"loBin": 129, "hiBin": 1025}},
               "data": "<base64>"}}]}}

Unknown keys are ignored; optional keys take the defaults of ``CodecParams``.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any

from wtcodec.config import DEFAULT_MAX_PAYLOAD_BYTES
from wtcodec.errors import SchemaError
from wtcodec.format.encoding import decode_payload

logger = logging.getLogger(__name__)

SCHEMA_ID = "wtgen-1"
SPECTRAL_OP = "spectralData"
CODEC_ID = "harm-noise-framepack-v1"

_STAGE = "document"


@dataclass(frozen=True)
class CodecParams:
    """Codec parameters declared by the document.

    ``table_size`` and ``frames`` are cross-check hints against the binary
    header; ``harmonic_count`` and ``noise_bands`` are informational.
    """

    table_size: int | None = None
    frames: int | None = None
    harmonic_count: int | None = None
    amp_scale: float = 1.0
    noise_bands: int | None = None
    noise_db_range: float = 60.0
    noise_quant_db: float = 120.0
    lo_bin: int | None = None
    hi_bin: int | None = None


def parse_document(
    text: str | bytes,
    max_payload_bytes: int = DEFAULT_MAX_PAYLOAD_BYTES,
) -> tuple[CodecParams, bytes]:
    """Validate a wtgen-1 document and extract its codec parameters and payload.

    Validation happens in order: top-level object, ``schema``,
    ``program.nodes[0].op``, ``program.nodes[0].p.codec`` and finally a
    non-empty ``program.nodes[0].p.data`` string.

    Args:
        text: UTF-8 document text (``bytes`` are decoded as UTF-8).
        max_payload_bytes: Largest decoded payload accepted.

    Returns:
        Tuple of (params, payload) where payload is the base64-decoded data.

    Raises:
        SchemaError: If the document is not a wtgen-1 spectralData framepack.
        BadEncodingError: If the payload is not valid base64.
        TooLargeError: If the payload exceeds ``max_payload_bytes``.
    """
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as e:
            raise SchemaError(f"document is not UTF-8 text ({e})", stage=_STAGE) from e

    try:
        root = json.loads(text)
    except (ValueError, RecursionError) as e:
        # Over-long integer literals raise ValueError, deep nesting RecursionError
        raise SchemaError(f"invalid JSON ({e})", stage=_STAGE) from e

    if not isinstance(root, dict):
        raise SchemaError("top-level value is not an object", stage=_STAGE)

    schema = root.get("schema")
    if schema != SCHEMA_ID:
        raise SchemaError(f"unsupported schema {schema!r} (expected {SCHEMA_ID!r})", stage=_STAGE)

    program = root.get("program")
    if not isinstance(program, dict):
        raise SchemaError("missing program object", stage=_STAGE)

    nodes = program.get("nodes")
    if not isinstance(nodes, list) or not nodes:
        raise SchemaError("program.nodes is missing or empty", stage=_STAGE)

    node = nodes[0]
    if not isinstance(node, dict):
        raise SchemaError("program.nodes[0] is not an object", stage=_STAGE)

    op = node.get("op")
    if op != SPECTRAL_OP:
        raise SchemaError(
            f"unsupported program.nodes[0].op {op!r} (expected {SPECTRAL_OP!r})", stage=_STAGE
        )

    p = node.get("p")
    if not isinstance(p, dict):
        raise SchemaError("missing program.nodes[0].p", stage=_STAGE)

    codec = p.get("codec")
    if codec != CODEC_ID:
        raise SchemaError(f"unsupported codec {codec!r} (expected {CODEC_ID!r})", stage=_STAGE)

    data = p.get("data")
    if not isinstance(data, str) or not data.strip():
        raise SchemaError("program.nodes[0].p.data must be a non-empty string", stage=_STAGE)

    params = _extract_params(p)
    logger.debug("parsed %s document: %s", SCHEMA_ID, params)

    return params, decode_payload(data, max_bytes=max_payload_bytes)


def _extract_params(p: dict[str, Any]) -> CodecParams:
    harmonics = _get_object(p, "harmonics", "p")
    noise = _get_object(p, "noise", "p")
    banding = _get_object(noise, "banding", "p.noise")

    return CodecParams(
        table_size=_get_int(p, "tableSize", "p", minimum=1),
        frames=_get_int(p, "frames", "p", minimum=1),
        harmonic_count=_get_int(harmonics, "count", "p.harmonics", minimum=0),
        amp_scale=_get_float(harmonics, "ampScale", "p.harmonics", 1.0),
        noise_bands=_get_int(noise, "bands", "p.noise", minimum=0),
        noise_db_range=_get_float(noise, "dbRange", "p.noise", 60.0),
        noise_quant_db=_get_float(noise, "quantDb", "p.noise", 120.0),
        lo_bin=_get_int(banding, "loBin", "p.noise.banding", minimum=0),
        hi_bin=_get_int(banding, "hiBin", "p.noise.banding", minimum=0),
    )


def _get_object(obj: dict[str, Any], key: str, path: str) -> dict[str, Any]:
    value = obj.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise SchemaError(f"{path}.{key} must be an object", stage=_STAGE)
    return value


def _get_int(obj: dict[str, Any], key: str, path: str, minimum: int) -> int | None:
    value = obj.get(key)
    if value is None:
        return None
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise SchemaError(f"{path}.{key} must be an integer, got {value!r}", stage=_STAGE)
    if isinstance(value, float) and not value.is_integer():
        raise SchemaError(f"{path}.{key} must be an integer, got {value!r}", stage=_STAGE)
    if value < minimum:
        raise SchemaError(f"{path}.{key} must be >= {minimum}, got {value!r}", stage=_STAGE)
    return int(value)


def _get_float(obj: dict[str, Any], key: str, path: str, default: float) -> float:
    value = obj.get(key)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise SchemaError(f"{path}.{key} must be a number, got {value!r}", stage=_STAGE)
    return float(value)
