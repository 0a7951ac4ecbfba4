"""Test-only encoder for HNFPv1 framepacks and wtgen-1 documents."""

import base64
import json
import struct
from collections.abc import Sequence
from typing import Any

MAGIC = b"HNFPv1\x00"


def build_framepack(
    table_size: int,
    harmonics: Sequence[Sequence[int]],
    noise: Sequence[Sequence[int]] | None = None,
    reserved: tuple[int, int, int] = (0, 0, 0),
    frames: int | None = None,
    magic: bytes = MAGIC,
) -> bytes:
    """Encode frames of quantized harmonic and noise values.

    Args:
        table_size: Header N.
        harmonics: One sequence of uint16 harmonic values per frame.
        noise: One sequence of int16 band values per frame (default: no bands).
        reserved: The three reserved words written after each frame.
        frames: Header F override (defaults to ``len(harmonics)``).
        magic: Magic bytes override.
    """
    if noise is None:
        noise = [[] for _ in harmonics]
    num_harmonics = len(harmonics[0]) if harmonics else 0
    num_bands = len(noise[0]) if noise else 0
    declared_frames = len(harmonics) if frames is None else frames

    out = bytearray(magic)
    out += struct.pack("<4H", table_size, declared_frames, num_harmonics, num_bands)
    for frame_harmonics, frame_noise in zip(harmonics, noise, strict=True):
        out += struct.pack(f"<{len(frame_harmonics)}H", *frame_harmonics)
        out += struct.pack(f"<{len(frame_noise)}h", *frame_noise)
        out += struct.pack("<3H", *reserved)
    return bytes(out)


def build_node_params(payload: bytes, **overrides: Any) -> dict[str, Any]:
    params: dict[str, Any] = {
        "codec": "harm-noise-framepack-v1",
        "data": base64.b64encode(payload).decode("ascii"),
    }
    params.update(overrides)
    return params


def build_document(
    payload: bytes,
    schema: str = "wtgen-1",
    op: str = "spectralData",
    **params: Any,
) -> str:
    """Wrap a framepack in a wtgen-1 document.

    Extra keyword arguments become keys of ``program.nodes[0].p``.
    """
    return json.dumps(
        {
            "schema": schema,
            "program": {"nodes": [{"op": op, "p": build_node_params(payload, **params)}]},
        }
    )


def minimal_framepack() -> bytes:
    """N=2, F=1, H=1, B=0 with a single harmonic at q=4096."""
    return build_framepack(2, [[4096]])


def morph_framepack() -> bytes:
    """N=8, F=3, H=3, B=2; frame f boosts harmonic f."""
    harmonics = [
        [4096, 256, 128],
        [256, 4096, 128],
        [128, 256, 4096],
    ]
    noise = [[-120, -120], [-120, -120], [-120, -120]]
    return build_framepack(8, harmonics, noise)
