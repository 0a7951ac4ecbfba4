"""Error taxonomy for the wtgen-1 decoding pipeline.

Every failure raised by the codec is a ``CodecError`` carrying the kind of
failure and the pipeline stage that produced it. The message is prefixed with
the stage so that callers can surface it verbatim, e.g.
``"framepack: truncated reading noise"``.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Failure categories surfaced by ``WavetableBank.load_document``."""

    IO_ERROR = "IoError"
    SCHEMA_ERROR = "SchemaError"
    BAD_ENCODING = "BadEncoding"
    BAD_MAGIC = "BadMagic"
    BAD_HEADER = "BadHeader"
    SCHEMA_MISMATCH = "SchemaMismatch"
    TRUNCATED = "Truncated"
    TOO_LARGE = "TooLarge"
    NUMERICAL_ERROR = "NumericalError"


class CodecError(Exception):
    """Base class for every error raised while decoding a document."""

    kind: ErrorKind = ErrorKind.SCHEMA_ERROR

    def __init__(self, message: str, stage: str) -> None:
        self.stage = stage
        self.detail = message
        super().__init__(f"{stage}: {message}")


class DocumentIOError(CodecError):
    """The document could not be fetched or was empty."""

    kind = ErrorKind.IO_ERROR


class SchemaError(CodecError):
    """The document is not a wtgen-1 spectralData framepack."""

    kind = ErrorKind.SCHEMA_ERROR


class BadEncodingError(CodecError):
    """The embedded payload is not valid base64."""

    kind = ErrorKind.BAD_ENCODING


class BadMagicError(CodecError):
    """The framepack does not start with ``HNFPv1\\0``."""

    kind = ErrorKind.BAD_MAGIC


class BadHeaderError(CodecError):
    """The framepack header declares impossible dimensions."""

    kind = ErrorKind.BAD_HEADER


class SchemaMismatchError(CodecError):
    """The framepack header contradicts the document's hints."""

    kind = ErrorKind.SCHEMA_MISMATCH


class TruncatedError(CodecError):
    """The framepack ended before every frame record was read."""

    kind = ErrorKind.TRUNCATED


class TooLargeError(CodecError):
    """The payload exceeds the configured size limit."""

    kind = ErrorKind.TOO_LARGE


class NumericalError(CodecError):
    """Reconstruction produced a large imaginary residual or non-finite samples."""

    kind = ErrorKind.NUMERICAL_ERROR
