import json
import logging
import sys
from pathlib import Path
from typing import Annotated, Literal

import numpy as np
from cyclopts import App, Parameter
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from wtcodec.bank import WavetableBank
from wtcodec.cli.validators import validate_positive_integer, validate_slot_files
from wtcodec.config import HarmonicQuantization, LoaderConfig, NoiseQuantization
from wtcodec.errors import CodecError
from wtcodec.export import save_frames_as_wav
from wtcodec.format.document import parse_document
from wtcodec.format.framepack import read_header
from wtcodec.format.reader import ByteReader
from wtcodec.loader import decode_document, read_document
from wtcodec.validation import validate_wavetable

BitDepth = Literal[16, 24, 32]

app = App(name="wtcodec", help="Decode and inspect wtgen-1 spectral wavetable documents")
console = Console()


def print_error(message: str) -> None:
    """Print an error message in red."""
    console.print(message, style="bold red")


def print_success(message: str) -> None:
    """Print a success message in green."""
    console.print(message, style="bold green")


def print_warning(message: str) -> None:
    """Print a warning message in yellow."""
    console.print(message, style="bold yellow")


def configure_logging(verbose: bool) -> None:
    """Route library logging through rich."""
    root = logging.getLogger("wtcodec")
    root.handlers = [RichHandler(console=console, show_path=False)]
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)


def make_config(
    harmonic_quantization: HarmonicQuantization,
    noise_quantization: NoiseQuantization,
    max_payload_mb: int,
) -> LoaderConfig:
    return LoaderConfig(
        max_payload_bytes=max_payload_mb * 1024 * 1024,
        harmonic_quantization=harmonic_quantization,
        noise_quantization=noise_quantization,
    )


@app.command
def info(
    file: Path,
    harmonic_quantization: HarmonicQuantization = HarmonicQuantization.prescaled,
    noise_quantization: NoiseQuantization = NoiseQuantization.half_db,
    max_payload_mb: Annotated[int, Parameter(validator=validate_positive_integer)] = 64,
    verbose: bool = False,
) -> int:
    """
    Display the codec parameters and decoded frames of a wtgen-1 document.

    Parameters
    ----------
    file: Path
        The path to the .wtgen.json document
    harmonic_quantization: HarmonicQuantization
        Mapping of quantized harmonic amplitudes to bin magnitudes
    noise_quantization: NoiseQuantization
        Mapping of quantized noise-band levels to bin magnitudes
    max_payload_mb: int
        Largest decoded payload accepted, in MiB
    verbose: bool
        Log each decoding stage
    """
    configure_logging(verbose)
    config = make_config(harmonic_quantization, noise_quantization, max_payload_mb)

    try:
        text = read_document(file)
        params, payload = parse_document(text, max_payload_bytes=config.max_payload_bytes)
        header = read_header(ByteReader(payload), params)
        wavetable = decode_document(text, name=file.name, config=config)
    except CodecError as e:
        print_error(f"[{e.kind.value}] {e}")
        return 1

    console.print(f"Wavetable: {file}")
    console.print(f"  Payload: {len(payload):,} bytes")
    console.print(f"  Table size: {header.table_size}")
    console.print(f"  Frames: {header.frames}")
    console.print(f"  Harmonics per frame: {header.harmonics}")
    console.print(f"  Noise bands per frame: {header.noise_bands}")
    console.print(f"  Amp scale: {params.amp_scale}")
    console.print(f"  Noise dB range: {params.noise_db_range}")
    console.print(f"  Noise quant dB: {params.noise_quant_db}")
    if params.lo_bin is not None or params.hi_bin is not None:
        console.print(f"  Noise banding: loBin={params.lo_bin}, hiBin={params.hi_bin}")
    console.print(f"  Peak: {wavetable.peak:.4f}")

    table = Table(show_header=True, header_style="bold")
    table.add_column("Frame", justify="right")
    table.add_column("RMS", justify="right")
    table.add_column("Peak", justify="right")
    table.add_column("Mean", justify="right")
    for index, frame in enumerate(wavetable.samples):
        table.add_row(
            str(index),
            f"{np.sqrt(np.mean(frame.astype(np.float64) ** 2)):.3f}",
            f"{np.max(np.abs(frame)):.3f}",
            f"{np.mean(frame, dtype=np.float64):.2e}",
        )
    console.print(table)
    return 0


@app.command
def validate(
    file: Path,
    strict: bool = False,
    output_json: Annotated[bool, Parameter(name=["--json"])] = False,
    harmonic_quantization: HarmonicQuantization = HarmonicQuantization.prescaled,
    noise_quantization: NoiseQuantization = NoiseQuantization.half_db,
    max_payload_mb: Annotated[int, Parameter(validator=validate_positive_integer)] = 64,
) -> int:
    """
    Validate a wtgen-1 document by decoding it and checking the result.

    Parameters
    ----------
    file: Path
        The path to the .wtgen.json document to validate
    strict: bool
        Treat warnings as errors (default: False)
    output_json: bool
        Output results as JSON (default: False)
    harmonic_quantization: HarmonicQuantization
        Mapping of quantized harmonic amplitudes to bin magnitudes
    noise_quantization: NoiseQuantization
        Mapping of quantized noise-band levels to bin magnitudes
    max_payload_mb: int
        Largest decoded payload accepted, in MiB
    """
    configure_logging(False)
    config = make_config(harmonic_quantization, noise_quantization, max_payload_mb)
    results: dict[str, object] = {
        "file": str(file),
        "valid": True,
        "kind": None,
        "errors": [],
        "warnings": [],
    }

    try:
        wavetable = decode_document(read_document(file), name=file.name, config=config)
    except CodecError as e:
        results["valid"] = False
        results["kind"] = e.kind.value
        results["errors"] = [str(e)]
        if output_json:
            console.print(json.dumps(results, indent=2))
        else:
            print_error(f"[FAIL] {file}")
            console.print(f"  {e.kind.value}: {e}")
        return 1

    result = validate_wavetable(wavetable)
    errors = list(result.errors)
    warnings = list(result.warnings)
    if strict and warnings:
        errors.extend(f"Strict mode: {w}" for w in warnings)

    results["valid"] = not errors
    results["errors"] = errors
    results["warnings"] = warnings

    if output_json:
        console.print(json.dumps(results, indent=2))
        return 0 if results["valid"] else 1

    if results["valid"]:
        print_success(f"[PASS] {file}")
        console.print(f"  Frames: {wavetable.num_frames}")
        console.print(f"  Table size: {wavetable.table_size}")
        console.print(f"  Peak: {wavetable.peak:.4f}")
        for warning in warnings:
            print_warning(f"  [WARN] {warning}")
    else:
        print_error(f"[FAIL] {file}")
        for error in errors:
            console.print(f"  {error}")

    return 0 if results["valid"] else 1


@app.command
def export(
    file: Path,
    output_dir: Path | None = None,
    sample_rate: Annotated[int, Parameter(validator=validate_positive_integer)] = 44100,
    bit_depth: BitDepth = 16,
    harmonic_quantization: HarmonicQuantization = HarmonicQuantization.prescaled,
    noise_quantization: NoiseQuantization = NoiseQuantization.half_db,
) -> int:
    """
    Decode a wtgen-1 document and write each frame as a single-cycle .wav file.

    Parameters
    ----------
    file: Path
        The path to the .wtgen.json document
    output_dir: Path | None
        Destination directory (default: <document stem>_frames next to the document)
    sample_rate: int
        The sample rate for the .wav files in Hz
    bit_depth: BitDepth
        The bit depth for the .wav files
    harmonic_quantization: HarmonicQuantization
        Mapping of quantized harmonic amplitudes to bin magnitudes
    noise_quantization: NoiseQuantization
        Mapping of quantized noise-band levels to bin magnitudes
    """
    configure_logging(False)
    config = LoaderConfig(
        harmonic_quantization=harmonic_quantization,
        noise_quantization=noise_quantization,
    )

    try:
        wavetable = decode_document(read_document(file), name=file.name, config=config)
    except CodecError as e:
        print_error(f"[{e.kind.value}] {e}")
        return 1

    if output_dir is None:
        stem = file.name.split(".")[0] or file.stem
        output_dir = file.parent / f"{stem}_frames"

    written = save_frames_as_wav(output_dir, wavetable, sample_rate, bit_depth)
    print_success(f"Exported {len(written)} frames to {output_dir}")
    return 0


@app.command
def slots(
    files: Annotated[list[Path], Parameter(validator=validate_slot_files)],
    verbose: bool = False,
) -> int:
    """
    Load up to four documents into consecutive slots and show the slot bank.

    Parameters
    ----------
    files: list[Path]
        Documents to load into slots 0, 1, 2 and 3
    verbose: bool
        Log each decoding stage
    """
    configure_logging(verbose)
    bank = WavetableBank()

    failures = 0
    for slot, file in enumerate(files):
        result = bank.load_file(slot, file)
        if not result:
            failures += 1
            print_error(f"Slot {slot}: {file} [{result.kind.value if result.kind else ''}]")
            console.print(f"  {result.message}")

    table = Table(show_header=True, header_style="bold")
    table.add_column("Slot", justify="right")
    table.add_column("Name", justify="left")
    table.add_column("Frames", justify="right")
    table.add_column("Table Size", justify="right")
    for slot, wavetable in enumerate(bank.snapshot_slots()):
        if wavetable is None:
            table.add_row(str(slot), "[dim](empty)[/dim]", "-", "-")
        else:
            table.add_row(
                str(slot),
                bank.get_slot_name(slot),
                str(wavetable.num_frames),
                str(wavetable.table_size),
            )
    console.print(table)

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(app())
