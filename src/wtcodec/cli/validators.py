from pathlib import Path

from wtcodec.registry import NUM_SLOTS


def validate_positive_integer(type_: object, value: int) -> None:
    """Validate that value is greater than zero."""
    if value <= 0:
        raise ValueError("Value must be a positive integer")


def validate_slot_files(type_: object, files: list[Path]) -> None:
    if not files:
        raise ValueError("At least one document is required")
    if len(files) > NUM_SLOTS:
        raise ValueError(f"At most {NUM_SLOTS} documents fit in the slot bank")
