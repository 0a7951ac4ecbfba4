"""Stress tests of slot publication under concurrent loading and reading."""

import threading

import numpy as np

from docbuilder import build_document, build_framepack, morph_framepack
from wtcodec import WavetableBank
from wtcodec.loader import decode_document

LOADS = 200
READERS = 4


def _documents():
    first = build_document(morph_framepack())
    second = build_document(build_framepack(16, [[4096, 0, 2048], [0, 4096, 0]], [[-60], [-40]]))
    return first, second


class TestPublication:
    """Readers only ever observe complete wavetables."""

    def test_readers_see_old_or_new(self):
        documents = _documents()
        expected = {decode_document(text).samples.tobytes() for text in documents}
        bank = WavetableBank()
        stop = threading.Event()
        errors = []

        def load():
            try:
                for i in range(LOADS):
                    result = bank.load_document(0, documents[i % 2], f"load {i}")
                    if not result:
                        errors.append(f"loader: {result.message}")
                        return
            finally:
                stop.set()

        def read():
            while not stop.is_set():
                wavetable = bank.snapshot_slots()[0]
                if wavetable is None:
                    continue
                if wavetable.samples.tobytes() not in expected:
                    errors.append("reader observed a partially initialized wavetable")
                    return
                if not np.all(np.isfinite(wavetable.samples)):
                    errors.append("reader observed non-finite samples")
                    return

        threads = [threading.Thread(target=load, daemon=True)]
        threads += [threading.Thread(target=read, daemon=True) for _ in range(READERS)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=60)

        assert not any(thread.is_alive() for thread in threads)
        assert errors == []

    def test_snapshot_outlives_replacement(self):
        first, second = _documents()
        bank = WavetableBank()
        bank.load_document(1, first, "first")
        snapshot = bank.snapshot_slots()
        before = snapshot[1].samples.copy()

        bank.load_document(1, second, "second")
        bank.clear_slot(1)

        np.testing.assert_array_equal(snapshot[1].samples, before)
        assert bank.get_slot(1) is None

    def test_concurrent_loads_into_separate_slots(self):
        documents = _documents()
        bank = WavetableBank()

        def load(slot):
            for _ in range(20):
                bank.load_document(slot, documents[slot % 2], f"slot {slot}")

        threads = [threading.Thread(target=load, args=(slot,)) for slot in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=60)

        snapshot = bank.snapshot_slots()
        for slot, wavetable in enumerate(snapshot):
            assert wavetable is not None
            assert bank.get_slot_name(slot) == f"slot {slot}"
            expected = decode_document(documents[slot % 2])
            assert wavetable.samples.tobytes() == expected.samples.tobytes()
