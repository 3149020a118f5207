import pytest

from config import HISTOGRAM_BINS
from histogram import AngleHistogram


def test_starts_with_eighteen_empty_bins():
    h = AngleHistogram()
    assert sorted(h.snapshot()) == list(range(0, 180, 10))
    assert len(h.snapshot()) == HISTOGRAM_BINS
    assert h.total() == 0
    assert h.max_count() == 1


@pytest.mark.parametrize("angle,key", [
    (0.0, 0),
    (0.65, 0),
    (9.999, 0),
    (10.0, 10),
    (-25.0, 20),
    (179.9, 170),
])
def test_record_uses_floor_of_magnitude(angle, key):
    h = AngleHistogram()
    assert h.record(angle) is True
    assert h.snapshot()[key] == 1
    assert h.total() == 1


@pytest.mark.parametrize("angle", [180.0, -185.0, 197.9])
def test_out_of_range_angles_are_dropped(angle):
    h = AngleHistogram()
    assert h.record(angle) is False
    assert h.total() == 0
    assert 180 not in h.snapshot()


def test_snapshot_is_a_copy():
    h = AngleHistogram()
    h.record(45.0)
    snap = h.snapshot()
    snap[40] = 99
    assert h.snapshot()[40] == 1


def test_reset_zeroes_every_bin():
    h = AngleHistogram()
    for angle in (1, 12, 33, 33, 120, -170):
        h.record(angle)
    assert h.total() == 6
    assert h.max_count() == 2
    h.reset()
    assert set(h.snapshot().values()) == {0}
    assert len(h.snapshot()) == HISTOGRAM_BINS


def test_counts_are_ordered_by_bin():
    h = AngleHistogram()
    h.record(15.0)
    h.record(171.0)
    counts = h.counts()
    assert counts[1] == 1
    assert counts[-1] == 1
    assert sum(counts) == 2
