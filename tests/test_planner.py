"""
Tests for splitting files into part ranges.
"""
import pytest

from multipart_uploader.exceptions import InvalidInput
from multipart_uploader.models import PartRange
from multipart_uploader.planner import plan_parts


def test_plan_example_file():
    """A 120MB file with 50MB parts splits into two full parts and a tail."""
    ranges = plan_parts(120_000_000, 50_000_000)

    assert ranges == [
        PartRange(1, 0, 50_000_000),
        PartRange(2, 50_000_000, 50_000_000),
        PartRange(3, 100_000_000, 20_000_000),
    ]


def test_plan_exact_multiple_has_no_empty_tail():
    ranges = plan_parts(100, 50)

    assert [(r.part_number, r.offset, r.length) for r in ranges] == [(1, 0, 50), (2, 50, 50)]


def test_plan_file_smaller_than_part():
    assert plan_parts(10, 50) == [PartRange(1, 0, 10)]


@pytest.mark.parametrize("file_size,part_size", [
    (1, 1),
    (1, 7),
    (7, 1),
    (99, 10),
    (100, 10),
    (101, 10),
    (1023, 256),
    (5_000_001, 1_000_000),
])
def test_plan_ranges_cover_file_exactly(file_size, part_size):
    """Ranges are contiguous, non-overlapping, dense from 1 and cover the file."""
    ranges = plan_parts(file_size, part_size)

    assert [r.part_number for r in ranges] == list(range(1, len(ranges) + 1))
    assert ranges[0].offset == 0
    assert ranges[-1].end == file_size
    for previous, current in zip(ranges, ranges[1:]):
        assert current.offset == previous.end
    assert all(r.length == part_size for r in ranges[:-1])
    assert 1 <= ranges[-1].length <= part_size
    assert sum(r.length for r in ranges) == file_size


@pytest.mark.parametrize("file_size,part_size", [
    (0, 50),
    (-1, 50),
    (100, 0),
    (100, -5),
])
def test_plan_rejects_invalid_input(file_size, part_size):
    with pytest.raises(InvalidInput):
        plan_parts(file_size, part_size)


def test_part_range_slice():
    data = b"0123456789"
    part = PartRange(part_number=2, offset=4, length=3)

    assert part.end == 7
    assert part.slice(data) == b"456"
