"""
Module for splitting a file into multipart upload ranges.
"""
from typing import List

from .exceptions import InvalidInput
from .models import PartRange


def plan_parts(file_size: int, part_size: int) -> List[PartRange]:
    """Split [0, file_size) into contiguous ranges of part_size bytes.

    The last range holds the remainder. Part numbers start at 1.

    Args:
        file_size: Total size of the file in bytes
        part_size: Size of each part in bytes

    Returns:
        Ordered list of PartRange objects

    Raises:
        InvalidInput: If file_size is zero or part_size is not positive
    """
    if file_size <= 0:
        raise InvalidInput(f"file size must be positive, got {file_size}")
    if part_size <= 0:
        raise InvalidInput(f"part size must be positive, got {part_size}")

    ranges = []
    offset = 0
    part_number = 1
    while offset < file_size:
        length = min(part_size, file_size - offset)
        ranges.append(PartRange(part_number=part_number, offset=offset, length=length))
        offset += length
        part_number += 1
    return ranges
