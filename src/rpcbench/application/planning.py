from __future__ import annotations
from ..domain.models import BlockBatch, RangeBatch


def _check_range(start_block: int, end_block: int) -> None:
    if start_block < 0:
        raise ValueError(f"start_block must be >= 0, got {start_block}")
    if start_block > end_block:
        raise ValueError(f"start_block ({start_block}) must be <= end_block ({end_block})")


def create_blocks_list(start_block: int, end_block: int, chunk_size: int = 100) -> list[BlockBatch]:
    """Split [start_block, end_block] into batches of up to `chunk_size` block numbers.

    `chunk_size <= 1` yields one singleton batch per block.
    """
    _check_range(start_block, end_block)
    size = max(1, chunk_size)
    out: list[BlockBatch] = []
    b = start_block
    while b <= end_block:
        tb = min(end_block, b + size - 1)
        out.append(BlockBatch(tuple(range(b, tb + 1))))
        b = tb + 1
    return out


def plan_windows(start_block: int, end_block: int, width: int) -> list[tuple[int, int]]:
    _check_range(start_block, end_block)
    if width < 1:
        raise ValueError(f"window width must be >= 1, got {width}")
    out: list[tuple[int, int]] = []
    b = start_block
    while b <= end_block:
        fb, tb = b, min(end_block, b + width - 1)
        out.append((fb, tb))
        b = tb + 1
    return out


def create_range_batches(start_block: int, end_block: int, width: int, group_size: int = 1) -> list[RangeBatch]:
    """Windows of `width` blocks, grouped `group_size` at a time into one HTTP batch each."""
    windows = plan_windows(start_block, end_block, width)
    g = max(1, group_size)
    return [RangeBatch(tuple(windows[i:i + g])) for i in range(0, len(windows), g)]
