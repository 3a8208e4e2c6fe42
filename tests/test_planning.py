import pytest

from rpcbench.application.planning import create_blocks_list, create_range_batches, plan_windows
from rpcbench.domain.models import BlockBatch, RangeBatch


def _flatten_blocks(units):
    return [b for u in units for b in u.blocks]


def _flatten_windows(units):
    out = []
    for u in units:
        for fb, tb in u.windows:
            out.extend(range(fb, tb + 1))
    return out


def test_chunked_mode_example():
    units = create_blocks_list(0, 9, 5)
    assert [list(u.blocks) for u in units] == [[0, 1, 2, 3, 4], [5, 6, 7, 8, 9]]


def test_per_block_mode_example():
    units = create_blocks_list(0, 9, 1)
    assert [list(u.blocks) for u in units] == [[i] for i in range(10)]


@pytest.mark.parametrize("chunk_size", [0, -3])
def test_non_positive_chunk_size_is_per_block(chunk_size):
    assert [list(u.blocks) for u in create_blocks_list(3, 5, chunk_size)] == [[3], [4], [5]]


def test_last_chunk_may_be_shorter():
    units = create_blocks_list(10, 21, 5)
    assert [u.block_count for u in units] == [5, 5, 2]
    assert units[-1] == BlockBatch((20, 21))


@pytest.mark.parametrize("start,end,size", [
    (0, 0, 1), (0, 0, 100), (7, 7, 3), (0, 99, 7), (5, 1004, 100), (123, 456, 1000), (0, 1, 2),
])
def test_blocks_cover_range_exactly_once(start, end, size):
    units = create_blocks_list(start, end, size)
    assert _flatten_blocks(units) == list(range(start, end + 1))
    if start == end or size > end - start:
        assert len(units) == 1


@pytest.mark.parametrize("start,end,width,group", [
    (0, 0, 1000, 2), (0, 2499, 1000, 2), (100, 100_099, 1000, 3), (5, 17, 4, 1), (0, 9, 100, 10),
])
def test_range_batches_cover_range_exactly_once(start, end, width, group):
    units = create_range_batches(start, end, width, group)
    assert _flatten_windows(units) == list(range(start, end + 1))
    windows = [w for u in units for w in u.windows]
    for (_, prev_to), (next_from, _) in zip(windows, windows[1:]):
        assert next_from == prev_to + 1


def test_range_window_grouping_example():
    units = create_range_batches(0, 2499, 1000, 2)
    assert units == [
        RangeBatch(((0, 999), (1000, 1999))),
        RangeBatch(((2000, 2499),)),
    ]


def test_window_wider_than_range_gives_one_window():
    assert plan_windows(10, 20, 1_000) == [(10, 20)]
    assert create_range_batches(10, 20, 1_000, 4) == [RangeBatch(((10, 20),))]


def test_partition_is_deterministic():
    assert create_blocks_list(0, 500, 33) == create_blocks_list(0, 500, 33)
    assert create_range_batches(0, 5000, 77, 3) == create_range_batches(0, 5000, 77, 3)


@pytest.mark.parametrize("start,end", [(5, 4), (-1, 3)])
def test_invalid_ranges_rejected(start, end):
    with pytest.raises(ValueError):
        create_blocks_list(start, end, 10)
    with pytest.raises(ValueError):
        create_range_batches(start, end, 10, 1)


def test_zero_window_width_rejected():
    with pytest.raises(ValueError):
        plan_windows(0, 10, 0)


def test_unit_labels():
    assert BlockBatch((7,)).label() == "block 7"
    assert BlockBatch((100, 101, 102)).label() == "blocks 100-102"
    assert RangeBatch(((0, 999), (1000, 1999))).label() == "ranges 0-1999 (2 windows)"
    assert RangeBatch(((0, 9),)).block_count == 10
