import random
import unittest

from region_sort.errors import InvalidRegionError, ShortIOError, ValueOutOfRangeError
from region_sort.region_file import header_size
from region_sort.sort_on_disk import Histogram, max_range_width, sort_region, tally_region
from region_sort.utils import encode_record, encode_records, iter_records, record_size


def make_file(regions):
    records_per_region = len(regions[0]) if regions else 0
    data = encode_record(len(regions)) + encode_record(records_per_region)
    for values in regions:
        data += encode_records(values)
    return bytearray(data)


class FakeDisk():
    """In-memory disk that records every positioned write."""

    def __init__(self, data):
        self.data = bytearray(data)
        self.writes = []
        self.fail_write_after = None

    def read(self, begin, memcache, length):
        chunk = self.data[begin:begin + length]
        if len(chunk) != length:
            raise ShortIOError("read", begin, length, len(chunk))
        memcache[:length] = chunk

    def write(self, begin, memcache, length):
        if self.fail_write_after is not None and len(self.writes) >= self.fail_write_after:
            raise ShortIOError("write", begin, length, 0)
        assert begin + length <= len(self.data)
        self.data[begin:begin + length] = memcache[:length]
        self.writes.append((begin, length))

    def region(self, region_id, records_per_region):
        begin = header_size + (region_id - 1) * records_per_region * record_size
        return list(iter_records(self.data[begin:], records_per_region))


class TestHistogram(unittest.TestCase):
    def test_runs_are_ascending(self):
        h = Histogram(-5, 5)
        for v in [3, -5, 3, 0, 5, -5, -5]:
            h.store(v)
        assert list(h.runs()) == [(-5, 3), (0, 1), (3, 2), (5, 1)]
        assert h.total() == 7
        assert h.count(3) == 2
        assert 5 in h and 6 not in h

    def test_rejects_bad_range(self):
        with self.assertRaises(ValueError):
            Histogram(10, 9)
        with self.assertRaises(ValueError):
            Histogram(0, 1 << 31)

    def test_rejects_range_too_wide(self):
        with self.assertRaises(ValueError):
            Histogram(-(1 << 31), (1 << 31) - 1)
        with self.assertRaises(ValueError):
            Histogram(0, max_range_width)

    def test_single_value_range(self):
        h = Histogram(7, 7)
        h.store(7)
        assert list(h.runs()) == [(7, 1)]


class TestSortRegion(unittest.TestCase):
    def test_sorts_only_target_region(self):
        regions = [[9, 8, 7], [5, -3, 0], [4, 2, 1]]
        disk = FakeDisk(make_file(regions))
        sort_region(disk, 2)
        assert disk.region(1, 3) == [9, 8, 7]
        assert disk.region(2, 3) == [-3, 0, 5]
        assert disk.region(3, 3) == [4, 2, 1]

    def test_small_blocks(self):
        random.seed(1)
        values = [random.randint(-1000, 1000) for _ in range(1000)]
        disk = FakeDisk(make_file([values, values]))
        histogram = sort_region(disk, 1, block_len=7)
        assert disk.region(1, 1000) == sorted(values)
        assert disk.region(2, 1000) == values
        assert histogram.total() == 1000
        # Every write but the last is a full block
        assert all(length == 7 * record_size for _, length in disk.writes[:-1])

    def test_idempotent(self):
        values = sorted([5, -3, 0, 5, 2, 1000, -1000])
        disk = FakeDisk(make_file([values]))
        before = bytes(disk.data)
        sort_region(disk, 1, block_len=3)
        assert bytes(disk.data) == before

    def test_permutations_converge(self):
        values = [4, 4, -2, 0, 17, -999, 3, 3, 3]
        random.seed(2)
        results = set()
        for _ in range(20):
            shuffled = values[:]
            random.shuffle(shuffled)
            disk = FakeDisk(make_file([shuffled]))
            before = sort_region(disk, 1, block_len=4)
            after = tally_region(disk, header_size, len(values), Histogram(-1000, 1000),
                                 bytearray(4 * record_size))
            assert before.counts == after.counts
            results.add(tuple(disk.region(1, len(values))))
        assert results == {tuple(sorted(values))}

    def test_extreme_values(self):
        values = [1000, -1000] * 50
        disk = FakeDisk(make_file([values]))
        sort_region(disk, 1, block_len=16)
        assert disk.region(1, 100) == [-1000] * 50 + [1000] * 50

    def test_runtime_range(self):
        values = [50000, -70000, 3]
        disk = FakeDisk(make_file([values]))
        sort_region(disk, 1, min_value=-100000, max_value=100000)
        assert disk.region(1, 3) == [-70000, 3, 50000]

    def test_out_of_range_makes_no_writes(self):
        values = [1, 2, 3, 4, 1001, 5]
        disk = FakeDisk(make_file([values]))
        before = bytes(disk.data)
        with self.assertRaises(ValueOutOfRangeError) as cm:
            sort_region(disk, 1, block_len=2)
        assert cm.exception.value == 1001
        assert cm.exception.index == 4
        assert cm.exception.region_id == 1
        assert disk.writes == []
        assert bytes(disk.data) == before

    def test_below_range_makes_no_writes(self):
        values = [7, -1001, 3]
        disk = FakeDisk(make_file([values]))
        before = bytes(disk.data)
        with self.assertRaises(ValueOutOfRangeError) as cm:
            sort_region(disk, 1)
        assert cm.exception.value == -1001
        assert cm.exception.index == 1
        assert disk.writes == []
        assert bytes(disk.data) == before

    def test_invalid_region(self):
        disk = FakeDisk(make_file([[1, 2], [3, 4]]))
        before = bytes(disk.data)
        for region_id in (0, 3, -1):
            with self.assertRaises(InvalidRegionError):
                sort_region(disk, region_id)
        assert bytes(disk.data) == before

    def test_empty_regions(self):
        disk = FakeDisk(make_file([[], []]))
        histogram = sort_region(disk, 2)
        assert histogram.total() == 0
        assert disk.writes == []

    def test_truncated_region(self):
        data = make_file([[3, 2, 1]])[:-record_size]
        disk = FakeDisk(data)
        with self.assertRaises(ShortIOError):
            sort_region(disk, 1)
        assert disk.writes == []

    def test_failed_rewrite_propagates(self):
        values = list(range(10, 0, -1))
        disk = FakeDisk(make_file([values]))
        disk.fail_write_after = 1
        with self.assertRaises(ShortIOError):
            sort_region(disk, 1, block_len=4)
        # First block was already rewritten
        assert disk.region(1, 10)[:4] == [1, 2, 3, 4]

    def test_supplied_buffer_sets_block(self):
        values = list(range(20, 0, -1))
        disk = FakeDisk(make_file([values]))
        sort_region(disk, 1, mem=bytearray(5 * record_size))
        assert disk.region(1, 20) == list(range(1, 21))
        assert len(disk.writes) == 4

    def test_bad_block_len(self):
        disk = FakeDisk(make_file([[1]]))
        with self.assertRaises(ValueError):
            sort_region(disk, 1, block_len=0)


if __name__ == '__main__':
    unittest.main()
