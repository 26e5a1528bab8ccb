from .errors import ValueOutOfRangeError
from .region_file import read_header, region_span
from .utils import record_size, record_min, record_max, iter_records, encode_record

# Closed range of valid readings
min_temp = -1000
max_temp = 1000
# Records moved per positioned read or write
block_size = 4096
# Widest value range a Histogram will allocate counts for
max_range_width = 1 << 24


def sort_region(disk, region_id, min_value=min_temp, max_value=max_temp,
                block_len=block_size, mem=None):
    """
    Sort one region of a data file in place using a counting sort.

    disk: object that supports .read and .write at explicit offsets
    region_id: 1-based index of the region to sort
    min_value, max_value: closed range every record must lie in
    block_len: records per positioned read or write
    mem: array-like staging buffer. If given, its size sets the block
         length instead of block_len.

    Two sequential passes: a read-only tally into a Histogram, then a
    rewrite of the region in ascending order. Range violations are raised
    during the tally, before anything is written. A failure during the
    rewrite leaves the region partially overwritten.

    Returns the Histogram of the region.
    """
    histogram = Histogram(min_value, max_value)
    if mem is None:
        if block_len < 1:
            raise ValueError("block_len must be positive, got %r" % (block_len,))
        mem = bytearray(block_len * record_size)
    if len(mem) < record_size:
        raise ValueError("Staging buffer must hold at least one record")

    header = read_header(disk)
    begin, num_records = region_span(header, region_id)

    tally_region(disk, begin, num_records, histogram, mem, region_id)
    rewrite_region(disk, begin, histogram, mem)
    return histogram


def tally_region(disk, begin, num_records, histogram, mem, region_id=None):
    """
    Count the num_records records starting at byte begin into histogram,
    reading len(mem) // record_size records at a time. Never writes.
    """
    length = len(mem) // record_size
    consumed = 0
    while consumed < num_records:
        next_amount = min(length, num_records - consumed)
        disk.read(begin + consumed * record_size, mem, next_amount * record_size)
        for i, value in enumerate(iter_records(mem, next_amount)):
            if value not in histogram:
                raise ValueOutOfRangeError(value, consumed + i, region_id,
                                           histogram.lo, histogram.hi)
            histogram.store(value)
        consumed += next_amount
    return histogram


def rewrite_region(disk, begin, histogram, mem):
    """
    Write the contents of histogram in ascending order starting at byte
    begin. Values are staged in mem and flushed one full block at a time.
    """
    length = len(mem) // record_size
    pos = begin
    staged = 0

    for value, count in histogram.runs():
        entry = encode_record(value)
        while count > 0:
            next_amount = min(count, length - staged)
            mem[staged * record_size:(staged + next_amount) * record_size] = entry * next_amount
            staged += next_amount
            count -= next_amount
            if staged == length:
                disk.write(pos, mem, staged * record_size)
                pos += staged * record_size
                staged = 0

    if staged:
        disk.write(pos, mem, staged * record_size)
        pos += staged * record_size

    assert pos == begin + histogram.total() * record_size
    return pos - begin


class Histogram:
    """
    Occurrence counts for every value in the closed range [lo, hi].

    counts[v - lo] holds how many times v was stored, so memory is
    proportional to the width of the range and not to the number of
    records counted. Iterating the counts in index order yields the
    values in ascending order.
    """

    def __init__(self, lo, hi):
        if lo > hi:
            raise ValueError("Empty value range [%d, %d]" % (lo, hi))
        if lo < record_min or hi > record_max:
            raise ValueError("Range [%d, %d] does not fit a 32 bit record" % (lo, hi))
        if hi - lo + 1 > max_range_width:
            raise ValueError("Range [%d, %d] is wider than %d values" % (lo, hi, max_range_width))
        self.lo = lo
        self.hi = hi
        self.counts = [0] * (hi - lo + 1)

    def __contains__(self, value):
        return self.lo <= value <= self.hi

    def store(self, value):
        self.counts[value - self.lo] += 1

    def count(self, value):
        return self.counts[value - self.lo]

    def total(self):
        return sum(self.counts)

    def runs(self):
        """Yield (value, count) for every value seen, smallest first."""
        lo = self.lo
        for i, c in enumerate(self.counts):
            if c:
                yield lo + i, c
