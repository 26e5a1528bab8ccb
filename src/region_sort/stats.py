import os
from collections import namedtuple

from bitstring import Bits, pack

from .errors import EmptyRegionError, FileOpenError, ShortIOError
from .region_file import read_header, region_span
from .sort_on_disk import block_size
from .utils import record_size, iter_records, trunc_div

# region_id, median, average, max, min
stats_format = "intne:32, intne:32, floatne:32, intne:32, intne:32"
stats_size = 20


def stats_filename(region_id):
    return "region-%d-stats.bin" % region_id


class RegionStats(namedtuple("RegionStats", ["region_id", "median", "average", "max", "min"])):
    """Summary of one sorted region. Serialized as a fixed 20 byte record."""

    __slots__ = ()

    def to_bytes(self):
        return pack(stats_format, *self).tobytes()

    @classmethod
    def from_bytes(cls, data):
        if len(data) != stats_size:
            raise ValueError("Stats record must be %d bytes, got %d" % (stats_size, len(data)))
        return cls(*Bits(bytes=data).unpack(stats_format))


def compute_stats(disk, region_id, block_len=block_size, mem=None):
    """
    Compute min, max, average and median of a region that is already
    sorted in ascending order.

    The region is streamed once for sum, min and max. The median is read
    directly from the middle of the region, which is only correct because
    the region is sorted; that is not checked here.
    """
    header = read_header(disk)
    begin, num_records = region_span(header, region_id)
    if num_records == 0:
        raise EmptyRegionError("Region %d holds no records" % region_id)
    if mem is None:
        mem = bytearray(block_len * record_size)

    total, lo, hi = scan_region(disk, begin, num_records, mem)
    median = region_median(disk, begin, num_records)
    return RegionStats(region_id, median, total / num_records, hi, lo)


def scan_region(disk, begin, num_records, mem):
    """Return (sum, min, max) of num_records records starting at byte begin."""
    length = len(mem) // record_size
    total = 0
    lo = hi = None
    consumed = 0
    while consumed < num_records:
        next_amount = min(length, num_records - consumed)
        disk.read(begin + consumed * record_size, mem, next_amount * record_size)
        for value in iter_records(mem, next_amount):
            total += value
            if lo is None:
                lo = hi = value
            elif value < lo:
                lo = value
            elif value > hi:
                hi = value
        consumed += next_amount
    return total, lo, hi


def region_median(disk, begin, num_records):
    mid = num_records // 2
    if num_records % 2:
        return disk.read_record(begin + mid * record_size)
    left = disk.read_record(begin + (mid - 1) * record_size)
    right = disk.read_record(begin + mid * record_size)
    # Even counts truncate toward zero, as C integer division does
    return trunc_div(left + right, 2)


def write_stats(stats, stream):
    data = stats.to_bytes()
    written = stream.write(data)
    if written is not None and written != len(data):
        raise ShortIOError("write", 0, len(data), written)
    stream.flush()


def save_stats(stats, directory="."):
    """Write stats to region-<id>-stats.bin in directory and return the path."""
    path = os.path.join(directory, stats_filename(stats.region_id))
    try:
        f = open(path, "wb")
    except OSError as e:
        raise FileOpenError("Cannot create stats file %s: %s"
                            % (path, e.strerror or e)) from e
    with f:
        write_stats(stats, f)
    return path
