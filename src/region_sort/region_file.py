from collections import namedtuple

from .errors import HeaderReadError, InvalidRegionError, ShortIOError
from .utils import record_size, iter_records, encode_record, encode_records

# 4 bytes   - region_count
# 4 bytes   - records_per_region
# region_count * records_per_region records, region 1 first
header_size = 2 * record_size

Header = namedtuple("Header", ["region_count", "records_per_region"])


def read_header(disk):
    mem = bytearray(header_size)
    try:
        disk.read(0, mem, header_size)
    except ShortIOError as e:
        raise HeaderReadError("Cannot read file header: %s" % e) from e
    region_count, records_per_region = iter_records(mem, 2)
    if region_count < 0 or records_per_region < 0:
        raise HeaderReadError("Corrupt header: region_count=%d, records_per_region=%d"
                              % (region_count, records_per_region))
    return Header(region_count, records_per_region)


def region_offset(header, region_id):
    """Byte offset of the first record of region_id (1-based)."""
    if region_id < 1 or region_id > header.region_count:
        raise InvalidRegionError(region_id, header.region_count)
    return header_size + record_size * header.records_per_region * (region_id - 1)


def region_span(header, region_id):
    return region_offset(header, region_id), header.records_per_region


def write_sensor_file(filename, regions):
    """
    Create a data file holding regions, a list of equally sized lists of
    readings. The first list becomes region 1.
    """
    records_per_region = len(regions[0]) if regions else 0
    if any(len(r) != records_per_region for r in regions):
        raise ValueError("All regions must hold the same number of records")

    with open(filename, "wb") as f:
        total_written = 0
        total_written += f.write(encode_record(len(regions)))
        total_written += f.write(encode_record(records_per_region))
        for values in regions:
            total_written += f.write(encode_records(values))
    assert total_written == header_size + record_size * records_per_region * len(regions)
    return total_written
