import sys

# Records are native-endian signed 32 bit integers
record_size = 4
record_min = -(1 << 31)
record_max = (1 << 31) - 1


def decode_record(bytes_):
    return int.from_bytes(bytes_, sys.byteorder, signed=True)


def encode_record(value):
    return int.to_bytes(value, record_size, sys.byteorder, signed=True)


def iter_records(mem, num_records):
    """
    Yield the first num_records records stored back to back in mem.
    mem: array-like holding at least num_records * record_size bytes
    """
    view = memoryview(mem)
    for pos in range(0, num_records * record_size, record_size):
        yield int.from_bytes(view[pos:pos + record_size], sys.byteorder, signed=True)


def encode_records(values):
    return b"".join(encode_record(v) for v in values)


def trunc_div(a, b):
    """Integer division rounding toward zero, unlike //."""
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q
