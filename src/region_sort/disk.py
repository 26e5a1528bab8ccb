from .errors import FileOpenError, ShortIOError
from .utils import record_size, decode_record


class Disk():
    """
    Positioned read/write access to one open binary file.

    Every transfer names its own byte offset, so sequential block scans and
    single-record reads can be interleaved freely on the same handle. A
    transfer that moves fewer bytes than requested raises ShortIOError.

    f: file object supporting seek, read and write. Opening with
       buffering=0 makes write report the number of bytes actually written.
    """

    def __init__(self, f):
        self.file = f

    @classmethod
    def open(cls, filename, writable=False):
        mode = "r+b" if writable else "rb"
        try:
            f = open(filename, mode, buffering=0)
        except OSError as e:
            raise FileOpenError("Cannot open data file %s: %s"
                                % (filename, e.strerror or e)) from e
        return cls(f)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def close(self):
        self.file.close()

    def read(self, begin, memcache, length):
        assert length <= len(memcache)
        try:
            self.file.seek(begin)
            data = self.file.read(length)
        except OSError as e:
            raise ShortIOError("read", begin, length, 0) from e
        if len(data) != length:
            raise ShortIOError("read", begin, length, len(data))
        memcache[:length] = data

    def write(self, begin, memcache, length):
        assert length <= len(memcache)
        try:
            self.file.seek(begin)
            written = self.file.write(memoryview(memcache)[:length])
        except OSError as e:
            raise ShortIOError("write", begin, length, 0) from e
        if written != length:
            raise ShortIOError("write", begin, length, written or 0)

    def read_record(self, begin):
        mem = bytearray(record_size)
        self.read(begin, mem, record_size)
        return decode_record(mem)
