class RegionSortError(RuntimeError):
    pass


class UsageError(RegionSortError):
    pass


class FileOpenError(RegionSortError):
    pass


class HeaderReadError(RegionSortError):
    pass


class InvalidRegionError(RegionSortError):
    def __init__(self, region_id, region_count):
        self.region_id = region_id
        self.region_count = region_count
        super().__init__("Invalid region %d (file has regions 1..%d)"
                         % (region_id, region_count))


class ValueOutOfRangeError(RegionSortError):
    def __init__(self, value, index, region_id, min_value, max_value):
        self.value = value
        self.index = index
        self.region_id = region_id
        super().__init__("Value %d at record %d of region %s is outside [%d, %d]"
                         % (value, index, region_id, min_value, max_value))


class ShortIOError(RegionSortError):
    def __init__(self, op, begin, expected, actual):
        self.op = op
        self.begin = begin
        self.expected = expected
        self.actual = actual
        super().__init__("Short %s at offset %d: expected %d bytes, got %d"
                         % (op, begin, expected, actual))


class SortStepError(RegionSortError):
    """The sort that has to precede statistics did not complete."""


class EmptyRegionError(RegionSortError):
    pass
