"""Library entry points that open a data file, sort a region and summarize it."""

import logging
import time
from pathlib import Path

from .disk import Disk
from .errors import RegionSortError, SortStepError
from .sort_on_disk import block_size, max_temp, min_temp, sort_region
from .stats import compute_stats, save_stats, write_stats

logger = logging.getLogger(__name__)


def sort_file(data_path, region_id, min_value=min_temp, max_value=max_temp,
              block_len=block_size):
    """
    Sort region_id of the file at data_path in place.

    Callers must ensure no other process sorts the same file concurrently.
    """
    start = time.perf_counter()
    logger.info(
        "Sorting: file=%s, region=%d, range=[%d, %d], block=%d",
        Path(data_path).name, region_id, min_value, max_value, block_len,
    )
    with Disk.open(data_path, writable=True) as disk:
        histogram = sort_region(disk, region_id, min_value, max_value, block_len)
    logger.info(
        "Sort done: %d records, %d distinct values in %.3fs",
        histogram.total(), sum(1 for _ in histogram.runs()), time.perf_counter() - start,
    )
    return histogram


def summarize_file(data_path, region_id, min_value=min_temp, max_value=max_temp,
                   block_len=block_size):
    """
    Sort region_id in place, then compute its statistics.

    Statistics are only computed after a successful sort; any sort failure
    is raised as SortStepError chained to its cause.
    """
    start = time.perf_counter()
    with Disk.open(data_path, writable=True) as disk:
        try:
            sort_region(disk, region_id, min_value, max_value, block_len)
        except RegionSortError as e:
            raise SortStepError("Sort step failed: %s" % e) from e
        t_sort = time.perf_counter() - start

        stats = compute_stats(disk, region_id, block_len)
    t_total = time.perf_counter() - start
    logger.debug("Timing: sort=%.3fs, stats=%.3fs", t_sort, t_total - t_sort)
    logger.info(
        "Stats region %d: min=%d, max=%d, average=%.4f, median=%d",
        stats.region_id, stats.min, stats.max, stats.average, stats.median,
    )
    return stats


def emit_stats(stats, to_stdout=False, output_dir=".", stdout=None):
    """Send stats to the stdout byte stream or to region-<id>-stats.bin."""
    if to_stdout:
        write_stats(stats, stdout)
        return None
    path = save_stats(stats, output_dir)
    logger.info("Wrote %s", path)
    return path
