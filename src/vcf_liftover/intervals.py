"""Loading target intervals produced by an external coordinate mapper.

Expected TSV format (header required, gzip allowed):
source_contig    source_start    target_contig    target_start    target_end    strand

A target_contig of "." marks a source site that could not be mapped.
"""

import csv
import gzip
import logging
from pathlib import Path

from .exceptions import IntervalFileError
from .models import Strand, TargetInterval

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = (
    "source_contig",
    "source_start",
    "target_contig",
    "target_start",
    "target_end",
    "strand",
)

IntervalLookup = dict[tuple[str, int], TargetInterval | None]


def parse_interval_row(row: dict[str, str], line_number: int) -> TargetInterval | None:
    """Parse one row of the interval table; None for an unmapped site."""
    if row["target_contig"] in (".", ""):
        return None

    try:
        start = int(row["target_start"])
        end = int(row["target_end"])
        strand = Strand.parse(row["strand"])
    except (TypeError, ValueError) as e:
        raise IntervalFileError(str(e), line_number) from e

    if start < 1 or end < start:
        raise IntervalFileError(f"invalid target range {start}-{end}", line_number)

    return TargetInterval(row["target_contig"], start, end, strand)


def load_intervals(tsv_path: Path | str) -> IntervalLookup:
    """Load a target interval table into a (source contig, source start) lookup.

    Raises:
        FileNotFoundError: If the table does not exist
        IntervalFileError: If a column is missing or a row is malformed
    """
    tsv_path = Path(tsv_path)
    if not tsv_path.exists():
        raise FileNotFoundError(f"Interval file not found: {tsv_path}")

    open_func = gzip.open if str(tsv_path).endswith(".gz") else open
    mode = "rt" if str(tsv_path).endswith(".gz") else "r"

    lookup: IntervalLookup = {}
    with open_func(tsv_path, mode) as f:
        reader = csv.DictReader(f, delimiter="\t")

        header = [c.lstrip("#") for c in reader.fieldnames or []]
        missing = [c for c in REQUIRED_COLUMNS if c not in header]
        if missing:
            raise IntervalFileError(f"missing columns: {', '.join(missing)}", 1)
        reader.fieldnames = header

        for row in reader:
            line_number = reader.line_num
            if row["source_contig"].startswith("#"):
                continue
            try:
                key = (row["source_contig"], int(row["source_start"]))
            except (TypeError, ValueError) as e:
                raise IntervalFileError(str(e), line_number) from e
            if key in lookup:
                logger.warning("Duplicate interval for %s:%d, keeping the last one", *key)
            lookup[key] = parse_interval_row(row, line_number)

    logger.info("Loaded %d target intervals from %s", len(lookup), tsv_path.name)
    return lookup
