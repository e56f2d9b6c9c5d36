"""Normalization manifest (bpm.csv) export.

Parsing Illumina BPM/EGT files is left to other tools; this module only takes
the per-locus records they yield and writes the bpm.csv layout used by
zCall and older Autocall versions.
"""

import csv
import gzip
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

MANIFEST_COLUMNS = [
    "Index",
    "Name",
    "Chromosome",
    "Position",
    "GenTrain Score",
    "SNP",
    "ILMN Strand",
    "Customer Strand",
    "NormID",
]

LOCUS_TABLE_COLUMNS = (
    "index",
    "name",
    "chrom",
    "position",
    "gentrain_score",
    "snp",
    "ilmn_strand",
    "customer_strand",
    "norm_id",
)


@dataclass(frozen=True)
class ManifestLocus:
    """One locus of a bead pool manifest with its cluster-file score."""

    index: int  # 0-based position in the manifest
    name: str
    chrom: str
    position: int
    gentrain_score: float
    snp: str
    ilmn_strand: str
    customer_strand: str
    norm_id: int

    def to_row(self) -> list[str]:
        return [
            str(self.index + 1),
            self.name,
            self.chrom,
            str(self.position),
            f"{self.gentrain_score:.4f}",
            self.snp,
            self.ilmn_strand,
            self.customer_strand,
            str(self.norm_id),
        ]


def read_locus_table(tsv_path: Path | str) -> list[ManifestLocus]:
    """Read loci from a tab-delimited table with LOCUS_TABLE_COLUMNS headers.

    Raises:
        FileNotFoundError: If the table does not exist
        ValueError: If a column is missing or a value is malformed
    """
    tsv_path = Path(tsv_path)
    if not tsv_path.exists():
        raise FileNotFoundError(f"Locus table not found: {tsv_path}")

    open_func = gzip.open if str(tsv_path).endswith(".gz") else open
    mode = "rt" if str(tsv_path).endswith(".gz") else "r"

    loci = []
    with open_func(tsv_path, mode) as f:
        reader = csv.DictReader(f, delimiter="\t")
        missing = [c for c in LOCUS_TABLE_COLUMNS if c not in (reader.fieldnames or [])]
        if missing:
            raise ValueError(f"Locus table missing columns: {', '.join(missing)}")

        for row in reader:
            try:
                loci.append(
                    ManifestLocus(
                        index=int(row["index"]),
                        name=row["name"],
                        chrom=row["chrom"],
                        position=int(row["position"]),
                        gentrain_score=float(row["gentrain_score"]),
                        snp=row["snp"],
                        ilmn_strand=row["ilmn_strand"],
                        customer_strand=row["customer_strand"],
                        norm_id=int(row["norm_id"]),
                    )
                )
            except (TypeError, ValueError) as e:
                raise ValueError(f"line {reader.line_num}: {e}") from e

    return loci


def write_normalization_manifest(loci: Iterable[ManifestLocus], output_path: Path | str) -> int:
    """Write loci as a bpm.csv file.

    Returns:
        Number of loci written
    """
    output_path = Path(output_path)
    count = 0
    with open(output_path, "w", newline="") as f:
        writer = csv.writer(f, lineterminator="\n")
        writer.writerow(MANIFEST_COLUMNS)
        for locus in loci:
            writer.writerow(locus.to_row())
            count += 1

    logger.info("Wrote %d loci to %s", count, output_path.name)
    return count
