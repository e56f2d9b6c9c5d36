"""Reading VCF records with cyvcf2 and writing them back as VCF text."""

import gzip
import logging
import math
from collections.abc import Iterator, Sequence
from pathlib import Path
from typing import Any, TextIO

from cyvcf2 import VCF

from .liftover import ORIGINAL_CONTIG, ORIGINAL_START
from .models import NO_CALL, Allele, Genotype, VariantRecord
from .pipeline import FAILED_REASON
from .swap import SWAPPED_ALLELES

logger = logging.getLogger(__name__)

INT32_MISSING = -2147483648
INT32_VECTOR_END = -2147483647

PREFERRED_FORMAT_ORDER = ["GT", "AD", "DP", "GQ", "PL"]

LIFTOVER_INFO_LINES = [
    f'##INFO=<ID={ORIGINAL_CONTIG},Number=1,Type=String,'
    'Description="The name of the source contig/chromosome prior to liftover.">',
    f'##INFO=<ID={ORIGINAL_START},Number=1,Type=Integer,'
    'Description="The position of the variant on the source contig prior to liftover.">',
    f'##INFO=<ID={SWAPPED_ALLELES},Number=0,Type=Flag,'
    'Description="The REF and the ALT alleles have been swapped in liftover due to changes '
    'in the reference. Only the GT, AD and PL genotype fields have been modified.">',
]

REJECT_INFO_LINES = [
    f'##INFO=<ID={FAILED_REASON},Number=1,Type=String,'
    'Description="Why the variant could not be lifted.">',
]


def _to_python(value: Any) -> Any:
    """Convert a numpy scalar (or bytes) from cyvcf2 into a plain value."""
    if isinstance(value, bytes):
        value = value.decode()
    if isinstance(value, str):
        return value if value not in ("", ".") else None
    if hasattr(value, "item"):
        value = value.item()
    if isinstance(value, float) and math.isnan(value):
        return None
    if value == INT32_MISSING:
        return None
    return value


def _sample_values(row: Any, trim_missing: bool = True) -> list | None:
    """Convert one sample's row of a FORMAT array, dropping vector-end padding.

    Missing entries become None. Per-allele fields (AD, PL) are read with
    trim_missing=False so every entry keeps its allele position.
    """
    if isinstance(row, str | bytes):
        value = _to_python(row)
        return None if value is None else [value]

    values = []
    for raw in row:
        if not isinstance(raw, str | bytes) and raw == INT32_VECTOR_END:
            break
        values.append(_to_python(raw))

    while trim_missing and values and values[-1] is None:
        values.pop()
    if all(v is None for v in values):
        return None
    return values


def _int_tuple(values: list | None) -> tuple[int | None, ...] | None:
    if values is None:
        return None
    return tuple(int(v) if v is not None else None for v in values)


def variant_from_cyvcf2(variant, samples: Sequence[str]) -> VariantRecord:
    """Convert a cyvcf2 Variant into a VariantRecord."""
    alleles = (Allele(variant.REF, is_reference=True),) + tuple(
        Allele(alt) for alt in variant.ALT
    )

    format_keys = [k for k in (variant.FORMAT or []) if k != "GT"]
    format_arrays = {}
    for key in format_keys:
        try:
            format_arrays[key] = variant.format(key)
        except KeyError:
            logger.debug("FORMAT/%s missing at %s:%d", key, variant.CHROM, variant.POS)

    genotypes = []
    gt_array = variant.genotypes if "GT" in (variant.FORMAT or []) else None
    for idx, sample in enumerate(samples):
        called: tuple[Allele, ...] = ()
        phased = False
        if gt_array:
            gt = gt_array[idx]
            phased = bool(gt[-1])
            called = tuple(
                NO_CALL if allele_idx < 0 else alleles[allele_idx]
                for allele_idx in gt[:-1]
                if allele_idx >= -1
            )

        fields = {}
        ad = pl = None
        for key, array in format_arrays.items():
            if key in ("AD", "PL"):
                values = _int_tuple(_sample_values(array[idx], trim_missing=False))
                if key == "AD":
                    ad = values
                else:
                    pl = values
                continue
            values = _sample_values(array[idx])
            if values is not None:
                fields[key] = values[0] if len(values) == 1 else values

        genotypes.append(
            Genotype(sample=sample, alleles=called, phased=phased, ad=ad, pl=pl, fields=fields)
        )

    filters = tuple(f for f in (variant.FILTERS or []) if f != ".")

    return VariantRecord(
        contig=variant.CHROM,
        start=variant.POS,
        end=variant.end,
        alleles=alleles,
        genotypes=tuple(genotypes),
        filters=filters,
        qual=variant.QUAL,
        info=dict(variant.INFO),
        id=variant.ID,
    )


class VCFReader:
    """Stream VariantRecords out of a VCF/BCF file."""

    def __init__(self, vcf_path: Path | str):
        self.vcf_path = Path(vcf_path)
        self._vcf = VCF(str(self.vcf_path))
        self.samples: list[str] = list(self._vcf.samples)

    @property
    def raw_header(self) -> str:
        return self._vcf.raw_header

    def __iter__(self) -> Iterator[VariantRecord]:
        for variant in self._vcf:
            yield variant_from_cyvcf2(variant, self.samples)

    def close(self) -> None:
        self._vcf.close()

    def __enter__(self) -> "VCFReader":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def format_number(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, float):
        return f"{value:.6g}"
    return str(value)


def _format_value(value: Any) -> str:
    if value is None:
        return "."
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, list | tuple):
        return ",".join(_format_value(v) for v in value)
    if isinstance(value, float):
        return format_number(value)
    return str(value)


def format_info(info: dict) -> str:
    parts = []
    for k, v in info.items():
        if v is True:
            parts.append(k)
        elif v is False or v is None:
            continue
        else:
            parts.append(f"{k}={_format_value(v)}")
    return ";".join(parts) if parts else "."


def format_genotype_call(genotype: Genotype, alleles: Sequence[Allele]) -> str:
    """Render a genotype's calls as a GT string relative to the site alleles."""
    if not genotype.alleles:
        return "."
    index = {allele: idx for idx, allele in enumerate(alleles)}
    sep = "|" if genotype.phased else "/"
    return sep.join(
        "." if a.is_no_call else str(index[a]) for a in genotype.alleles
    )


def _format_keys(genotypes: Sequence[Genotype]) -> list[str]:
    present = {"GT"}
    extra: list[str] = []
    for g in genotypes:
        if g.ad is not None:
            present.add("AD")
        if g.pl is not None:
            present.add("PL")
        for key in g.fields:
            present.add(key)
            if key not in PREFERRED_FORMAT_ORDER and key not in extra:
                extra.append(key)
    return [k for k in PREFERRED_FORMAT_ORDER if k in present] + extra


def _genotype_value(genotype: Genotype, key: str, alleles: Sequence[Allele]) -> str:
    if key == "GT":
        return format_genotype_call(genotype, alleles)
    if key == "AD":
        return _format_value(genotype.ad)
    if key == "PL":
        return _format_value(genotype.pl)
    return _format_value(genotype.fields.get(key))


def format_vcf_line(record: VariantRecord) -> str:
    """Render a VariantRecord as a tab-delimited VCF data line."""
    ref = record.reference
    alts = record.alternates
    columns = [
        record.contig,
        str(record.start),
        record.id or ".",
        ref.bases if ref is not None else "N",
        ",".join(a.bases for a in alts) if alts else ".",
        format_number(record.qual) if record.qual is not None else ".",
        ";".join(record.filters) if record.filters else ".",
        format_info(record.info),
    ]

    if record.genotypes:
        keys = _format_keys(record.genotypes)
        columns.append(":".join(keys))
        for genotype in record.genotypes:
            columns.append(
                ":".join(_genotype_value(genotype, k, record.alleles) for k in keys)
            )

    return "\t".join(columns)


def build_header(
    raw_header: str,
    extra_lines: Sequence[str] = (),
    contigs: Sequence[tuple[str, int]] | None = None,
) -> list[str]:
    """Rebuild a VCF header with extra meta lines and, optionally, new contigs.

    When contigs are given the source ##contig lines are replaced, since the
    records now refer to the destination reference.
    """
    meta = []
    column_line = None
    for line in raw_header.splitlines():
        if not line:
            continue
        if line.startswith("#CHROM"):
            column_line = line
        elif contigs is not None and line.startswith("##contig="):
            continue
        elif line not in extra_lines:
            meta.append(line)

    meta.extend(extra_lines)
    if contigs is not None:
        meta.extend(f"##contig=<ID={name},length={length}>" for name, length in contigs)
    if column_line is None:
        raise ValueError("VCF header has no #CHROM line")
    return meta + [column_line]


def _open_text(path: Path) -> TextIO:
    if path.suffix == ".gz":
        return gzip.open(path, "wt")
    return open(path, "w")


class VCFWriter:
    """Write VariantRecords as a plain or gzip-compressed VCF."""

    def __init__(self, path: Path | str, header_lines: Sequence[str]):
        self.path = Path(path)
        self._handle = _open_text(self.path)
        self.records_written = 0
        for line in header_lines:
            self._handle.write(line + "\n")

    def write(self, record: VariantRecord) -> None:
        self._handle.write(format_vcf_line(record) + "\n")
        self.records_written += 1

    def close(self) -> None:
        self._handle.close()

    def __enter__(self) -> "VCFWriter":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
