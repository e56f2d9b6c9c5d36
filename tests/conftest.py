"""Pytest configuration and fixtures for vcf-liftover tests."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent))

from fixtures.vcf_generator import (  # noqa: E402
    LIFTOVER_INTERVALS,
    LIFTOVER_TARGET_CHR2,
    make_liftover_vcf_file,
    write_fasta,
    write_interval_table,
)

from vcf_liftover.models import Allele, Genotype, VariantRecord  # noqa: E402


@pytest.fixture
def snp_record() -> VariantRecord:
    """Biallelic A>G SNP at chr1:100 with a het and a hom-ref sample."""
    ref = Allele("A", is_reference=True)
    alt = Allele("G")
    return VariantRecord(
        contig="chr1",
        start=100,
        end=100,
        alleles=(ref, alt),
        genotypes=(
            Genotype("S1", (ref, alt), ad=(10, 5), pl=(30, 0, 40), fields={"GQ": 30}),
            Genotype("S2", (ref, ref), ad=(12, 0), pl=(0, 30, 300)),
        ),
        filters=("PASS",),
        qual=50.0,
        info={"DP": 17, "AF": (0.25,)},
        id="rs100",
    )


@pytest.fixture
def liftover_inputs(tmp_path: Path) -> dict[str, Path]:
    """VCF, interval table and destination FASTA for end-to-end liftover."""
    return {
        "vcf": make_liftover_vcf_file(tmp_path / "source.vcf"),
        "intervals": write_interval_table(tmp_path / "mapped.tsv", LIFTOVER_INTERVALS),
        "reference": write_fasta(tmp_path / "target.fa", {"chr2": LIFTOVER_TARGET_CHR2}),
    }
