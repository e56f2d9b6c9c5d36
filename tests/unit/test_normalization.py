"""Tests for left-alignment and trimming per vt algorithm."""

import pytest

from vcf_liftover.exceptions import MissingReferenceAlleleError, ReferenceMismatchError
from vcf_liftover.models import Allele
from vcf_liftover.normalizer import left_align_alleles
from vcf_liftover.reference import InMemorySequence

# 1-based: C1 G2 A3 T4 T5 T6 T7 G8 C9
HOMOPOLYMER = InMemorySequence("chr2", "CGATTTTGC")


def ref(bases: str) -> Allele:
    return Allele(bases, is_reference=True)


class TestLeftAlignAlleles:
    """Test vt-style left-alignment and parsimony against a reference."""

    def test_insertion_shifts_to_start_of_run(self):
        """T/TT after a poly-T run moves to the base before the run."""
        start, end, alleles = left_align_alleles(7, 7, [ref("T"), Allele("TT")], HOMOPOLYMER)

        assert (start, end) == (3, 3)
        assert alleles == [ref("A"), Allele("AT")]

    def test_deletion_shifts_to_start_of_run(self):
        start, end, alleles = left_align_alleles(6, 7, [ref("TT"), Allele("T")], HOMOPOLYMER)

        assert (start, end) == (3, 4)
        assert alleles == [ref("AT"), Allele("A")]

    def test_shared_prefix_and_suffix_trimmed(self):
        start, end, alleles = left_align_alleles(2, 4, [ref("GAT"), Allele("GCT")], HOMOPOLYMER)

        assert (start, end) == (3, 3)
        assert alleles == [ref("A"), Allele("C")]

    def test_snp_unchanged(self):
        start, end, alleles = left_align_alleles(3, 3, [ref("A"), Allele("G")], HOMOPOLYMER)

        assert (start, end) == (3, 3)
        assert alleles == [ref("A"), Allele("G")]

    @pytest.mark.parametrize(
        "start,end,alleles",
        [
            (3, 3, [ref("A"), Allele("AT")]),
            (3, 4, [ref("AT"), Allele("A")]),
        ],
    )
    def test_idempotent(self, start, end, alleles):
        """Aligning an already aligned site returns it unchanged."""
        assert left_align_alleles(start, end, alleles, HOMOPOLYMER) == (start, end, alleles)

    def test_input_order_preserved(self):
        """The reference allele need not come first."""
        start, end, alleles = left_align_alleles(7, 7, [Allele("TT"), ref("T")], HOMOPOLYMER)

        assert (start, end) == (3, 3)
        assert alleles == [Allele("AT"), ref("A")]

    def test_multiallelic_insertions(self):
        start, end, alleles = left_align_alleles(
            7, 7, [ref("T"), Allele("TT"), Allele("TTT")], HOMOPOLYMER
        )

        assert (start, end) == (3, 3)
        assert alleles == [ref("A"), Allele("AT"), Allele("ATT")]

    def test_lowercase_reference(self):
        soft_masked = InMemorySequence("chr2", "cgattttgc")
        start, end, alleles = left_align_alleles(7, 7, [ref("T"), Allele("TT")], soft_masked)

        assert (start, end) == (3, 3)
        assert alleles == [ref("A"), Allele("AT")]

    def test_lowercase_alleles(self):
        start, end, alleles = left_align_alleles(6, 7, [ref("tt"), Allele("t")], HOMOPOLYMER)

        assert (start, end) == (3, 4)
        assert alleles == [ref("AT"), Allele("A")]

    def test_extension_at_contig_start_takes_base_at_end(self):
        """With no base left of position 1 the base at offset `end` is prepended."""
        contig = InMemorySequence("chr3", "TGCA")

        start, end, alleles = left_align_alleles(1, 2, [ref("TG"), Allele("G")], contig)

        assert (start, end) == (0, 1)
        assert alleles == [ref("GT"), Allele("G")]

    def test_reference_mismatch(self):
        with pytest.raises(ReferenceMismatchError) as exc_info:
            left_align_alleles(3, 3, [ref("C"), Allele("CT")], HOMOPOLYMER)

        err = exc_info.value
        assert (err.contig, err.start, err.end) == ("chr2", 3, 3)
        assert err.reference_bases == "A"
        assert "Allele=C*" in str(err)

    def test_missing_reference_allele(self):
        with pytest.raises(MissingReferenceAlleleError):
            left_align_alleles(7, 7, [Allele("T"), Allele("TT")], HOMOPOLYMER)

