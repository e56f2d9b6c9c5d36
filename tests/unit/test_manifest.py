"""Tests for bpm.csv normalization manifest export."""

import pytest

from vcf_liftover.manifest import (
    MANIFEST_COLUMNS,
    ManifestLocus,
    read_locus_table,
    write_normalization_manifest,
)

LOCUS_HEADER = "index\tname\tchrom\tposition\tgentrain_score\tsnp\tilmn_strand\tcustomer_strand\tnorm_id"


def make_locus(index: int = 0, **overrides) -> ManifestLocus:
    values = {
        "index": index,
        "name": f"rs{index + 1000}",
        "chrom": "1",
        "position": 752566,
        "gentrain_score": 0.8512345,
        "snp": "[A/G]",
        "ilmn_strand": "TOP",
        "customer_strand": "BOT",
        "norm_id": 2,
    }
    values.update(overrides)
    return ManifestLocus(**values)


class TestWriteManifest:
    def test_header_and_rows(self, tmp_path):
        path = tmp_path / "out.bpm.csv"

        count = write_normalization_manifest([make_locus(0), make_locus(1, chrom="X")], path)

        lines = path.read_text().splitlines()
        assert count == 2
        assert lines[0] == ",".join(MANIFEST_COLUMNS)
        assert lines[0] == (
            "Index,Name,Chromosome,Position,GenTrain Score,SNP,ILMN Strand,Customer Strand,NormID"
        )
        assert lines[1] == "1,rs1000,1,752566,0.8512,[A/G],TOP,BOT,2"
        assert lines[2].startswith("2,rs1001,X,")

    def test_empty(self, tmp_path):
        path = tmp_path / "out.bpm.csv"

        assert write_normalization_manifest([], path) == 0
        assert path.read_text() == ",".join(MANIFEST_COLUMNS) + "\n"


class TestReadLocusTable:
    def test_read(self, tmp_path):
        path = tmp_path / "loci.tsv"
        path.write_text(LOCUS_HEADER + "\n0\trs1\t1\t100\t0.9\t[A/G]\tTOP\tBOT\t3\n")

        (locus,) = read_locus_table(path)

        assert locus == make_locus(0, name="rs1", position=100, gentrain_score=0.9, norm_id=3)

    def test_missing_column(self, tmp_path):
        path = tmp_path / "loci.tsv"
        path.write_text("index\tname\n0\trs1\n")

        with pytest.raises(ValueError, match="missing columns"):
            read_locus_table(path)

    def test_bad_value(self, tmp_path):
        path = tmp_path / "loci.tsv"
        path.write_text(LOCUS_HEADER + "\nzero\trs1\t1\t100\t0.9\t[A/G]\tTOP\tBOT\t3\n")

        with pytest.raises(ValueError, match="line 2"):
            read_locus_table(path)
