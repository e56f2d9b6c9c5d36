"""Tests for Typer CLI interface."""

from pathlib import Path

from typer.testing import CliRunner

from vcf_liftover import __version__
from vcf_liftover.cli import app

runner = CliRunner(env={"NO_COLOR": "1", "TERM": "dumb", "COLUMNS": "200"})

LOCUS_HEADER = "index\tname\tchrom\tposition\tgentrain_score\tsnp\tilmn_strand\tcustomer_strand\tnorm_id"


class TestCLIHelp:
    """Tests for CLI help and basic structure."""

    def test_help_command(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "Lift VCF variants and genotypes" in result.stdout

    def test_lift_help(self):
        result = runner.invoke(app, ["lift", "--help"])
        assert result.exit_code == 0
        assert "--intervals" in result.stdout
        assert "--reference" in result.stdout
        assert "--recover-swapped-ref-alt" in result.stdout
        assert "--write-original-position" in result.stdout

    def test_manifest_help(self):
        result = runner.invoke(app, ["normalization-manifest", "--help"])
        assert result.exit_code == 0
        assert "bpm.csv" in result.stdout

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout


class TestLiftErrors:
    """The lift command fails early on bad inputs."""

    def _args(self, inputs: dict[str, Path], tmp_path: Path) -> list[str]:
        return [
            "lift", str(inputs["vcf"]),
            "-i", str(inputs["intervals"]),
            "-R", str(inputs["reference"]),
            "-o", str(tmp_path / "out.vcf"),
            "--no-progress",
        ]

    def test_missing_vcf(self, tmp_path, liftover_inputs):
        liftover_inputs["vcf"] = tmp_path / "missing.vcf"

        result = runner.invoke(app, self._args(liftover_inputs, tmp_path))

        assert result.exit_code == 1
        assert "VCF file not found" in result.stdout

    def test_missing_reference(self, tmp_path, liftover_inputs):
        liftover_inputs["reference"] = tmp_path / "missing.fa"

        result = runner.invoke(app, self._args(liftover_inputs, tmp_path))

        assert result.exit_code == 1
        assert "Reference FASTA not found" in result.stdout

    def test_bad_interval_file(self, tmp_path, liftover_inputs):
        liftover_inputs["intervals"].write_text("source_contig\tsource_start\n")

        result = runner.invoke(app, self._args(liftover_inputs, tmp_path))

        assert result.exit_code == 1
        assert "Error in interval file" in result.stdout

    def test_invalid_config(self, tmp_path, liftover_inputs):
        config = tmp_path / "liftover.toml"
        config.write_text('[vcf_liftover]\nstrict = "yes"\n')

        result = runner.invoke(
            app, self._args(liftover_inputs, tmp_path) + ["--config", str(config)]
        )

        assert result.exit_code == 1
        assert "Error loading config" in result.stdout


class TestNormalizationManifest:
    def test_writes_manifest(self, tmp_path):
        loci = tmp_path / "loci.tsv"
        loci.write_text(
            LOCUS_HEADER + "\n"
            "0\trs1\t1\t100\t0.9\t[A/G]\tTOP\tBOT\t3\n"
            "1\trs2\t2\t200\t0.75\t[T/C]\tBOT\tTOP\t1\n"
        )
        output = tmp_path / "out.bpm.csv"

        result = runner.invoke(app, ["normalization-manifest", str(loci), str(output)])

        assert result.exit_code == 0
        assert "Wrote 2 loci" in result.stdout
        assert output.read_text().splitlines()[2] == "2,rs2,2,200,0.7500,[T/C],BOT,TOP,1"

    def test_missing_locus_table(self, tmp_path):
        result = runner.invoke(
            app, ["normalization-manifest", str(tmp_path / "nope.tsv"), str(tmp_path / "o.csv")]
        )

        assert result.exit_code == 1
        assert "Locus table not found" in result.stdout

    def test_malformed_locus_table(self, tmp_path):
        loci = tmp_path / "loci.tsv"
        loci.write_text("index\tname\n0\trs1\n")

        result = runner.invoke(app, ["normalization-manifest", str(loci), str(tmp_path / "o.csv")])

        assert result.exit_code == 1
        assert "missing columns" in result.stdout
