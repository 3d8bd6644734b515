"""Tests for the pdbmodel CLI."""

import pandas as pd
from typer.testing import CliRunner

from pdbmodel.cli import app

runner = CliRunner()


class TestSummary:
    def test_single_file(self, sample_pdb):
        result = runner.invoke(app, ["summary", str(sample_pdb)])
        assert result.exit_code == 0
        assert "sample.pdb\t1TST\tchains=2 residues=3 atoms=16 hetatm=1 helices=1 sheets=1" in result.output
        assert "unresolved_annotation=2" in result.output

    def test_several_files(self, sample_pdb, write_pdb):
        empty = write_pdb([], name="empty.pdb")
        result = runner.invoke(app, ["summary", str(sample_pdb), str(empty)])
        assert result.exit_code == 0
        assert "empty.pdb\t-\tchains=0" in result.output

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["summary", str(tmp_path / "nope.pdb")])
        assert result.exit_code == 1
        assert "error:" in result.output

    def test_strict_stops_on_malformed_line(self, write_pdb):
        path = write_pdb(["ATOM      2  CA  GLY A   1       1.458"])
        assert runner.invoke(app, ["summary", str(path)]).exit_code == 0
        result = runner.invoke(app, ["summary", str(path), "--strict"])
        assert result.exit_code == 1
        assert "z coordinate" in result.output


class TestChains:
    def test_chains(self, sample_pdb):
        result = runner.invoke(app, ["chains", str(sample_pdb)])
        assert result.exit_code == 0
        assert "A\tresidues=2 atoms=10 backbone_bonds=5\tGA" in result.output
        assert "B\tresidues=1 atoms=6 backbone_bonds=2\tS" in result.output

    def test_verbose_reports_progress(self, sample_pdb):
        result = runner.invoke(app, ["chains", str(sample_pdb), "--verbose"])
        assert result.exit_code == 0
        assert "Assembling..." in result.output


class TestAtoms:
    def test_csv(self, sample_pdb, tmp_path):
        out = tmp_path / "out" / "atoms.csv"
        result = runner.invoke(app, ["atoms", str(sample_pdb), "--out", str(out)])
        assert result.exit_code == 0
        df = pd.read_csv(out)
        assert len(df) == 17
        assert df["serial"].tolist()[:3] == [1, 2, 3]

    def test_parquet(self, sample_pdb, tmp_path):
        out = tmp_path / "atoms.parquet"
        result = runner.invoke(app, ["atoms", str(sample_pdb), "--out", str(out)])
        assert result.exit_code == 0
        assert len(pd.read_parquet(out)) == 17


class TestDiagnostics:
    def test_lists_diagnostics(self, sample_pdb):
        result = runner.invoke(app, ["diagnostics", str(sample_pdb)])
        assert result.exit_code == 0
        assert "[unresolved_annotation]" in result.output
        assert "CONECT 17-99" in result.output
        assert "warnings: unresolved_annotation=2" in result.output

    def test_clean_file(self, write_pdb):
        result = runner.invoke(app, ["diagnostics", str(write_pdb([]))])
        assert result.exit_code == 0
        assert "no warnings" in result.output

    def test_missing_file_exit_code(self, tmp_path):
        result = runner.invoke(app, ["diagnostics", str(tmp_path / "nope.pdb")])
        assert result.exit_code == 1
