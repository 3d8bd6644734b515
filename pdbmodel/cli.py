from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from pdbmodel.config import load_settings
from pdbmodel.core.errors import PdbModelError
from pdbmodel.core.logging_utils import get_logger
from pdbmodel.parsers.base import Model
from pdbmodel.parsers.dataset import StructureDataset
from pdbmodel.parsers.pdb_format import PDBFormatParser

logger = get_logger(__name__)
app = typer.Typer(no_args_is_help=True)


def _make_parser(strict: bool = False, verbose: bool = False) -> PDBFormatParser:
    settings = load_settings()
    if strict:
        settings.strict = True
    status = (lambda msg: typer.echo(msg, err=True) if msg else None) if verbose else None
    return PDBFormatParser(settings=settings, status=status)


def _load(path: Path, strict: bool = False, verbose: bool = False) -> Model:
    try:
        return _make_parser(strict=strict, verbose=verbose).parse(path)
    except PdbModelError as e:
        typer.echo(f"error: {e.message}", err=True)
        raise typer.Exit(code=1)


def _warning_summary(model: Model) -> Optional[str]:
    parts = [f"{kind}={n}" for kind, n in model.diagnostic_counts().items() if n]
    return "warnings: " + " ".join(parts) if parts else None


@app.command("summary")
def summary(
    paths: list[Path] = typer.Argument(..., help="PDB files to summarize."),
    strict: bool = typer.Option(False, help="Fail on the first malformed record."),
):
    """One line per file: entry id, chain/residue/atom counts, warnings."""
    ds = StructureDataset.from_paths(paths, parser=_make_parser(strict=strict))
    indices = range(len(ds))
    if len(ds) > 1:
        from tqdm import tqdm
        indices = tqdm(indices, desc="Parsing", unit="file")
    for i in indices:
        try:
            model = ds[i]
        except PdbModelError as e:
            typer.echo(f"error: {e.message}", err=True)
            raise typer.Exit(code=1)
        d = model.to_dict()
        line = (
            f"{ds.paths[i].name}\t{d['entry_id'] or '-'}\tchains={d['chain_count']} "
            f"residues={d['residue_count']} atoms={d['atom_count']} "
            f"hetatm={d['heteroatom_count']} helices={d['helix_count']} sheets={d['sheet_count']}"
        )
        warnings = _warning_summary(model)
        if warnings:
            line += f"\t{warnings}"
        typer.echo(line)


@app.command("chains")
def chains(
    path: Path = typer.Argument(..., help="PDB file."),
    verbose: bool = typer.Option(False, help="Print parse progress to stderr."),
):
    """Chain ids with residue/atom/backbone-bond counts and sequence."""
    model = _load(path, verbose=verbose)
    for c in model.chains:
        typer.echo(
            f"{c.chain_id or '-'}\tresidues={c.num_residues} atoms={len(c.atoms)} "
            f"backbone_bonds={len(c.backbone_bonds)}\t{c.sequence}"
        )


@app.command("atoms")
def atoms(
    path: Path = typer.Argument(..., help="PDB file."),
    out: Path = typer.Option(..., help="Output table (.csv or .parquet)."),
):
    """Write the atom table (chain atoms, then heteroatoms)."""
    model = _load(path)
    df = model.to_dataframe()
    out.parent.mkdir(parents=True, exist_ok=True)
    if out.suffix == ".parquet":
        df.to_parquet(out, index=False)
    else:
        df.to_csv(out, index=False)
    logger.info("Wrote %d atoms to %s", len(df), out)


@app.command("diagnostics")
def diagnostics(
    path: Path = typer.Argument(..., help="PDB file."),
):
    """List malformed records and unresolved annotations."""
    model = _load(path)
    for d in model.diagnostics:
        typer.echo(str(d))
    typer.echo(_warning_summary(model) or "no warnings")


if __name__ == "__main__":
    app()
