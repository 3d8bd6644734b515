"""Group the flat ATOM stream into residues and chains.

Grouping is run-length over file order, not a sort: a residue ends when
the (chain, sequence number, insertion code) key changes from the previous
atom, and a chain ends when the chain id changes from the previous residue.
The PDB format keeps residues and chains contiguous, which makes this a
single linear pass that preserves file order.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from pdbmodel.core.errors import Diagnostic, DiagnosticKind
from pdbmodel.core.logging_utils import get_logger
from pdbmodel.parsers.base import Atom, Bond, BondKind, Chain, Residue
from pdbmodel.parsers.topology import resolve_residue_bonds

logger = get_logger(__name__)

BACKBONE_ATOMS = ("N", "CA", "C")
DEFAULT_BACKBONE_CUTOFF = 2.0


def _residue_key(atom: Atom) -> tuple[str, int, str]:
    return (atom.chain_id, atom.res_seq, atom.ins_code)


def _runs(items: Iterable, key) -> list[list]:
    runs: list[list] = []
    for item in items:
        if runs and key(item) == key(runs[-1][-1]):
            runs[-1].append(item)
        else:
            runs.append([item])
    return runs


def build_residue(atoms: Sequence[Atom], diagnostics: list[Diagnostic]) -> Residue:
    """Residue from one run of atoms, with its table-driven bonds."""
    first = atoms[0]
    label = f"{first.res_name} {first.chain_id or '-'}{first.res_seq}{first.ins_code}"
    seen: set[str] = set()
    for atom in atoms:
        if atom.res_name != first.res_name:
            diagnostics.append(Diagnostic(
                DiagnosticKind.DUPLICATE_ATOM_NAME,
                f"residue {label} changes type to {atom.res_name} at atom {atom.serial}",
            ))
        if atom.name in seen:
            diagnostics.append(Diagnostic(
                DiagnosticKind.DUPLICATE_ATOM_NAME,
                f"residue {label} repeats atom name {atom.name} (serial {atom.serial}); last one wins",
            ))
        seen.add(atom.name)

    by_name = {a.name: a for a in atoms}
    return Residue(
        name=first.res_name,
        seq_id=first.res_seq,
        chain_id=first.chain_id,
        ins_code=first.ins_code,
        atoms=tuple(atoms),
        bonds=resolve_residue_bonds(first.res_name, by_name),
    )


def group_residues(atoms: Sequence[Atom]) -> tuple[list[Residue], list[Diagnostic]]:
    diagnostics: list[Diagnostic] = []
    residues = [build_residue(run, diagnostics) for run in _runs(atoms, _residue_key)]
    return residues, diagnostics


def backbone_bonds(residues: Sequence[Residue], cutoff: float = DEFAULT_BACKBONE_CUTOFF) -> tuple[Bond, ...]:
    """Bonds between consecutive N/CA/C atoms closer than ``cutoff`` Angstrom.

    The distance check keeps chain breaks and missing residues unbonded.
    """
    path = [a for r in residues for a in r.atoms if a.name in BACKBONE_ATOMS]
    return tuple(
        Bond(a, b, BondKind.BACKBONE)
        for a, b in zip(path, path[1:])
        if a.distance(b) < cutoff
    )


def group_chains(residues: Sequence[Residue], cutoff: float = DEFAULT_BACKBONE_CUTOFF) -> list[Chain]:
    return [
        Chain(chain_id=run[0].chain_id, residues=tuple(run), backbone_bonds=backbone_bonds(run, cutoff))
        for run in _runs(residues, lambda r: r.chain_id)
    ]


def assemble(
    atoms: Sequence[Atom],
    cutoff: float = DEFAULT_BACKBONE_CUTOFF,
) -> tuple[tuple[Chain, ...], list[Diagnostic]]:
    """ATOM records (first model only) -> chains, plus grouping diagnostics."""
    residues, diagnostics = group_residues(atoms)
    chains = group_chains(residues, cutoff)
    logger.debug("Assembled %d atoms into %d residues, %d chains", len(atoms), len(residues), len(chains))
    return tuple(chains), diagnostics
