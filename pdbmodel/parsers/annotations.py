"""Resolve HELIX / SHEET / CONECT / LINK records against assembled chains.

Annotations may refer to residues and atoms that appear later in the file,
so they are collected during parsing and resolved here once every chain
exists. Anything that cannot be resolved becomes an empty range or is
dropped, with an UNRESOLVED_ANNOTATION diagnostic; it never fails the load.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence, Union

from pdbmodel.core.errors import Diagnostic, DiagnosticKind
from pdbmodel.core.logging_utils import get_logger
from pdbmodel.parsers.base import Atom, Bond, BondKind, Chain, Residue, SecondaryStructure
from pdbmodel.parsers.records import ConectRecord, HelixRecord, LinkEnd, LinkRecord, SheetRecord

logger = get_logger(__name__)


@dataclass
class ChainIndex:
    """Lookups over a finished hierarchy.

    Only chain atoms are indexed by serial; heteroatoms are not.
    On repeated keys the first occurrence in file order wins.
    """

    chains: dict[str, Chain] = field(default_factory=dict)
    residues: dict[tuple[str, int, str], Residue] = field(default_factory=dict)
    positions: dict[tuple[str, int, str], int] = field(default_factory=dict)
    owners: dict[tuple[str, int, str], Chain] = field(default_factory=dict)
    atoms: dict[int, Atom] = field(default_factory=dict)

    @classmethod
    def build(cls, chains: Sequence[Chain]) -> "ChainIndex":
        index = cls()
        for chain in chains:
            index.chains.setdefault(chain.chain_id, chain)
            for pos, residue in enumerate(chain.residues):
                key = (residue.chain_id, residue.seq_id, residue.ins_code)
                if key not in index.residues:
                    index.residues[key] = residue
                    index.positions[key] = pos
                    index.owners[key] = chain
                for atom in residue.atoms:
                    index.atoms.setdefault(atom.serial, atom)
        return index

    def residue(self, chain_id: str, seq_id: int, ins_code: str = "") -> Optional[Residue]:
        return self.residues.get((chain_id, seq_id, ins_code))

    def atom(self, serial: int) -> Optional[Atom]:
        return self.atoms.get(serial)

    def span(self, start: Residue, end: Residue) -> tuple[Residue, ...]:
        """Residues from start to end inclusive, when both sit in one chain segment."""
        first = (start.chain_id, start.seq_id, start.ins_code)
        last = (end.chain_id, end.seq_id, end.ins_code)
        chain = self.owners.get(first)
        if chain is None or self.owners.get(last) is not chain:
            return ()
        i, j = self.positions[first], self.positions[last]
        if i > j:
            return ()
        return chain.residues[i:j + 1]


def _unresolved(message: str) -> Diagnostic:
    return Diagnostic(DiagnosticKind.UNRESOLVED_ANNOTATION, message)


def resolve_secondary(
    records: Sequence[Union[HelixRecord, SheetRecord]],
    kind: str,
    index: ChainIndex,
) -> tuple[tuple[SecondaryStructure, ...], list[Diagnostic]]:
    resolved: list[SecondaryStructure] = []
    diagnostics: list[Diagnostic] = []
    for rec in records:
        label = f"{kind} {rec.init_chain_id}{rec.init_seq}-{rec.end_chain_id}{rec.end_seq}"
        start = index.residue(rec.init_chain_id, rec.init_seq, rec.init_ins_code)
        end = index.residue(rec.end_chain_id, rec.end_seq, rec.end_ins_code)
        if start is None or end is None:
            diagnostics.append(_unresolved(f"{label}: endpoint residue not found"))
            resolved.append(SecondaryStructure(kind=kind, record=rec))
            continue
        residues = index.span(start, end)
        if not residues:
            diagnostics.append(_unresolved(f"{label}: endpoints are reversed or in different chain segments"))
            resolved.append(SecondaryStructure(kind=kind, record=rec))
            continue
        resolved.append(SecondaryStructure(kind=kind, record=rec, start=start, end=end, residues=residues))
    return tuple(resolved), diagnostics


def resolve_conect(
    records: Sequence[ConectRecord],
    index: ChainIndex,
) -> tuple[tuple[Bond, ...], list[Diagnostic]]:
    """One explicit bond per (serial, partner) entry whose atoms both exist."""
    bonds: list[Bond] = []
    diagnostics: list[Diagnostic] = []
    for rec in records:
        for serial_a, serial_b in rec.pairs():
            atom_a = index.atom(serial_a)
            atom_b = index.atom(serial_b)
            if atom_a is None or atom_b is None:
                missing = [s for s, a in ((serial_a, atom_a), (serial_b, atom_b)) if a is None]
                diagnostics.append(_unresolved(
                    f"CONECT {serial_a}-{serial_b}: no atom with serial {', '.join(map(str, missing))}"
                ))
                continue
            bonds.append(Bond(atom_a, atom_b, BondKind.EXPLICIT))
    return tuple(bonds), diagnostics


def _link_atom(end: LinkEnd, index: ChainIndex) -> Optional[Atom]:
    residue = index.residue(end.chain_id, end.res_seq, end.ins_code)
    if residue is None:
        return None
    return residue.get_atom(end.atom_name)


def resolve_links(
    records: Sequence[LinkRecord],
    index: ChainIndex,
) -> tuple[tuple[Bond, ...], list[Diagnostic]]:
    bonds: list[Bond] = []
    diagnostics: list[Diagnostic] = []
    for rec in records:
        atom_a = _link_atom(rec.first, index)
        atom_b = _link_atom(rec.second, index)
        if atom_a is None or atom_b is None:
            a, b = rec.first, rec.second
            diagnostics.append(_unresolved(
                f"LINK {a.atom_name} {a.res_name} {a.chain_id}{a.res_seq} - "
                f"{b.atom_name} {b.res_name} {b.chain_id}{b.res_seq}: atom not found"
            ))
            continue
        bonds.append(Bond(atom_a, atom_b, BondKind.EXPLICIT))
    return tuple(bonds), diagnostics
