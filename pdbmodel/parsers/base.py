"""Structural model built from a PDB flat file.

Hierarchy:
    Model (top-level)
    ├── header: StructureHeader, metadata: str
    ├── chains: tuple[Chain]
    │   ├── residues: tuple[Residue]
    │   │   ├── atoms: tuple[Atom]
    │   │   └── bonds: tuple[Bond]         (intra-residue)
    │   └── backbone_bonds: tuple[Bond]    (N-CA-C path)
    ├── heteroatoms: tuple[Atom]           (flat, never grouped)
    ├── helices / sheets: tuple[SecondaryStructure]
    ├── explicit_bonds: tuple[Bond]        (CONECT / LINK)
    └── diagnostics: tuple[Diagnostic]

Everything here is a frozen value object. A Model is built once by
PDBFormatParser and never updated; parsing a new file builds a new Model.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from pathlib import Path
from typing import TYPE_CHECKING, Iterator, Optional, Union

import numpy as np
import pandas as pd

from pdbmodel.core.errors import Diagnostic, DiagnosticKind

if TYPE_CHECKING:
    from pdbmodel.parsers.records import HelixRecord, SheetRecord

THREE_TO_ONE = {
    "ALA": "A", "ARG": "R", "ASN": "N", "ASP": "D", "CYS": "C",
    "GLN": "Q", "GLU": "E", "GLY": "G", "HIS": "H", "ILE": "I",
    "LEU": "L", "LYS": "K", "MET": "M", "PHE": "F", "PRO": "P",
    "SER": "S", "THR": "T", "TRP": "W", "TYR": "Y", "VAL": "V",
}


# ======================================================================
# Primary structure
# ======================================================================

@dataclass(frozen=True)
class Atom:
    """Single atom with coordinates and identity."""

    serial: int
    name: str
    element: str
    x: float
    y: float
    z: float
    res_name: str = ""
    res_seq: int = 0
    chain_id: str = ""
    ins_code: str = ""
    alt_loc: str = ""
    occupancy: float = 1.0
    b_factor: float = 0.0
    charge: str = ""
    hetero: bool = False

    @property
    def coords(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def distance(self, other: "Atom") -> float:
        return math.dist(self.coords, other.coords)


class BondKind(str, Enum):
    INTRA_RESIDUE = "intra_residue"
    BACKBONE = "backbone"
    EXPLICIT = "explicit"


@dataclass(frozen=True, eq=False)
class Bond:
    """Unordered pair of atoms.

    Either side may be None (a dangling bond); serials are kept so a
    dangling bond still says what it pointed at.
    """

    atom_a: Optional[Atom]
    atom_b: Optional[Atom]
    kind: BondKind = BondKind.INTRA_RESIDUE
    serial_a: Optional[int] = None
    serial_b: Optional[int] = None

    def __post_init__(self) -> None:
        if self.serial_a is None and self.atom_a is not None:
            object.__setattr__(self, "serial_a", self.atom_a.serial)
        if self.serial_b is None and self.atom_b is not None:
            object.__setattr__(self, "serial_b", self.atom_b.serial)

    @property
    def key(self) -> tuple[BondKind, frozenset]:
        return (self.kind, frozenset((self.serial_a, self.serial_b)))

    @property
    def is_dangling(self) -> bool:
        return self.atom_a is None or self.atom_b is None

    @property
    def length(self) -> Optional[float]:
        if self.is_dangling:
            return None
        return self.atom_a.distance(self.atom_b)

    @property
    def names(self) -> tuple[str, str]:
        return (
            self.atom_a.name if self.atom_a is not None else "?",
            self.atom_b.name if self.atom_b is not None else "?",
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Bond):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __repr__(self) -> str:
        return f"Bond({self.kind.value} {self.serial_a}-{self.serial_b} {self.names[0]}-{self.names[1]})"


@dataclass(frozen=True)
class Residue:
    """Contiguous run of atoms sharing one sequence number.

    ``atoms`` keeps every atom in file order. The name lookup keeps the last
    atom seen for a name, so duplicate names never drop atoms from the model.
    """

    name: str
    seq_id: int
    chain_id: str = ""
    atoms: tuple[Atom, ...] = ()
    bonds: tuple[Bond, ...] = ()
    ins_code: str = ""
    _by_name: dict = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_by_name", {a.name: a for a in self.atoms})

    def get_atom(self, name: str) -> Optional[Atom]:
        return self._by_name.get(name)

    @property
    def atom_names(self) -> dict[str, Atom]:
        """Name -> Atom mapping (copy)."""
        return dict(self._by_name)

    @property
    def ca(self) -> Optional[Atom]:
        """Alpha-carbon atom, or None."""
        return self.get_atom("CA")

    @property
    def one_letter(self) -> str:
        return THREE_TO_ONE.get(self.name.upper(), "X")

    @property
    def is_standard(self) -> bool:
        return self.name.upper() in THREE_TO_ONE

    @property
    def num_atoms(self) -> int:
        return len(self.atoms)

    def __contains__(self, name: str) -> bool:
        return name in self._by_name


@dataclass(frozen=True)
class Chain:
    """Contiguous run of residues sharing one chain identifier."""

    chain_id: str
    residues: tuple[Residue, ...] = ()
    backbone_bonds: tuple[Bond, ...] = ()

    @property
    def atoms(self) -> list[Atom]:
        return [a for r in self.residues for a in r.atoms]

    @property
    def bonds(self) -> list[Bond]:
        """Intra-residue bonds of every residue, in residue order."""
        return [b for r in self.residues for b in r.bonds]

    @property
    def sequence(self) -> str:
        return "".join(r.one_letter for r in self.residues if r.is_standard)

    @property
    def num_residues(self) -> int:
        return len(self.residues)

    def get_residue(self, seq_id: int, ins_code: str = "") -> Optional[Residue]:
        for r in self.residues:
            if r.seq_id == seq_id and r.ins_code == ins_code:
                return r
        return None

    def __len__(self) -> int:
        return len(self.residues)

    def __iter__(self) -> Iterator[Residue]:
        return iter(self.residues)


# ======================================================================
# Annotations
# ======================================================================

@dataclass(frozen=True)
class SecondaryStructure:
    """A helix or sheet strand resolved against the chain hierarchy.

    When an endpoint cannot be found, or the endpoints do not bound a run
    of one chain segment, the range is kept but empty, so consumers can
    skip it without special-casing the load.
    """

    kind: str  # "helix" or "sheet"
    record: Union["HelixRecord", "SheetRecord"]
    start: Optional[Residue] = None
    end: Optional[Residue] = None
    residues: tuple[Residue, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.residues

    @property
    def chain_id(self) -> str:
        return self.record.init_chain_id


@dataclass(frozen=True)
class StructureHeader:
    """Fields lifted from HEADER / TITLE / REMARK 2."""

    entry_id: str = ""
    classification: str = ""
    deposit_date: Optional[str] = None
    title: Optional[str] = None
    resolution: Optional[float] = None


# ======================================================================
# Model
# ======================================================================

@dataclass(frozen=True)
class Model:
    """Root of the structural hierarchy for one PDB file."""

    chains: tuple[Chain, ...] = ()
    heteroatoms: tuple[Atom, ...] = ()
    helices: tuple[SecondaryStructure, ...] = ()
    sheets: tuple[SecondaryStructure, ...] = ()
    explicit_bonds: tuple[Bond, ...] = ()
    metadata: str = ""
    header: StructureHeader = field(default_factory=StructureHeader)
    seqres: dict[str, tuple[str, ...]] = field(default_factory=dict, hash=False)
    model_count: int = 0
    diagnostics: tuple[Diagnostic, ...] = ()
    source_path: Optional[Path] = None

    @cached_property
    def atoms(self) -> list[Atom]:
        """Chain atoms in file order (heteroatoms excluded)."""
        return [a for c in self.chains for a in c.atoms]

    @cached_property
    def residues(self) -> list[Residue]:
        return [r for c in self.chains for r in c.residues]

    @cached_property
    def atom_index(self) -> dict[int, Atom]:
        """Serial -> chain atom. The first atom wins on a repeated serial."""
        index: dict[int, Atom] = {}
        for a in self.atoms:
            index.setdefault(a.serial, a)
        return index

    @property
    def bonds(self) -> list[Bond]:
        """Every materialized bond: intra-residue, backbone, then explicit."""
        out: list[Bond] = []
        for c in self.chains:
            out.extend(c.bonds)
        for c in self.chains:
            out.extend(c.backbone_bonds)
        out.extend(self.explicit_bonds)
        return out

    @property
    def entry_id(self) -> str:
        if self.header.entry_id:
            return self.header.entry_id
        if self.source_path is not None:
            m = re.search(r"(?:pdb)?([0-9][a-z0-9]{3})", self.source_path.stem, re.I)
            if m:
                return m.group(1).upper()
        return ""

    @property
    def chain_ids(self) -> list[str]:
        return [c.chain_id for c in self.chains]

    @property
    def sequences(self) -> dict[str, str]:
        """Chain ID -> one-letter sequence of the observed residues."""
        return {c.chain_id: c.sequence for c in self.chains}

    @property
    def num_chains(self) -> int:
        return len(self.chains)

    @property
    def num_atoms(self) -> int:
        return len(self.atoms)

    @property
    def is_empty(self) -> bool:
        return not self.chains and not self.heteroatoms

    def get_chain(self, chain_id: str) -> Optional[Chain]:
        for c in self.chains:
            if c.chain_id == chain_id:
                return c
        return None

    def diagnostic_counts(self) -> dict[str, int]:
        counts = {kind.value: 0 for kind in DiagnosticKind}
        for d in self.diagnostics:
            counts[d.kind.value] += 1
        return counts

    def coordinates(self, include_hetero: bool = False) -> np.ndarray:
        """(N, 3) array of atom positions in file order."""
        atoms = list(self.atoms)
        if include_hetero:
            atoms.extend(self.heteroatoms)
        if not atoms:
            return np.empty((0, 3), dtype=np.float64)
        return np.array([a.coords for a in atoms], dtype=np.float64)

    def to_dataframe(self) -> pd.DataFrame:
        """One row per atom (chain atoms first, then heteroatoms)."""
        columns = [
            "serial", "name", "element", "res_name", "res_seq", "ins_code", "chain_id",
            "alt_loc", "x", "y", "z", "occupancy", "b_factor", "charge", "hetero",
        ]
        rows = [
            {col: getattr(a, col) for col in columns}
            for a in list(self.atoms) + list(self.heteroatoms)
        ]
        return pd.DataFrame(rows, columns=columns)

    def to_dict(self) -> dict:
        """Flat summary dict for reporting."""
        h = self.header
        counts = self.diagnostic_counts()
        return {
            "entry_id": self.entry_id,
            "classification": h.classification,
            "deposit_date": h.deposit_date,
            "title": h.title,
            "resolution": h.resolution,
            "model_count": self.model_count,
            "chain_count": self.num_chains,
            "residue_count": len(self.residues),
            "atom_count": self.num_atoms,
            "heteroatom_count": len(self.heteroatoms),
            "helix_count": len(self.helices),
            "sheet_count": len(self.sheets),
            "explicit_bond_count": len(self.explicit_bonds),
            "malformed_records": counts[DiagnosticKind.MALFORMED_RECORD.value],
            "unresolved_annotations": counts[DiagnosticKind.UNRESOLVED_ANNOTATION.value],
            "duplicate_atom_names": counts[DiagnosticKind.DUPLICATE_ATOM_NAME.value],
        }

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__} {self.entry_id} "
            f"chains={self.num_chains} atoms={self.num_atoms} "
            f"hetatm={len(self.heteroatoms)}>"
        )
