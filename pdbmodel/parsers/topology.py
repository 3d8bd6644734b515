"""Intra-residue covalent topology for the standard amino acids.

PDB files do not list the covalent bonds inside a residue, so they are
rebuilt from a static table of atom-name pairs per residue type. Names
follow the wwCIF chemical component dictionary (Ligand Expo).

Pairs whose atoms are absent from the residue (hydrogens stripped from
crystal structures, terminal variants) are skipped.
"""

from __future__ import annotations

from typing import Mapping

from pdbmodel.parsers.base import Atom, Bond, BondKind


def _pairs(text: str) -> tuple[tuple[str, str], ...]:
    return tuple((a, b) for a, b in (p.split("-") for p in text.split()))


# Side-chain bonds (CB onwards). CA-CB is a shared rule.
SIDE_CHAIN_BONDS: dict[str, tuple[tuple[str, str], ...]] = {
    "ALA": _pairs("CB-HB1 CB-HB2 CB-HB3"),
    "ARG": _pairs(
        "CB-HB2 CB-HB3 CB-CG CG-HG2 CG-HG3 CG-CD CD-HD2 CD-HD3 CD-NE NE-HE NE-CZ "
        "CZ-NH1 CZ-NH2 NH1-HH11 NH1-HH12 NH2-HH21 NH2-HH22"
    ),
    "ASN": _pairs("CB-HB2 CB-HB3 CB-CG CG-OD1 CG-ND2 ND2-HD21 ND2-HD22"),
    "ASP": _pairs("CB-HB2 CB-HB3 CB-CG CG-OD1 CG-OD2"),
    "CYS": _pairs("CB-HB2 CB-HB3 CB-SG SG-HG"),
    "GLN": _pairs("CB-HB2 CB-HB3 CB-CG CG-HG2 CG-HG3 CG-CD CD-OE1 CD-NE2 NE2-HE21 NE2-HE22"),
    "GLU": _pairs("CB-HB2 CB-HB3 CB-CG CG-HG2 CG-HG3 CG-CD CD-OE1 CD-OE2 OE2-HE2"),
    "GLY": _pairs("CA-HA2 CA-HA3"),
    "HIS": _pairs(
        "CB-HB2 CB-HB3 CB-CG CG-ND1 CG-CD2 ND1-HD1 ND1-CE1 CD2-HD2 CD2-NE2 "
        "CE1-HE1 CE1-NE2 NE2-HE2"
    ),
    "ILE": _pairs(
        "CB-HB CB-CG1 CB-CG2 CG1-HG12 CG1-HG13 CG1-CD1 CG2-HG21 CG2-HG22 CG2-HG23 "
        "CD1-HD11 CD1-HD12 CD1-HD13"
    ),
    "LEU": _pairs(
        "CB-HB2 CB-HB3 CB-CG CG-HG CG-CD1 CG-CD2 CD1-HD11 CD1-HD12 CD1-HD13 "
        "CD2-HD21 CD2-HD22 CD2-HD23"
    ),
    "LYS": _pairs(
        "CB-HB2 CB-HB3 CB-CG CG-HG2 CG-HG3 CG-CD CD-HD2 CD-HD3 CD-CE CE-HE2 CE-HE3 "
        "CE-NZ NZ-HZ1 NZ-HZ2 NZ-HZ3"
    ),
    "MET": _pairs("CB-HB2 CB-HB3 CB-CG CG-HG2 CG-HG3 CG-SD SD-CE CE-HE1 CE-HE2 CE-HE3"),
    "PHE": _pairs(
        "CB-HB2 CB-HB3 CB-CG CG-CD1 CG-CD2 CD1-HD1 CD1-CE1 CD2-HD2 CD2-CE2 "
        "CE1-HE1 CE1-CZ CE2-HE2 CE2-CZ CZ-HZ"
    ),
    # CD-N closes the pyrrolidine ring in place of the amide hydrogen.
    "PRO": _pairs("CB-HB2 CB-HB3 CB-CG CG-HG2 CG-HG3 CG-CD CD-HD2 CD-HD3 CD-N"),
    "SER": _pairs("CB-HB2 CB-HB3 CB-OG OG-HG"),
    "THR": _pairs("CB-HB CB-OG1 CB-CG2 OG1-HG1 CG2-HG21 CG2-HG22 CG2-HG23"),
    "TRP": _pairs(
        "CB-HB2 CB-HB3 CB-CG CG-CD1 CG-CD2 CD1-HD1 CD1-NE1 NE1-HE1 NE1-CE2 "
        "CE2-CD2 CE2-CZ2 CZ2-HZ2 CZ2-CH2 CH2-HH2 CH2-CZ3 CZ3-HZ3 CZ3-CE3 "
        "CE3-HE3 CE3-CD2"
    ),
    "TYR": _pairs(
        "CB-HB2 CB-HB3 CB-CG CG-CD1 CG-CD2 CD1-HD1 CD1-CE1 CD2-HD2 CD2-CE2 "
        "CE1-HE1 CE1-CZ CE2-HE2 CE2-CZ CZ-OH OH-HH"
    ),
    "VAL": _pairs(
        "CB-HB CB-CG1 CB-CG2 CG1-HG11 CG1-HG12 CG1-HG13 CG2-HG21 CG2-HG22 CG2-HG23"
    ),
}

CARBONYL = ("C", "O")
TERMINAL_CARBOXYL = ("C", "OXT")
ALPHA_HYDROGEN = ("CA", "HA")
ALPHA_BETA = ("CA", "CB")
# H for an internal residue, H1-H3 for a protonated N-terminus.
AMIDE_HYDROGENS = (("N", "H"), ("N", "H1"), ("N", "H2"), ("N", "H3"))


def bond_pairs(res_name: str) -> tuple[tuple[str, str], ...]:
    """Full ordered rule list for a residue type.

    Unknown types only get the rules that do not involve side-chain atoms.
    """
    name = res_name.upper()
    standard = name in SIDE_CHAIN_BONDS
    pairs: list[tuple[str, str]] = [CARBONYL]
    if name != "GLY":
        pairs.append(ALPHA_HYDROGEN)
        if standard:
            pairs.append(ALPHA_BETA)
    if name != "PRO":
        pairs.extend(AMIDE_HYDROGENS)
    pairs.append(TERMINAL_CARBOXYL)
    pairs.extend(SIDE_CHAIN_BONDS.get(name, ()))
    return tuple(pairs)


def resolve_residue_bonds(res_name: str, atoms_by_name: Mapping[str, Atom]) -> tuple[Bond, ...]:
    """Intra-residue bonds for the atoms actually present."""
    bonds = []
    for name_a, name_b in bond_pairs(res_name):
        atom_a = atoms_by_name.get(name_a)
        atom_b = atoms_by_name.get(name_b)
        if atom_a is None or atom_b is None:
            continue
        bonds.append(Bond(atom_a, atom_b, BondKind.INTRA_RESIDUE))
    return tuple(bonds)
