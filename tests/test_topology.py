"""Tests for the static intra-residue bond table."""

import pytest

from pdbmodel.parsers.base import THREE_TO_ONE, Atom, BondKind
from pdbmodel.parsers.topology import (
    AMIDE_HYDROGENS,
    SIDE_CHAIN_BONDS,
    bond_pairs,
    resolve_residue_bonds,
)


def _atoms(*names, res_name="ALA"):
    return {
        name: Atom(serial=i, name=name, element=name[0], x=float(i), y=0.0, z=0.0, res_name=res_name)
        for i, name in enumerate(names, start=1)
    }


def _names(bonds):
    return {frozenset((b.atom_a.name, b.atom_b.name)) for b in bonds}


class TestBondTable:
    def test_covers_standard_residues(self):
        assert set(SIDE_CHAIN_BONDS) == set(THREE_TO_ONE)

    @pytest.mark.parametrize("res_name", sorted(THREE_TO_ONE))
    def test_no_self_bonds_or_repeats(self, res_name):
        pairs = bond_pairs(res_name)
        assert all(a != b for a, b in pairs)
        assert len({frozenset(p) for p in pairs}) == len(pairs)

    def test_shared_rules_for_alanine(self):
        pairs = bond_pairs("ALA")
        assert ("C", "O") in pairs
        assert ("C", "OXT") in pairs
        assert ("CA", "HA") in pairs
        assert ("CA", "CB") in pairs
        for p in AMIDE_HYDROGENS:
            assert p in pairs

    def test_glycine_has_no_beta_carbon_or_ha(self):
        pairs = bond_pairs("GLY")
        assert ("CA", "CB") not in pairs
        assert ("CA", "HA") not in pairs
        assert ("CA", "HA2") in pairs
        assert ("CA", "HA3") in pairs

    def test_proline_ring_replaces_amide_hydrogen(self):
        pairs = bond_pairs("PRO")
        assert ("CD", "N") in pairs
        for p in AMIDE_HYDROGENS:
            assert p not in pairs

    def test_unknown_residue_gets_backbone_rules_only(self):
        pairs = bond_pairs("XYZ")
        assert ("C", "O") in pairs
        assert ("CA", "HA") in pairs
        assert ("CA", "CB") not in pairs
        assert len(pairs) == 1 + 1 + len(AMIDE_HYDROGENS) + 1

    def test_lowercase_name(self):
        assert bond_pairs("ser") == bond_pairs("SER")

    def test_valine_and_arginine_side_chains_are_complete(self):
        assert ("CB", "CG1") in bond_pairs("VAL")
        assert ("CB", "CG2") in bond_pairs("VAL")
        assert ("CG", "CD") in bond_pairs("ARG")


class TestResolveResidueBonds:
    def test_missing_atoms_are_skipped(self):
        atoms = _atoms("N", "CA", "C", "O")
        bonds = resolve_residue_bonds("ALA", atoms)
        assert _names(bonds) == {frozenset(("C", "O"))}

    def test_full_serine(self):
        atoms = _atoms("N", "CA", "C", "O", "CB", "OG", res_name="SER")
        bonds = resolve_residue_bonds("SER", atoms)
        assert _names(bonds) == {
            frozenset(("C", "O")),
            frozenset(("CA", "CB")),
            frozenset(("CB", "OG")),
        }
        assert all(b.kind is BondKind.INTRA_RESIDUE for b in bonds)

    def test_subset_of_table(self):
        atoms = _atoms("N", "CA", "C", "O", "CB", "CG", "CD", "NE", "CZ", "NH1", res_name="ARG")
        bonds = resolve_residue_bonds("ARG", atoms)
        table = {frozenset(p) for p in bond_pairs("ARG")}
        assert _names(bonds) <= table
        assert frozenset(("CZ", "NH2")) not in _names(bonds)

    def test_terminal_oxygen(self):
        atoms = _atoms("C", "O", "OXT")
        assert frozenset(("C", "OXT")) in _names(resolve_residue_bonds("GLY", atoms))

    def test_n_terminal_hydrogens(self):
        atoms = _atoms("N", "H1", "H2", "H3", "CA")
        names = _names(resolve_residue_bonds("LYS", atoms))
        assert {frozenset(("N", h)) for h in ("H1", "H2", "H3")} <= names

    def test_empty_residue(self):
        assert resolve_residue_bonds("ALA", {}) == ()

    def test_bond_serials_follow_atoms(self):
        atoms = _atoms("C", "O")
        (bond,) = resolve_residue_bonds("ALA", atoms)
        assert {bond.serial_a, bond.serial_b} == {1, 2}
        assert not bond.is_dangling
        assert bond.length == pytest.approx(1.0)
