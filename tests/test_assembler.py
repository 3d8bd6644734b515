"""Tests for residue/chain grouping and backbone bonds."""

import pytest

from pdbmodel.core.errors import DiagnosticKind
from pdbmodel.parsers.assembler import assemble, backbone_bonds, group_residues
from pdbmodel.parsers.base import Atom, BondKind


def _atom(serial, name, res_seq, chain_id="A", res_name="ALA", x=0.0, y=0.0, z=0.0, ins_code=""):
    return Atom(
        serial=serial, name=name, element=name[0], x=x, y=y, z=z,
        res_name=res_name, res_seq=res_seq, chain_id=chain_id, ins_code=ins_code,
    )


def _dipeptide(gap=0.0):
    """GLY 1 + ALA 2 in chain A, with ideal-ish backbone geometry."""
    return [
        _atom(1, "N", 1, res_name="GLY", x=0.000, y=0.000),
        _atom(2, "CA", 1, res_name="GLY", x=1.458, y=0.000),
        _atom(3, "C", 1, res_name="GLY", x=2.009, y=1.420),
        _atom(4, "O", 1, res_name="GLY", x=1.251, y=2.390),
        _atom(5, "N", 2, x=3.332 + gap, y=1.536),
        _atom(6, "CA", 2, x=3.988 + gap, y=2.839),
        _atom(7, "C", 2, x=5.504 + gap, y=2.693),
        _atom(8, "O", 2, x=6.067 + gap, y=1.600),
    ]


# -- Grouping ----------------------------------------------------------------


class TestGrouping:
    def test_empty_input(self):
        chains, diagnostics = assemble([])
        assert chains == ()
        assert diagnostics == []

    def test_partition_preserves_every_atom_in_order(self):
        atoms = _dipeptide()
        chains, _ = assemble(atoms)
        flattened = [a for c in chains for r in c.residues for a in r.atoms]
        assert flattened == atoms

    def test_residue_boundaries(self):
        residues, _ = group_residues(_dipeptide())
        assert [(r.name, r.seq_id) for r in residues] == [("GLY", 1), ("ALA", 2)]
        assert [r.num_atoms for r in residues] == [4, 4]

    def test_single_atom_residue(self):
        residues, _ = group_residues([_atom(1, "CA", 5)])
        assert len(residues) == 1
        assert residues[0].ca.serial == 1
        assert residues[0].bonds == ()

    def test_insertion_code_starts_new_residue(self):
        atoms = [_atom(1, "CA", 27), _atom(2, "CA", 27, ins_code="A")]
        residues, _ = group_residues(atoms)
        assert [(r.seq_id, r.ins_code) for r in residues] == [(27, ""), (27, "A")]

    def test_chain_order_follows_file(self):
        atoms = [_atom(1, "CA", 1, chain_id="B"), _atom(2, "CA", 1, chain_id="A")]
        chains, _ = assemble(atoms)
        assert [c.chain_id for c in chains] == ["B", "A"]

    def test_repeated_chain_id_after_break_is_new_chain(self):
        atoms = [
            _atom(1, "CA", 1, chain_id="A"),
            _atom(2, "CA", 1, chain_id="B"),
            _atom(3, "CA", 2, chain_id="A"),
        ]
        chains, _ = assemble(atoms)
        assert [c.chain_id for c in chains] == ["A", "B", "A"]

    def test_blank_chain_id(self):
        chains, _ = assemble([_atom(1, "CA", 1, chain_id="")])
        assert len(chains) == 1
        assert chains[0].chain_id == ""

    def test_intra_residue_bonds_attached(self):
        chains, _ = assemble(_dipeptide())
        gly, ala = chains[0].residues
        assert [b.names for b in gly.bonds] == [("C", "O")]
        assert [b.names for b in ala.bonds] == [("C", "O")]


class TestDuplicateAtomNames:
    def test_duplicate_name_keeps_every_atom(self):
        atoms = [_atom(1, "CA", 1, x=0.0), _atom(2, "CA", 1, x=5.0)]
        residues, diagnostics = group_residues(atoms)
        (res,) = residues
        assert res.num_atoms == 2
        assert res.get_atom("CA").serial == 2
        assert [d.kind for d in diagnostics] == [DiagnosticKind.DUPLICATE_ATOM_NAME]

    def test_residue_name_change_is_reported(self):
        atoms = [_atom(1, "N", 1, res_name="ALA"), _atom(2, "CA", 1, res_name="GLY")]
        residues, diagnostics = group_residues(atoms)
        assert len(residues) == 1
        assert residues[0].name == "ALA"
        assert len(diagnostics) == 1
        assert "GLY" in diagnostics[0].message


# -- Backbone ----------------------------------------------------------------


class TestBackboneBonds:
    def test_two_residue_peptide(self):
        chains, _ = assemble(_dipeptide())
        bonds = chains[0].backbone_bonds
        assert [(b.serial_a, b.serial_b) for b in bonds] == [(1, 2), (2, 3), (3, 5), (5, 6), (6, 7)]
        assert all(b.kind is BondKind.BACKBONE for b in bonds)
        assert all(b.length < 2.0 for b in bonds)

    def test_chain_break_is_not_bonded(self):
        chains, _ = assemble(_dipeptide(gap=3.0))
        pairs = [(b.serial_a, b.serial_b) for b in chains[0].backbone_bonds]
        assert (3, 5) not in pairs
        assert len(pairs) == 4

    def test_threshold_is_strict(self):
        residues, _ = group_residues([
            _atom(1, "N", 1, x=0.0),
            _atom(2, "CA", 1, x=2.0),
            _atom(3, "C", 1, x=3.999),
        ])
        bonds = backbone_bonds(residues, cutoff=2.0)
        assert [(b.serial_a, b.serial_b) for b in bonds] == [(2, 3)]

    @pytest.mark.parametrize("cutoff, expected", [(1.0, 0), (1.5, 3), (10.0, 5)])
    def test_cutoff(self, cutoff, expected):
        chains, _ = assemble(_dipeptide(), cutoff=cutoff)
        assert len(chains[0].backbone_bonds) == expected

    def test_backbone_does_not_cross_chains(self):
        atoms = [
            _atom(1, "N", 1, chain_id="A", x=0.0),
            _atom(2, "CA", 1, chain_id="A", x=1.4),
            _atom(3, "N", 1, chain_id="B", x=2.8),
            _atom(4, "CA", 1, chain_id="B", x=4.2),
        ]
        chains, _ = assemble(atoms)
        assert [len(c.backbone_bonds) for c in chains] == [1, 1]

    def test_side_chain_atoms_are_skipped(self):
        atoms = [
            _atom(1, "N", 1, x=0.0),
            _atom(2, "CB", 1, x=0.5),
            _atom(3, "CA", 1, x=1.4),
        ]
        residues, _ = group_residues(atoms)
        assert [(b.serial_a, b.serial_b) for b in backbone_bonds(residues)] == [(1, 3)]
