"""pdbmodel.parsers: PDB flat file -> hierarchical structural model.

Architecture:
    - records.py: fixed-column record classification and field extraction
    - assembler.py: atoms -> residues -> chains, backbone bonds
    - topology.py: static intra-residue bond table
    - annotations.py: HELIX/SHEET/CONECT/LINK resolution
    - base.py: Model, Chain, Residue, Atom, Bond, SecondaryStructure
    - pdb_format.py: PDBFormatParser (drives the three phases above)
    - dataset.py: StructureDataset (many files, parsed lazily)

Usage::

    from pdbmodel.parsers import PDBFormatParser

    model = PDBFormatParser().parse("1crn.pdb")
    for chain in model.chains:
        print(chain.chain_id, chain.sequence, len(chain.backbone_bonds))
    for helix in model.helices:
        if not helix.is_empty:
            print(helix.start.seq_id, helix.end.seq_id)
    print(model.diagnostic_counts())
"""

from pdbmodel.parsers.base import (
    Atom,
    Bond,
    BondKind,
    Chain,
    Model,
    Residue,
    SecondaryStructure,
    StructureHeader,
)
from pdbmodel.parsers.records import RecordKind, classify, parse_record
from pdbmodel.parsers.topology import bond_pairs, resolve_residue_bonds
from pdbmodel.parsers.pdb_format import PDBFormatParser, parse_pdb
from pdbmodel.parsers.dataset import StructureDataset

__all__ = [
    # Model
    "Atom",
    "Bond",
    "BondKind",
    "Chain",
    "Model",
    "Residue",
    "SecondaryStructure",
    "StructureHeader",
    # Records
    "RecordKind",
    "classify",
    "parse_record",
    # Topology
    "bond_pairs",
    "resolve_residue_bonds",
    # Parser
    "PDBFormatParser",
    "parse_pdb",
    "StructureDataset",
]
