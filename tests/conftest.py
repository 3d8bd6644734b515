"""Fixed-column line builders shared by the test modules."""

from pathlib import Path

import pytest

FIXTURES = Path(__file__).resolve().parent / "fixtures"


def atom_line(
    serial,
    name,
    res_name,
    chain_id,
    res_seq,
    x,
    y,
    z,
    record="ATOM",
    alt_loc="",
    ins_code="",
    occupancy=1.0,
    b_factor=0.0,
    element="",
):
    padded = f" {name:<3}" if len(name) < 4 else name
    return (
        f"{record:<6}{serial:>5} {padded:<4}{alt_loc:1}{res_name:>3} {chain_id:1}{res_seq:>4}{ins_code:1}   "
        f"{x:>8.3f}{y:>8.3f}{z:>8.3f}{occupancy:>6.2f}{b_factor:>6.2f}          {element:>2}"
    )


def helix_line(serial, init_res, init_chain, init_seq, end_res, end_chain, end_seq, helix_id="1", helix_class=1, length=0):
    return (
        f"HELIX {serial:>4} {helix_id:>3} {init_res:>3} {init_chain:1} {init_seq:>4}  "
        f"{end_res:>3} {end_chain:1} {end_seq:>4} {helix_class:>2}{'':30} {length:>5}"
    )


def sheet_line(strand, init_res, init_chain, init_seq, end_res, end_chain, end_seq, sheet_id="A", num_strands=2, sense=0):
    return (
        f"SHEET {strand:>4} {sheet_id:>3}{num_strands:>2} {init_res:>3} {init_chain:1}{init_seq:>4}  "
        f"{end_res:>3} {end_chain:1}{end_seq:>4} {sense:>2}"
    )


def conect_line(serial, *partners):
    return "CONECT" + f"{serial:>5}" + "".join(f"{p:>5}" for p in partners)


def link_line(name1, res1, chain1, seq1, name2, res2, chain2, seq2):
    return (
        f"LINK        {name1:<4} {res1:>3} {chain1:1}{seq1:>4}"
        f"{'':16}{name2:<4} {res2:>3} {chain2:1}{seq2:>4}"
    )


def seqres_line(serial, chain_id, num_res, names):
    return f"SEQRES {serial:>3} {chain_id:1} {num_res:>4}  " + " ".join(f"{n:>3}" for n in names)


def header_line(classification, date, id_code):
    return f"HEADER    {classification:<40}{date:9}   {id_code:4}"


@pytest.fixture
def sample_pdb() -> Path:
    return FIXTURES / "sample.pdb"


@pytest.fixture
def write_pdb(tmp_path):
    """Write lines to a .pdb file under tmp_path and return its path."""

    def _write(lines, name="test.pdb"):
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n")
        return path

    return _write
