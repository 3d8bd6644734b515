"""Fixed-column record parser for the PDB flat-file format.

Each line is classified by its record name (columns 0-5, stripped) and the
record kinds the model needs are split into typed fields. Column ranges are
0-based and end-exclusive, following the wwPDB v3.3 layout.

A field is *required* when the record is meaningless without it. Required
fields past the end of the line, and numeric fields that do not convert,
raise MalformedRecordError. Optional trailing fields fall back to defaults.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Union

from pdbmodel.core.errors import MalformedRecordError
from pdbmodel.parsers.base import Atom


class RecordKind(str, Enum):
    HEADER = "HEADER"
    TITLE = "TITLE"
    REMARK = "REMARK"
    ATOM = "ATOM"
    HETATM = "HETATM"
    LINK = "LINK"
    CONECT = "CONECT"
    SEQRES = "SEQRES"
    HELIX = "HELIX"
    SHEET = "SHEET"
    MODEL = "MODEL"
    ENDMDL = "ENDMDL"
    TER = "TER"
    OTHER = "OTHER"


_KINDS = {k.value: k for k in RecordKind if k is not RecordKind.OTHER}


def classify(line: str) -> RecordKind:
    """Record kind from the leading six columns; unknown names are OTHER."""
    return _KINDS.get(line[:6].strip(), RecordKind.OTHER)


# ======================================================================
# Typed records
# ======================================================================

@dataclass(frozen=True)
class MarkerRecord:
    """Record with no payload (TER, ENDMDL, and anything unrecognized)."""

    kind: RecordKind


@dataclass(frozen=True)
class TextRecord:
    """Free-text record destined for the metadata blob (TITLE, REMARK)."""

    kind: RecordKind
    text: str
    remark_number: Optional[int] = None


@dataclass(frozen=True)
class HeaderRecord:
    text: str
    deposit_date: Optional[str] = None
    id_code: str = ""

    kind = RecordKind.HEADER


@dataclass(frozen=True)
class AtomRecord:
    kind: RecordKind
    atom: Atom


@dataclass(frozen=True)
class ModelRecord:
    serial: Optional[int] = None

    kind = RecordKind.MODEL


@dataclass(frozen=True)
class HelixRecord:
    serial: int
    helix_id: str
    init_res_name: str
    init_chain_id: str
    init_seq: int
    end_res_name: str
    end_chain_id: str
    end_seq: int
    init_ins_code: str = ""
    end_ins_code: str = ""
    helix_class: Optional[int] = None
    length: Optional[int] = None

    kind = RecordKind.HELIX


@dataclass(frozen=True)
class SheetRecord:
    strand: int
    sheet_id: str
    num_strands: int
    init_res_name: str
    init_chain_id: str
    init_seq: int
    end_res_name: str
    end_chain_id: str
    end_seq: int
    init_ins_code: str = ""
    end_ins_code: str = ""
    sense: Optional[int] = None

    kind = RecordKind.SHEET


@dataclass(frozen=True)
class ConectRecord:
    serial: int
    partners: tuple[int, ...] = ()

    kind = RecordKind.CONECT

    def pairs(self) -> list[tuple[int, int]]:
        return [(self.serial, p) for p in self.partners]


@dataclass(frozen=True)
class LinkEnd:
    atom_name: str
    res_name: str
    chain_id: str
    res_seq: int
    alt_loc: str = ""
    ins_code: str = ""


@dataclass(frozen=True)
class LinkRecord:
    first: LinkEnd
    second: LinkEnd
    distance: Optional[float] = None

    kind = RecordKind.LINK


@dataclass(frozen=True)
class SeqresRecord:
    serial: int
    chain_id: str
    num_res: int
    residues: tuple[str, ...] = ()

    kind = RecordKind.SEQRES


Record = Union[
    MarkerRecord, TextRecord, HeaderRecord, AtomRecord, ModelRecord,
    HelixRecord, SheetRecord, ConectRecord, LinkRecord, SeqresRecord,
]


# ======================================================================
# Field helpers
# ======================================================================

def _required(line: str, start: int, end: int, label: str) -> str:
    if len(line) < end:
        raise MalformedRecordError(
            f"{label} needs columns {start + 1}-{end}, line has {len(line)}", line=line
        )
    return line[start:end].strip()


def _optional(line: str, start: int, end: int) -> str:
    return line[start:end].strip()


def _to_int(value: str, label: str, line: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise MalformedRecordError(f"{label}: invalid integer {value!r}", line=line) from exc


def _to_float(value: str, label: str, line: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise MalformedRecordError(f"{label}: invalid number {value!r}", line=line) from exc


def _req_int(line: str, start: int, end: int, label: str) -> int:
    return _to_int(_required(line, start, end, label), label, line)


def _opt_int(line: str, start: int, end: int, label: str) -> Optional[int]:
    value = _optional(line, start, end)
    return _to_int(value, label, line) if value else None


def _opt_float(line: str, start: int, end: int, label: str, default: Optional[float]) -> Optional[float]:
    value = _optional(line, start, end)
    return _to_float(value, label, line) if value else default


def infer_element(raw_name: str) -> str:
    """Element symbol from the 4-column atom name field.

    By convention the element is right-justified in columns 12-13, so a
    name starting with a blank or a digit (" CA ", "1HB ") carries a
    one-letter element, while one starting at column 12 ("FE  ") carries two.
    """
    if not raw_name.strip():
        return ""
    if raw_name[0] in " 0123456789":
        letters = re.sub(r"[^A-Za-z]", "", raw_name[1:])
        return letters[:1].upper()
    letters = re.sub(r"[^A-Za-z]", "", raw_name)
    if letters[:1].upper() == "H" and len(raw_name.strip()) == 4:
        return "H"
    return letters[:2].upper()


# ======================================================================
# Per-kind parsers
# ======================================================================

def _parse_header(line: str) -> HeaderRecord:
    return HeaderRecord(
        text=line[10:50].rstrip(),
        deposit_date=_optional(line, 50, 59) or None,
        id_code=_optional(line, 62, 66),
    )


def _parse_title(line: str) -> TextRecord:
    return TextRecord(kind=RecordKind.TITLE, text=line[10:80].rstrip())


def _parse_remark(line: str) -> TextRecord:
    return TextRecord(
        kind=RecordKind.REMARK,
        text=line[11:79].rstrip(),
        remark_number=_opt_int(line, 7, 10, "REMARK number"),
    )


def _parse_atom(line: str) -> AtomRecord:
    kind = classify(line)
    z_text = _required(line, 46, 54, "z coordinate")
    raw_name = line[12:16]
    element = _optional(line, 76, 78).upper() or infer_element(raw_name)
    atom = Atom(
        serial=_req_int(line, 6, 11, "serial"),
        name=raw_name.strip(),
        element=element,
        x=_to_float(_required(line, 30, 38, "x coordinate"), "x coordinate", line),
        y=_to_float(_required(line, 38, 46, "y coordinate"), "y coordinate", line),
        z=_to_float(z_text, "z coordinate", line),
        res_name=line[17:20].strip(),
        res_seq=_req_int(line, 22, 26, "residue sequence number"),
        chain_id=line[21:22].strip(),
        ins_code=line[26:27].strip(),
        alt_loc=line[16:17].strip(),
        occupancy=_opt_float(line, 54, 60, "occupancy", 1.0),
        b_factor=_opt_float(line, 60, 66, "temperature factor", 0.0),
        charge=_optional(line, 78, 80),
        hetero=kind is RecordKind.HETATM,
    )
    return AtomRecord(kind=kind, atom=atom)


def _parse_model(line: str) -> ModelRecord:
    return ModelRecord(serial=_opt_int(line, 10, 14, "model serial"))


def _parse_helix(line: str) -> HelixRecord:
    return HelixRecord(
        serial=_req_int(line, 7, 10, "helix serial"),
        helix_id=_required(line, 11, 14, "helix id"),
        init_res_name=_required(line, 15, 18, "initial residue name"),
        init_chain_id=_required(line, 19, 20, "initial chain id"),
        init_seq=_req_int(line, 21, 25, "initial sequence number"),
        init_ins_code=_optional(line, 25, 26),
        end_res_name=_required(line, 27, 30, "terminal residue name"),
        end_chain_id=_required(line, 31, 32, "terminal chain id"),
        end_seq=_req_int(line, 33, 37, "terminal sequence number"),
        end_ins_code=_optional(line, 37, 38),
        helix_class=_opt_int(line, 38, 40, "helix class"),
        length=_opt_int(line, 71, 76, "helix length"),
    )


def _parse_sheet(line: str) -> SheetRecord:
    return SheetRecord(
        strand=_req_int(line, 7, 10, "strand number"),
        sheet_id=_required(line, 11, 14, "sheet id"),
        num_strands=_req_int(line, 14, 16, "number of strands"),
        init_res_name=_required(line, 17, 20, "initial residue name"),
        init_chain_id=_required(line, 21, 22, "initial chain id"),
        init_seq=_req_int(line, 22, 26, "initial sequence number"),
        init_ins_code=_optional(line, 26, 27),
        end_res_name=_required(line, 28, 31, "terminal residue name"),
        end_chain_id=_required(line, 32, 33, "terminal chain id"),
        end_seq=_req_int(line, 33, 37, "terminal sequence number"),
        end_ins_code=_optional(line, 37, 38),
        sense=_opt_int(line, 38, 40, "strand sense"),
    )


def _parse_conect(line: str) -> ConectRecord:
    serial = _req_int(line, 6, 11, "CONECT serial")
    partners = []
    for start in (11, 16, 21, 26):
        value = _optional(line, start, start + 5)
        if value:
            partners.append(_to_int(value, "bonded atom serial", line))
    return ConectRecord(serial=serial, partners=tuple(partners))


def _parse_link(line: str) -> LinkRecord:
    first = LinkEnd(
        atom_name=_required(line, 12, 16, "first atom name"),
        alt_loc=_optional(line, 16, 17),
        res_name=_required(line, 17, 20, "first residue name"),
        chain_id=_required(line, 21, 22, "first chain id"),
        res_seq=_req_int(line, 22, 26, "first residue sequence number"),
        ins_code=_optional(line, 26, 27),
    )
    second = LinkEnd(
        atom_name=_required(line, 42, 46, "second atom name"),
        alt_loc=_optional(line, 46, 47),
        res_name=_required(line, 47, 50, "second residue name"),
        chain_id=_required(line, 51, 52, "second chain id"),
        res_seq=_req_int(line, 52, 56, "second residue sequence number"),
        ins_code=_optional(line, 56, 57),
    )
    return LinkRecord(first=first, second=second, distance=_opt_float(line, 73, 78, "link distance", None))


def _parse_seqres(line: str) -> SeqresRecord:
    return SeqresRecord(
        serial=_req_int(line, 7, 10, "SEQRES serial"),
        chain_id=_required(line, 11, 12, "chain id"),
        num_res=_req_int(line, 13, 17, "number of residues"),
        residues=tuple(line[19:70].split()),
    )


_PARSERS: dict[RecordKind, Callable[[str], Record]] = {
    RecordKind.HEADER: _parse_header,
    RecordKind.TITLE: _parse_title,
    RecordKind.REMARK: _parse_remark,
    RecordKind.ATOM: _parse_atom,
    RecordKind.HETATM: _parse_atom,
    RecordKind.MODEL: _parse_model,
    RecordKind.HELIX: _parse_helix,
    RecordKind.SHEET: _parse_sheet,
    RecordKind.CONECT: _parse_conect,
    RecordKind.LINK: _parse_link,
    RecordKind.SEQRES: _parse_seqres,
}


def parse_record(line: str) -> Record:
    """Parse one line (without its newline) into a typed record.

    Raises MalformedRecordError when a required field is missing or invalid.
    """
    kind = classify(line)
    parser = _PARSERS.get(kind)
    if parser is None:
        return MarkerRecord(kind=kind)
    return parser(line)
