"""Legacy PDB format parser.

Reads a .pdb / .ent file (or an open text stream) top to bottom once and
returns a Model. The work happens in three phases:

    1. records      every line -> typed record; MODEL/ENDMDL drive a small
                    state machine so only the first coordinate model's ATOM
                    records are kept (HETATM records are always kept)
    2. assembly     ATOM records -> residues -> chains (+ residue topology)
    3. annotations  HELIX/SHEET/CONECT/LINK resolved against the hierarchy

Each call to ``parse`` owns its accumulators, so one parser instance can be
reused for any number of files.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, TextIO, Union

from pdbmodel.config import ParserSettings, load_settings
from pdbmodel.core.errors import Diagnostic, DiagnosticKind, MalformedRecordError, SourceUnavailableError
from pdbmodel.core.logging_utils import get_logger
from pdbmodel.parsers.annotations import ChainIndex, resolve_conect, resolve_links, resolve_secondary
from pdbmodel.parsers.assembler import assemble
from pdbmodel.parsers.base import Atom, Model, StructureHeader
from pdbmodel.parsers.records import (
    AtomRecord,
    ConectRecord,
    HeaderRecord,
    HelixRecord,
    LinkRecord,
    ModelRecord,
    RecordKind,
    SeqresRecord,
    SheetRecord,
    TextRecord,
    classify,
    parse_record,
)

logger = get_logger(__name__)

Source = Union[str, Path, TextIO]

_RESOLUTION_RE = re.compile(r"RESOLUTION\.\s*(\d+\.\d+)\s*ANGSTROM", re.I)


@dataclass
class _ParseState:
    """Accumulators for a single parse call."""

    atoms: list[Atom] = field(default_factory=list)
    heteroatoms: list[Atom] = field(default_factory=list)
    helices: list[HelixRecord] = field(default_factory=list)
    sheets: list[SheetRecord] = field(default_factory=list)
    conects: list[ConectRecord] = field(default_factory=list)
    links: list[LinkRecord] = field(default_factory=list)
    seqres: dict[str, list[str]] = field(default_factory=dict)
    meta_lines: list[str] = field(default_factory=list)
    title_parts: list[str] = field(default_factory=list)
    header: Optional[HeaderRecord] = None
    resolution: Optional[float] = None
    diagnostics: list[Diagnostic] = field(default_factory=list)
    in_model: bool = False
    model_count: int = 0
    skipped_atoms: int = 0


class PDBFormatParser:
    """Parse PDB-format files (.pdb, .ent) into a Model.

    ``status`` receives short progress strings at phase boundaries; it is
    meant for UI collaborators and is never required for correctness.

    ``Model.metadata`` joins the HEADER, TITLE and REMARK text columns with
    trailing blanks stripped, so it is not a byte-for-byte copy of the file.
    ``settings.log_level`` is applied to the ``pdbmodel`` logger on creation.
    """

    def __init__(
        self,
        settings: Optional[ParserSettings] = None,
        status: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.settings = settings or load_settings()
        self._status = status
        get_logger("pdbmodel", level=self.settings.log_level)

    def parse(self, source: Source) -> Model:
        """Parse a path or an open text stream.

        Raises SourceUnavailableError if the source cannot be read, and
        MalformedRecordError on the first bad line when ``settings.strict``.
        """
        self._notify("Parsing file...")
        lines, path = self._read_lines(source)
        state = _ParseState()
        for line_number, raw in enumerate(lines, start=1):
            self._consume_line(raw.rstrip("\r\n"), line_number, state)
        if state.in_model:
            logger.warning("MODEL %d in %s is not closed by ENDMDL", state.model_count + 1, path or "<stream>")
        if state.skipped_atoms:
            logger.debug("Ignored %d ATOM records after the first model", state.skipped_atoms)

        self._notify("Assembling...")
        chains, diagnostics = assemble(state.atoms, cutoff=self.settings.backbone_cutoff)
        state.diagnostics.extend(diagnostics)

        self._notify("Resolving annotations...")
        index = ChainIndex.build(chains)
        helices, d_helix = resolve_secondary(state.helices, "helix", index)
        sheets, d_sheet = resolve_secondary(state.sheets, "sheet", index)
        conect_bonds, d_conect = resolve_conect(state.conects, index)
        link_bonds, d_link = resolve_links(state.links, index)
        for d in (d_helix, d_sheet, d_conect, d_link):
            state.diagnostics.extend(d)

        model = Model(
            chains=chains,
            heteroatoms=tuple(state.heteroatoms),
            helices=helices,
            sheets=sheets,
            explicit_bonds=conect_bonds + link_bonds,
            metadata="".join(f"{text}\n" for text in state.meta_lines),
            header=self._build_header(state),
            seqres={cid: tuple(names) for cid, names in state.seqres.items()},
            model_count=state.model_count,
            diagnostics=tuple(state.diagnostics),
            source_path=path,
        )
        counts = model.diagnostic_counts()
        logger.info(
            "Parsed %s: chains=%d residues=%d atoms=%d hetatm=%d malformed=%d unresolved=%d",
            path or "<stream>", model.num_chains, len(model.residues), model.num_atoms,
            len(model.heteroatoms), counts[DiagnosticKind.MALFORMED_RECORD.value],
            counts[DiagnosticKind.UNRESOLVED_ANNOTATION.value],
        )
        if counts[DiagnosticKind.UNRESOLVED_ANNOTATION.value]:
            logger.warning(
                "%d annotation(s) in %s refer to missing residues or atoms",
                counts[DiagnosticKind.UNRESOLVED_ANNOTATION.value], path or "<stream>",
            )
        self._notify("")
        return model

    def _consume_line(self, line: str, line_number: int, state: _ParseState) -> None:
        kind = classify(line)
        if kind is RecordKind.ATOM and state.model_count > 0:
            state.skipped_atoms += 1
            return
        try:
            record = parse_record(line)
        except MalformedRecordError as exc:
            exc.line_number = line_number
            if self.settings.strict:
                raise
            logger.debug("Skipping malformed line %d: %s", line_number, exc.message)
            state.diagnostics.append(Diagnostic(
                DiagnosticKind.MALFORMED_RECORD, exc.message, line_number=line_number, details=line,
            ))
            return

        if isinstance(record, AtomRecord):
            if record.kind is RecordKind.HETATM:
                state.heteroatoms.append(record.atom)
            else:
                state.atoms.append(record.atom)
        elif isinstance(record, HeaderRecord):
            state.header = record
            state.meta_lines.append(record.text)
        elif isinstance(record, TextRecord):
            state.meta_lines.append(record.text)
            if record.kind is RecordKind.TITLE:
                state.title_parts.append(record.text.strip())
            elif record.remark_number == 2 and state.resolution is None:
                m = _RESOLUTION_RE.search(record.text)
                if m:
                    state.resolution = float(m.group(1))
        elif isinstance(record, ModelRecord):
            state.in_model = True
        elif kind is RecordKind.ENDMDL:
            state.model_count += 1
            state.in_model = False
        elif isinstance(record, HelixRecord):
            state.helices.append(record)
        elif isinstance(record, SheetRecord):
            state.sheets.append(record)
        elif isinstance(record, ConectRecord):
            state.conects.append(record)
        elif isinstance(record, LinkRecord):
            state.links.append(record)
        elif isinstance(record, SeqresRecord):
            state.seqres.setdefault(record.chain_id, []).extend(record.residues)

    @staticmethod
    def _build_header(state: _ParseState) -> StructureHeader:
        h = state.header
        return StructureHeader(
            entry_id=h.id_code if h else "",
            classification=h.text.strip() if h else "",
            deposit_date=h.deposit_date if h else None,
            title=" ".join(p for p in state.title_parts if p) or None,
            resolution=state.resolution,
        )

    def _read_lines(self, source: Source) -> tuple[list[str], Optional[Path]]:
        if hasattr(source, "read"):
            try:
                return source.readlines(), None
            except (OSError, ValueError) as exc:
                raise SourceUnavailableError(f"Cannot read stream: {exc}") from exc
        path = Path(source)
        try:
            with open(path, "r", encoding=self.settings.encoding, errors="ignore") as f:
                return f.readlines(), path
        except OSError as exc:
            raise SourceUnavailableError(f"Cannot read {path}: {exc}", details=str(path)) from exc

    def _notify(self, message: str) -> None:
        if message:
            logger.debug(message)
        if self._status is not None:
            self._status(message)

    @staticmethod
    def extensions() -> list[str]:
        return [".pdb", ".ent"]


def parse_pdb(
    source: Source,
    settings: Optional[ParserSettings] = None,
    status: Optional[Callable[[str], None]] = None,
) -> Model:
    """Convenience wrapper: ``PDBFormatParser(settings, status).parse(source)``."""
    return PDBFormatParser(settings=settings, status=status).parse(source)
