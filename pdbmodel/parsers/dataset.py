"""StructureDataset: a lazily parsed collection of PDB files.

Each file is parsed on first access and cached. Parsing failures are
logged and re-raised; they are never turned into empty models.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterator, Optional, overload

from pdbmodel.core.logging_utils import get_logger
from pdbmodel.parsers.base import Model
from pdbmodel.parsers.pdb_format import PDBFormatParser

logger = get_logger(__name__)


class StructureDataset:
    """A dataset of parsed structures.

    Usage::

        from pdbmodel.parsers import StructureDataset

        ds = StructureDataset.from_directory("structures/", pattern="*.pdb")
        for model in ds:
            print(model.entry_id, model.num_chains, len(model.heteroatoms))

        helical = ds.filter(lambda m: len(m.helices) > 0)
    """

    def __init__(self, paths: list[Path], parser: Optional[PDBFormatParser] = None):
        self._paths = paths
        self._parser = parser
        self._cache: dict[int, Model] = {}

    @classmethod
    def from_paths(cls, paths: list[str | Path], parser: Optional[PDBFormatParser] = None) -> "StructureDataset":
        """Create from a list of file paths (strings or Path objects)."""
        return cls([Path(p) for p in paths], parser=parser)

    @classmethod
    def from_directory(
        cls,
        directory: str | Path,
        pattern: str = "*.pdb",
        parser: Optional[PDBFormatParser] = None,
    ) -> "StructureDataset":
        """Create from all matching files in a directory."""
        d = Path(directory)
        paths = sorted(d.rglob(pattern))
        logger.info("StructureDataset: found %d files matching '%s' in %s", len(paths), pattern, d)
        return cls(paths, parser=parser)

    def __len__(self) -> int:
        return len(self._paths)

    @overload
    def __getitem__(self, idx: int) -> Model: ...
    @overload
    def __getitem__(self, idx: slice) -> list[Model]: ...

    def __getitem__(self, idx):
        if isinstance(idx, slice):
            return [self._load(i) for i in range(*idx.indices(len(self)))]
        if idx < 0:
            idx = len(self) + idx
        return self._load(idx)

    def __iter__(self) -> Iterator[Model]:
        for i in range(len(self)):
            yield self._load(i)

    def _load(self, idx: int) -> Model:
        if idx in self._cache:
            return self._cache[idx]
        if self._parser is None:
            self._parser = PDBFormatParser()
        path = self._paths[idx]
        try:
            model = self._parser.parse(path)
        except Exception as e:
            logger.error("Failed to parse %s: %s", path, e)
            raise
        self._cache[idx] = model
        return model

    @property
    def paths(self) -> list[Path]:
        return list(self._paths)

    @property
    def entry_ids(self) -> list[str]:
        """Entry IDs of all structures (parses lazily)."""
        return [m.entry_id for m in self]

    def filter(self, predicate: Callable[[Model], bool]) -> "StructureDataset":
        """Return a new dataset with only structures matching the predicate.

        Note: this triggers parsing of all structures.
        """
        indices = [i for i in range(len(self)) if predicate(self._load(i))]
        paths = [self._paths[i] for i in indices]
        ds = StructureDataset(paths, parser=self._parser)
        for new_idx, old_idx in enumerate(indices):
            if old_idx in self._cache:
                ds._cache[new_idx] = self._cache[old_idx]
        return ds

    def to_list(self) -> list[Model]:
        """Parse all structures and return as a list."""
        return [self._load(i) for i in range(len(self))]

    def summary(self) -> dict:
        """Parse all and return summary statistics."""
        models = self.to_list()
        resolutions = [m.header.resolution for m in models if m.header.resolution is not None]
        return {
            "total": len(models),
            "resolution_mean": sum(resolutions) / len(resolutions) if resolutions else None,
            "total_chains": sum(m.num_chains for m in models),
            "total_residues": sum(len(m.residues) for m in models),
            "total_atoms": sum(m.num_atoms for m in models),
            "total_heteroatoms": sum(len(m.heteroatoms) for m in models),
            "total_diagnostics": sum(len(m.diagnostics) for m in models),
        }

    def __repr__(self) -> str:
        return f"<StructureDataset n={len(self)} paths={self._paths[:3]}...>"
