from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

_env_path = Path(__file__).resolve().parents[1] / ".env"
if _env_path.is_file():
    load_dotenv(_env_path, override=False)


@dataclass
class ParserSettings:
    """Configuration loaded from PDBMODEL_* environment variables.

      PDBMODEL_STRICT=false          raise on the first malformed record
      PDBMODEL_BACKBONE_CUTOFF=2.0   max N/CA/C distance (Angstrom) for a backbone bond
      PDBMODEL_ENCODING=utf-8        text encoding used when opening paths
      PDBMODEL_LOG_LEVEL=INFO
    """

    strict: bool = False
    backbone_cutoff: float = 2.0
    encoding: str = "utf-8"
    log_level: str = "INFO"


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ("true", "1", "yes")


def load_settings() -> ParserSettings:
    """Load settings from environment variables."""
    return ParserSettings(
        strict=_env_bool("PDBMODEL_STRICT", "false"),
        backbone_cutoff=float(os.environ.get("PDBMODEL_BACKBONE_CUTOFF", "2.0")),
        encoding=os.environ.get("PDBMODEL_ENCODING", "utf-8"),
        log_level=os.environ.get("PDBMODEL_LOG_LEVEL", "INFO"),
    )
