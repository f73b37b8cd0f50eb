"""Route run archive: one timestamped directory per optimized job."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ..config import settings


class FileStorage:
    """Keeps optimized routes under ``<data_root>/outputs``.

    Each run gets its own directory, where the routing service drops the route
    summary (``summary.json``) and the stop list (``stops.csv``).
    """

    def __init__(self, root: Path | None = None) -> None:
        self.root = (root or settings.data_root).resolve()
        self.output_root = self.root / "outputs"
        self.output_root.mkdir(parents=True, exist_ok=True)

    def make_run_directory(self, prefix: str = "route") -> Path:
        """Create ``<prefix>_<UTC timestamp>``, numbering repeats within one second."""
        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
        run_dir = self.output_root / f"{prefix}_{stamp}"
        attempt = 1
        while run_dir.exists():
            attempt += 1
            run_dir = self.output_root / f"{prefix}_{stamp}_{attempt}"
        run_dir.mkdir(parents=True, exist_ok=False)
        return run_dir

    def write_json(self, path: Path, data: Any, *, indent: int = 2) -> None:
        """Write a route summary; station names are kept as UTF-8 text."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, ensure_ascii=False, indent=indent), encoding="utf-8")

    def write_csv(self, path: Path, content: str) -> None:
        """Write an already rendered stop table without translating its line endings."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8", newline="") as handle:
            handle.write(content)
