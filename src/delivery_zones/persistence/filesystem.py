"""Export files written under the data root."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ..config import settings


class FileStorage:
    """Each export gets its own timestamped folder under ``<data_root>/outputs``."""

    def __init__(self, root: Path | None = None) -> None:
        self.output_root = (root or settings.data_root).resolve() / "outputs"

    def save_export(self, kind: str, filename: str, payload: Any) -> Path:
        """Write ``payload`` as JSON to ``outputs/<kind>_<timestamp>/<filename>``."""
        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
        run_dir = self.output_root / f"{kind}_{stamp}"
        run_dir.mkdir(parents=True, exist_ok=False)
        path = run_dir / filename
        path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
        return path
