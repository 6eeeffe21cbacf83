"""CSV/JSON export of a finished analysis session."""

from __future__ import annotations

import csv
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from .models import SignalPoint, VitalSignsResults


@dataclass
class RecorderConfig:
    out_dir: Path
    base_name: str = "session"


class Recorder:
    """Write the raw signal to CSV and the results plus metadata to JSON."""

    def __init__(self, cfg: RecorderConfig) -> None:
        self.cfg = cfg
        self.cfg.out_dir = Path(self.cfg.out_dir)
        self.csv_path = self.cfg.out_dir / f"{self.cfg.base_name}.csv"
        self.meta_path = self.cfg.out_dir / f"{self.cfg.base_name}.json"

    def write_signal(self, signal: Sequence[SignalPoint]) -> Path:
        self.cfg.out_dir.mkdir(parents=True, exist_ok=True)
        with self.csv_path.open("w", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(["t_ms", "value"])
            for p in signal:
                writer.writerow([f"{p.t:.1f}", f"{p.v:.6f}"])
        return self.csv_path

    def write_meta(self, results: VitalSignsResults, meta: Optional[dict] = None) -> Path:
        self.cfg.out_dir.mkdir(parents=True, exist_ok=True)
        doc = {"results": results.to_dict(), **(meta or {})}
        self.meta_path.write_text(json.dumps(doc, ensure_ascii=False, indent=2))
        return self.meta_path

    def save(
        self,
        signal: Sequence[SignalPoint],
        results: VitalSignsResults,
        meta: Optional[dict] = None,
    ) -> None:
        self.write_signal(signal)
        self.write_meta(results, meta)
