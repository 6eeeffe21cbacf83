"""Command-line entry point: analyze a recorded face video.

Run with: `uv run python run_app.py VIDEO`
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Optional, Sequence


def _setup_logging(logs_dir_name: str) -> None:
    import faulthandler
    import logging
    from pathlib import Path

    logs_dir = Path(logs_dir_name)
    logs_dir.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
        handlers=[
            logging.FileHandler(logs_dir / "app.log", encoding="utf-8"),
            logging.StreamHandler(),
        ],
    )
    fh = (logs_dir / "faulthandler.log").open("w")
    faulthandler.enable(fh)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="facevitals",
        description="Estimate heart rate, HRV and respiratory rate from a face video.",
    )
    parser.add_argument("video", help="Path to a recording of at least 30 seconds")
    parser.add_argument("--fps", type=float, default=20.0, help="Sampling rate (Hz)")
    parser.add_argument("--no-previews", action="store_true", help="Skip JPEG previews")
    parser.add_argument("--out", default=None, help="Directory for signal CSV/results JSON")
    parser.add_argument("--name", default="session", help="Base name of exported files")
    parser.add_argument("--log-dir", default="logs", help="Directory for log files")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Analyze one video and print the results as JSON."""
    args = build_parser().parse_args(argv)
    _setup_logging(args.log_dir)

    import logging
    from pathlib import Path

    from .capture import VideoFile
    from .config import AnalysisConfig
    from .errors import AnalysisError
    from .models import ProcessingProgress
    from .pipeline import extract_signal, process_signal
    from .recorder import Recorder, RecorderConfig
    from .roi import FaceMeshDetector

    log = logging.getLogger("facevitals.app")
    cfg = AnalysisConfig(fps=args.fps, previews=not args.no_previews)
    last_stage = {"stage": "", "pct": -10}

    def on_progress(p: ProcessingProgress) -> None:
        # Log stage changes and every 10% to keep the console readable
        if p.stage != last_stage["stage"] or p.percentage >= last_stage["pct"] + 10:
            log.info("%s: %d%% (%d samples)", p.stage, p.percentage, len(p.signal))
            last_stage["stage"] = p.stage
            last_stage["pct"] = p.percentage

    try:
        detector = FaceMeshDetector().load()
    except RuntimeError as exc:
        log.error("Detector unavailable: %s", exc)
        print(f"Analysis Failed: {exc}", file=sys.stderr)
        return 1
    try:
        with VideoFile(args.video) as video:
            signal = extract_signal(video, detector, on_progress, cfg)
        results = process_signal(signal, on_progress, cfg)
    except AnalysisError as exc:
        log.error("Analysis failed (%s): %s", exc.kind, exc.message)
        print(f"Analysis Failed: {exc.message}", file=sys.stderr)
        return 1
    except RuntimeError as exc:
        log.error("Analysis failed: %s", exc)
        print(f"Analysis Failed: {exc}", file=sys.stderr)
        return 1
    finally:
        detector.close()

    if args.out:
        rec = Recorder(RecorderConfig(out_dir=Path(args.out), base_name=args.name))
        rec.save(
            signal,
            results,
            {"video": str(args.video), "fps": cfg.fps, "samples": len(signal)},
        )
        log.info("Saved %s and %s", rec.csv_path, rec.meta_path)

    print(json.dumps(results.to_dict(), indent=2))
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
