"""
03_summarise.py — Group-by counts for the reporting layer.

Writes one two-column CSV per reporting dimension (borough, time bucket,
year, month). The chart layer reads these plus the featured table itself.

Usage:
    python -m pipeline.03_summarise

Input:
    data/analysis_results/featured_incidents.csv
Output:
    data/analysis_results/aggregates/counts_by_<dimension>.csv
"""

from __future__ import annotations

import sys
from pathlib import Path

import pandas as pd

_PROJECT_ROOT = Path(__file__).parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from shooting_analysis.config import load_config  # noqa: E402
from shooting_analysis.logging_utils import configure_package_logging, get_logger  # noqa: E402
from shooting_analysis.reporting.aggregate import counts_frame, summarise  # noqa: E402

logger = get_logger(__name__)
configure_package_logging()

_cfg = load_config("pipeline")

FEATURED_CSV: str = _cfg["output"]["featured_csv"]
AGGREGATES_DIR: str = _cfg["output"]["aggregates_dir"]
DIMENSIONS: tuple[str, ...] = tuple(_cfg["reporting"]["dimensions"])


def main() -> None:
    featured_csv = Path(FEATURED_CSV)
    if not featured_csv.exists():
        logger.error("Featured table not found: %s — run 01_build_dataset first.", featured_csv)
        return

    df = pd.read_csv(featured_csv, dtype={"boro": str}, keep_default_na=False)
    summary = summarise(df, DIMENSIONS)

    out_dir = Path(AGGREGATES_DIR)
    out_dir.mkdir(parents=True, exist_ok=True)
    for dimension, counts in summary.items():
        path = out_dir / f"counts_by_{dimension}.csv"
        counts_frame(counts, dimension).to_csv(path, index=False)
        logger.info("%s: %d groups, %d rows → %s", dimension, len(counts), sum(counts.values()), path)


if __name__ == "__main__":
    main()
