"""
01_build_dataset.py — Fetch the incident export and build the featured table.

Downloads (or reads) the raw CSV, drops incomplete rows, normalizes the
schema and derives the temporal features. Rows dropped for an unparseable
date or an out-of-range time are counted and reported at the end.

Usage:
    python -m pipeline.01_build_dataset

Output:
    data/analysis_results/featured_incidents.csv
"""

from __future__ import annotations

import sys
from pathlib import Path

_PROJECT_ROOT = Path(__file__).parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from shooting_analysis.config import load_config  # noqa: E402
from shooting_analysis.data.source import load_rows  # noqa: E402
from shooting_analysis.errors import FetchError, RowErrorTally  # noqa: E402
from shooting_analysis.logging_utils import configure_package_logging, get_logger  # noqa: E402
from shooting_analysis.pipeline import build_featured_table  # noqa: E402

logger = get_logger(__name__)
configure_package_logging()

_cfg = load_config("pipeline")
_src = _cfg["source"]
_clean = _cfg["cleaning"]

SOURCE: str = _src["local_csv"] or _src["url"]
TIMEOUT_S: float = _src["timeout_seconds"]
REQUIRED_FIELDS: tuple[str, ...] = tuple(_clean["required_fields"])
DATE_FORMAT: str = _clean["date_format"]
OUTPUT_CSV: str = _cfg["output"]["featured_csv"]


def main() -> None:
    logger.info("Building featured incident table from %s", SOURCE)

    try:
        raw_df = load_rows(SOURCE, timeout=TIMEOUT_S)
    except (FetchError, FileNotFoundError) as e:
        logger.error("Could not load incident data: %s", e)
        return

    tally = RowErrorTally()
    featured_df, row_counts = build_featured_table(
        raw_df, tally, required=REQUIRED_FIELDS, date_format=DATE_FORMAT
    )

    logger.info(
        "Rows: raw=%d → complete=%d → normalized=%d → featured=%d",
        row_counts["raw"],
        row_counts["complete"],
        row_counts["normalized"],
        row_counts["featured"],
    )
    if tally.total:
        logger.warning("Dropped malformed rows: %s", tally.as_dict())

    output_path = Path(OUTPUT_CSV)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    featured_df.to_csv(output_path, index=False)
    logger.info("Featured table saved to %s", output_path)


if __name__ == "__main__":
    main()
