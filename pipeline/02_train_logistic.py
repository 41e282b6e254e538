"""
02_train_logistic.py — Seeded 70/30 split and the murder-flag logistic regression.

Reads the featured table, splits it with the configured seed, fits the
model on the training rows and scores the holdout rows. The model is not
saved: every run refits from the featured table.

Usage:
    python -m pipeline.02_train_logistic

Input:
    data/analysis_results/featured_incidents.csv
Output:
    data/analysis_results/holdout_scores.csv
    data/analysis_results/logistic_coefficients.csv
"""

from __future__ import annotations

import sys
from pathlib import Path

import pandas as pd

_PROJECT_ROOT = Path(__file__).parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from shooting_analysis.config import load_config  # noqa: E402
from shooting_analysis.errors import DegenerateModelError  # noqa: E402
from shooting_analysis.logging_utils import configure_package_logging, get_logger  # noqa: E402
from shooting_analysis.model.classifier import (  # noqa: E402
    CATEGORICAL_FEATURES,
    TARGET,
    evaluate,
    fit_classifier,
)
from shooting_analysis.model.split import train_test_frames  # noqa: E402

logger = get_logger(__name__)
configure_package_logging()

_out = load_config("pipeline")["output"]
_cfg = load_config("model_training")

FEATURED_CSV: str = _out["featured_csv"]
SCORES_CSV: str = _out["holdout_scores_csv"]
COEFFICIENTS_CSV: str = _out["coefficients_csv"]

TRAIN_FRACTION: float = _cfg["split"]["train_fraction"]
SEED: int = _cfg["split"]["seed"]
C: float = _cfg["logistic"]["C"]
MAX_ITER: int = _cfg["logistic"]["max_iter"]


def main() -> None:
    featured_csv = Path(FEATURED_CSV)
    if not featured_csv.exists():
        logger.error("Featured table not found: %s — run 01_build_dataset first.", featured_csv)
        return

    # Keep labels as text; "true"/"false" would otherwise be read as booleans
    df = pd.read_csv(
        featured_csv,
        dtype={col: str for col in (*CATEGORICAL_FEATURES, TARGET)},
        keep_default_na=False,
    )
    if df.empty:
        logger.error("Featured table %s has no rows.", featured_csv)
        return

    train_df, test_df = train_test_frames(df, fraction=TRAIN_FRACTION, seed=SEED)
    logger.info(
        "Split %d rows → %d train / %d test (fraction=%.2f, seed=%d)",
        len(df), len(train_df), len(test_df), TRAIN_FRACTION, SEED,
    )

    try:
        model = fit_classifier(train_df, C=C, max_iter=MAX_ITER)
    except DegenerateModelError as e:
        logger.error("Model stage aborted: %s", e)
        return

    metrics = evaluate(model, test_df)
    logger.info("Holdout metrics: %s", metrics)

    scores = test_df[["occur_date", *CATEGORICAL_FEATURES, "year", "occur_time_numeric", TARGET]].copy()
    scores["murder_probability"] = model.predict_proba(test_df)

    coefficients = pd.concat(
        [pd.Series({"intercept": model.intercept}), model.coefficients]
    ).rename("coefficient")

    for path in (Path(SCORES_CSV), Path(COEFFICIENTS_CSV)):
        path.parent.mkdir(parents=True, exist_ok=True)
    scores.to_csv(SCORES_CSV, index=False)
    coefficients.to_csv(COEFFICIENTS_CSV, index_label="feature")

    logger.info("Holdout scores saved to %s", SCORES_CSV)
    logger.info("Coefficients saved to %s", COEFFICIENTS_CSV)


if __name__ == "__main__":
    main()
