"""
End-to-end run of the cleaning, feature and modelling stages.

    raw rows ─► filter_complete ─► normalize_schema ─► derive_features ─┬─► summarise
                                                                         └─► split ─► fit ─► score

The aggregation branch and the modelling branch both read the featured
table and do not depend on each other: a DegenerateModelError is recorded
on the result and aggregation still happens. Fetching happens before this
module is involved (see shooting_analysis.data.source), so a FetchError
never reaches run_pipeline.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import numpy as np
import pandas as pd

from shooting_analysis.data.cleaning import DATE_FORMAT, REQUIRED_FIELDS, filter_complete, normalize_schema
from shooting_analysis.errors import DegenerateModelError, RowErrorTally
from shooting_analysis.features.engineering import derive_features
from shooting_analysis.model.classifier import FittedModel, evaluate, fit_classifier
from shooting_analysis.model.split import Split, split_indices
from shooting_analysis.reporting.aggregate import DIMENSIONS, summarise

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    featured: pd.DataFrame
    row_counts: dict[str, int]
    tally: RowErrorTally
    aggregates: dict[str, dict]
    split: Split | None = None
    model: FittedModel | None = None
    holdout_proba: np.ndarray | None = None
    metrics: dict[str, float] = field(default_factory=dict)
    model_error: DegenerateModelError | None = None


def build_featured_table(
    raw_df: pd.DataFrame,
    tally: RowErrorTally,
    required: tuple[str, ...] = REQUIRED_FIELDS,
    date_format: str = DATE_FORMAT,
) -> tuple[pd.DataFrame, dict[str, int]]:
    """Run filter -> normalize -> derive and return the table with per-stage row counts."""
    filtered = filter_complete(raw_df, required=required)
    clean = normalize_schema(filtered, tally=tally, date_format=date_format)
    featured = derive_features(clean, tally=tally)
    row_counts = {
        "raw": len(raw_df),
        "complete": len(filtered),
        "normalized": len(clean),
        "featured": len(featured),
    }
    return featured, row_counts


def run_pipeline(
    raw_df: pd.DataFrame,
    pipeline_cfg: dict[str, Any] | None = None,
    training_cfg: dict[str, Any] | None = None,
) -> PipelineResult:
    """
    Run every stage on an already-loaded raw table.

    Args:
        raw_df: String-typed raw rows from the row source.
        pipeline_cfg: Parsed configs/pipeline.yaml (the "cleaning" and
                      "reporting" sections are read). Defaults apply when None.
        training_cfg: Parsed configs/model_training.yaml ("split" and
                      "logistic" sections). Defaults apply when None.

    Returns:
        PipelineResult. model_error is set, and model/holdout_proba left None,
        when the training subset has no target variance.
    """
    cleaning = (pipeline_cfg or {}).get("cleaning", {})
    reporting = (pipeline_cfg or {}).get("reporting", {})
    split_cfg = (training_cfg or {}).get("split", {})
    logit_cfg = (training_cfg or {}).get("logistic", {})

    tally = RowErrorTally()
    featured, row_counts = build_featured_table(
        raw_df,
        tally,
        required=tuple(cleaning.get("required_fields", REQUIRED_FIELDS)),
        date_format=cleaning.get("date_format", DATE_FORMAT),
    )
    if tally.total:
        logger.warning("Dropped malformed rows: %s", tally.as_dict())

    result = PipelineResult(
        featured=featured,
        row_counts=row_counts,
        tally=tally,
        aggregates=summarise(featured, tuple(reporting.get("dimensions", DIMENSIONS))),
    )

    if featured.empty:
        logger.warning("No rows survived cleaning; skipping split and model fit")
        return result

    result.split = split_indices(
        len(featured),
        fraction=split_cfg.get("train_fraction", 0.7),
        seed=split_cfg.get("seed", 1234),
    )
    train_df = featured.iloc[result.split.train]
    test_df = featured.iloc[result.split.test]
    logger.info("Split: %d train / %d test rows", len(train_df), len(test_df))

    try:
        result.model = fit_classifier(
            train_df,
            C=logit_cfg.get("C", 1.0),
            max_iter=logit_cfg.get("max_iter", 1000),
        )
    except DegenerateModelError as exc:
        logger.error("Classifier stage failed: %s", exc)
        result.model_error = exc
        return result

    result.holdout_proba = result.model.predict_proba(test_df)
    result.metrics = evaluate(result.model, test_df)
    return result
