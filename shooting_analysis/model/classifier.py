"""
Logistic regression predicting STATISTICAL_MURDER_FLAG.

Features:
    boro, victim_sex          — one-hot encoded against the labels seen in
                                the training subset. A label first seen at
                                scoring time encodes as all zeros.
    year, occur_time_numeric  — standardised.

The fit is deterministic: lbfgs has no random component, so the same
training rows in the same order always give the same coefficients.

Usage:

    from shooting_analysis.model.classifier import evaluate, fit_classifier

    model = fit_classifier(train_df)
    proba = model.predict_proba(test_df)     # P(murder_flag is true)
    metrics = evaluate(model, test_df)
    print(model.coefficients)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd
from sklearn.compose import ColumnTransformer
from sklearn.linear_model import LogisticRegression
from sklearn.metrics import accuracy_score, brier_score_loss, log_loss, roc_auc_score
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import OneHotEncoder, StandardScaler

from shooting_analysis.errors import DegenerateModelError

logger = logging.getLogger(__name__)

CATEGORICAL_FEATURES = ["boro", "victim_sex"]
NUMERIC_FEATURES = ["year", "occur_time_numeric"]
TARGET = "murder_flag"

# STATISTICAL_MURDER_FLAG is "true"/"false" in recent exports and "Y"/"N" in older ones
_TRUE_LABELS = {"true", "y", "yes", "1"}


def encode_target(labels: pd.Series) -> pd.Series:
    """Map murder_flag labels to 0/1. Anything not recognisably true is 0."""
    return labels.astype(str).str.strip().str.lower().isin(_TRUE_LABELS).astype(int)


def _feature_frame(df: pd.DataFrame) -> pd.DataFrame:
    X = pd.DataFrame(index=df.index)
    for col in CATEGORICAL_FEATURES:
        X[col] = df[col].astype(str)
    for col in NUMERIC_FEATURES:
        X[col] = df[col].astype(float)
    return X


@dataclass
class FittedModel:
    """A fitted pipeline plus its named coefficients."""

    pipeline: Pipeline
    coefficients: pd.Series
    intercept: float
    n_train: int
    positive_rate: float

    def predict_proba(self, df: pd.DataFrame) -> np.ndarray:
        """Probability that murder_flag is true, one value in [0, 1] per row."""
        if df.empty:
            return np.empty(0, dtype=float)
        return self.pipeline.predict_proba(_feature_frame(df))[:, 1]


def _build_pipeline(C: float, max_iter: int) -> Pipeline:
    encoder = ColumnTransformer(
        [
            ("categorical", OneHotEncoder(handle_unknown="ignore"), CATEGORICAL_FEATURES),
            ("numeric", StandardScaler(), NUMERIC_FEATURES),
        ],
        sparse_threshold=0.0,
        verbose_feature_names_out=False,
    )
    return Pipeline(
        [
            ("encode", encoder),
            ("logit", LogisticRegression(C=C, solver="lbfgs", max_iter=max_iter)),
        ]
    )


def fit_classifier(
    train_df: pd.DataFrame,
    C: float = 1.0,
    max_iter: int = 1000,
) -> FittedModel:
    """
    Fit the murder-flag logistic regression on the training subset.

    Args:
        train_df: Featured rows with CATEGORICAL_FEATURES, NUMERIC_FEATURES
                  and the murder_flag target.
        C: Inverse L2 regularisation strength passed to LogisticRegression.
        max_iter: lbfgs iteration cap.

    Returns:
        FittedModel exposing predict_proba() and named coefficients.

    Raises:
        DegenerateModelError: If the training target has a single class
            (or there are no training rows at all).
    """
    y = encode_target(train_df[TARGET])
    if y.nunique() < 2:
        only = "no rows" if y.empty else f"every row is class {int(y.iloc[0])}"
        raise DegenerateModelError(
            f"training target has no variance ({only}, n={len(y)}); cannot fit a logistic model"
        )

    pipeline = _build_pipeline(C, max_iter)
    pipeline.fit(_feature_frame(train_df), y)

    logit: LogisticRegression = pipeline.named_steps["logit"]
    names = pipeline.named_steps["encode"].get_feature_names_out()
    coefficients = pd.Series(logit.coef_[0], index=names, name="coefficient")

    logger.info(
        "Logistic model fitted on %d rows (positive rate %.1f%%, %d coefficients)",
        len(y),
        100 * y.mean(),
        len(coefficients),
    )
    return FittedModel(
        pipeline=pipeline,
        coefficients=coefficients,
        intercept=float(logit.intercept_[0]),
        n_train=len(y),
        positive_rate=float(y.mean()),
    )


def evaluate(model: FittedModel, test_df: pd.DataFrame) -> dict[str, float]:
    """
    Score the holdout subset.

    Returns a dict with n, positive_rate, accuracy (0.5 threshold), log_loss
    and brier. roc_auc is included only when both classes appear in the
    holdout. An empty holdout returns {"n": 0}.
    """
    if test_df.empty:
        return {"n": 0}

    y = encode_target(test_df[TARGET])
    proba = model.predict_proba(test_df)
    metrics: dict[str, float] = {
        "n": len(y),
        "positive_rate": float(y.mean()),
        "accuracy": float(accuracy_score(y, (proba >= 0.5).astype(int))),
        "log_loss": float(log_loss(y, proba, labels=[0, 1])),
        "brier": float(brier_score_loss(y, proba)),
    }
    if y.nunique() == 2:
        metrics["roc_auc"] = float(roc_auc_score(y, proba))

    logger.info(
        "Holdout: n=%d accuracy=%.3f log_loss=%.3f auc=%s",
        metrics["n"],
        metrics["accuracy"],
        metrics["log_loss"],
        f"{metrics['roc_auc']:.3f}" if "roc_auc" in metrics else "n/a",
    )
    return metrics
