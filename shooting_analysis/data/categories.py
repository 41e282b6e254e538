"""
Open-ended categorical label sets.

The incident export never declares its label universes (boroughs, race
groups, location descriptions...). Labels are discovered as rows are read
and each new label gets the next integer code. Codes never change once
assigned, so two batches encoded with the same CategoryCodes agree.
"""

from __future__ import annotations

from collections.abc import Iterable

import pandas as pd

MISSING_LABEL = "MISSING"


class CategoryCodes:
    """Append-only mapping from observed label to a stable integer code."""

    def __init__(self, labels: Iterable[str] = ()) -> None:
        self._codes: dict[str, int] = {}
        for label in labels:
            self.encode(label)

    def encode(self, label: str) -> int:
        if label not in self._codes:
            self._codes[label] = len(self._codes)
        return self._codes[label]

    def code_of(self, label: str) -> int | None:
        return self._codes.get(label)

    @property
    def labels(self) -> list[str]:
        return list(self._codes)

    def __len__(self) -> int:
        return len(self._codes)

    def __contains__(self, label: object) -> bool:
        return label in self._codes

    def __repr__(self) -> str:
        return f"CategoryCodes({self.labels!r})"

    def categorize(self, values: pd.Series) -> pd.Series:
        """
        Convert raw string values to a pandas categorical backed by this mapping.

        Empty strings (after strip) and NaN become MISSING_LABEL. Every label
        seen is registered first, so the categorical's integer codes equal
        the codes held here.
        """
        cleaned = values.fillna("").astype(str).str.strip()
        cleaned = cleaned.mask(cleaned == "", MISSING_LABEL)
        for label in pd.unique(cleaned):
            self.encode(label)
        return pd.Series(
            pd.Categorical(cleaned, categories=self.labels),
            index=values.index,
            name=values.name,
        )
