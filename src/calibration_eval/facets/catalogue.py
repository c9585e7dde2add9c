"""
Static catalogue of flat metric facets.

Local-area analysis compares a fixed set of named categories per area. Each
category maps 1:1 onto one literal metric string in the training log; there
is no numeric parsing beyond this lookup table.

Two catalogues exist:

- ``AnalysisKind.AGE``: eight decade buckets covering ages 0-80.
- ``AnalysisKind.EMPLOYMENT``: six employment-income brackets from £20K to
  £150K.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Final


class AnalysisKind(str, Enum):
    """Which flat catalogue a local-area view is built from."""

    AGE = "age"
    EMPLOYMENT = "employment"


@dataclass(frozen=True)
class CatalogueEntry:
    """
    One named category of a flat catalogue.

    Fields:
    - metric: the exact metric string this category is recorded under
    - label: human-readable label (e.g. "20-30 years", "£20K-£30K")
    - lower_bound / upper_bound: numeric range the category covers
    - analysis_kind: the catalogue this entry belongs to
    """

    metric: str
    label: str
    lower_bound: float
    upper_bound: float
    analysis_kind: AnalysisKind

    @property
    def range_label(self) -> str:
        return f"{self.lower_bound:g}-{self.upper_bound:g}"


def _age_entries() -> tuple[CatalogueEntry, ...]:
    out: list[CatalogueEntry] = []
    for lo in range(0, 80, 10):
        hi = lo + 10
        out.append(
            CatalogueEntry(
                metric=f"age/{lo}_{hi}",
                label=f"{lo}-{hi} years",
                lower_bound=float(lo),
                upper_bound=float(hi),
                analysis_kind=AnalysisKind.AGE,
            )
        )
    return tuple(out)


_EMPLOYMENT_BRACKETS: Final[tuple[tuple[int, int], ...]] = (
    (20_000, 30_000),
    (30_000, 40_000),
    (40_000, 50_000),
    (50_000, 70_000),
    (70_000, 100_000),
    (100_000, 150_000),
)


def _employment_entries() -> tuple[CatalogueEntry, ...]:
    return tuple(
        CatalogueEntry(
            metric=f"hmrc/employment_income/amount/{lo}_{hi}",
            label=f"£{lo // 1000}K-£{hi // 1000}K",
            lower_bound=float(lo),
            upper_bound=float(hi),
            analysis_kind=AnalysisKind.EMPLOYMENT,
        )
        for lo, hi in _EMPLOYMENT_BRACKETS
    )


AGE_BANDS: Final[tuple[CatalogueEntry, ...]] = _age_entries()
EMPLOYMENT_BANDS: Final[tuple[CatalogueEntry, ...]] = _employment_entries()

CATALOGUES: Final[Mapping[AnalysisKind, tuple[CatalogueEntry, ...]]] = {
    AnalysisKind.AGE: AGE_BANDS,
    AnalysisKind.EMPLOYMENT: EMPLOYMENT_BANDS,
}

_BY_METRIC: Final[Mapping[str, CatalogueEntry]] = {
    entry.metric: entry for entries in CATALOGUES.values() for entry in entries
}


def catalogue_for(kind: AnalysisKind | str) -> tuple[CatalogueEntry, ...]:
    """
    Return the flat catalogue for an analysis kind.

    Raises
    ------
    ValueError
        If ``kind`` is not a known analysis kind.
    """
    return CATALOGUES[AnalysisKind(kind)]


def lookup_entry(metric: str) -> CatalogueEntry | None:
    """Exact-string lookup of a metric in all flat catalogues."""
    return _BY_METRIC.get(metric)
