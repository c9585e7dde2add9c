"""
Parsing of compound metric identifiers into structured facets.

Training-log metrics are plain strings, but many of them encode structure:

- Banded income metrics, e.g. ``hmrc/pension_income_band_3_10_000_to_20_000``
  (amount) or ``hmrc/pension_count_income_band_3_10_000_to_20_000`` (count of
  people). These carry an income source, a band index and a numeric range.
- Flat catalogue metrics, e.g. ``age/20_30``, resolved by exact lookup in
  :mod:`calibration_eval.facets.catalogue`.

Everything else is an :class:`UnstructuredFacet`. Parsing never raises: an
identifier without structure is a normal outcome, not an error.

Banded grammar
--------------
::

    [<namespace> "/"] <source> "_" ["count_"] "income_band_" <index>
        "_" <lower> "_to_" (<upper> | "inf")

``<lower>`` and ``<upper>`` may use ``_`` or ``,`` as digit grouping
separators. ``inf`` marks the open-ended top band. Band index 55 is reserved
for the all-bands total and is excluded from band series downstream.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from math import isfinite
from typing import Final, Union

from .catalogue import AnalysisKind, CatalogueEntry, lookup_entry

TOTAL_BAND_INDEX: Final[int] = 55
DEFAULT_NAMESPACE: Final[str] = "hmrc"

_NUMBER = r"\d[\d_,]*(?:\.\d+)?"

_BANDED_PATTERN: Final[re.Pattern[str]] = re.compile(
    rf"""
    ^
    (?:(?P<namespace>.*)/)?
    (?P<source>[^/]+?)
    _(?P<count>count_)?income_band_
    (?P<index>\d+)
    _(?P<lower>{_NUMBER})
    _to_
    (?P<upper>inf|{_NUMBER})
    $
    """,
    re.VERBOSE,
)


class FacetKind(str, Enum):
    """Shape of a parsed metric identifier."""

    BANDED = "banded"
    FLAT = "flat"
    UNSTRUCTURED = "unstructured"


class BandKind(str, Enum):
    """Whether a banded metric measures income amounts or counts of people."""

    AMOUNT = "amount"
    COUNT = "count"


@dataclass(frozen=True)
class BandedFacet:
    """
    Structured view of a banded income metric.

    ``upper_bound`` is None for the open-ended top band.
    """

    metric: str
    source: str
    kind: BandKind
    band_index: int
    lower_bound: float
    upper_bound: float | None
    namespace: str | None = None

    @property
    def facet_kind(self) -> FacetKind:
        return FacetKind.BANDED

    @property
    def is_open_ended(self) -> bool:
        return self.upper_bound is None

    @property
    def is_total(self) -> bool:
        return self.band_index == TOTAL_BAND_INDEX

    @property
    def display_range(self) -> str:
        """Currency label such as ``£10,000 - £20,000`` or ``£150,000+``."""
        if self.upper_bound is None:
            return f"£{_group(self.lower_bound)}+"
        return f"£{_group(self.lower_bound)} - £{_group(self.upper_bound)}"


@dataclass(frozen=True)
class FlatFacet:
    """A metric found in one of the flat catalogues."""

    metric: str
    entry: CatalogueEntry

    @property
    def facet_kind(self) -> FacetKind:
        return FacetKind.FLAT

    @property
    def analysis_kind(self) -> AnalysisKind:
        return self.entry.analysis_kind

    @property
    def label(self) -> str:
        return self.entry.label


@dataclass(frozen=True)
class UnstructuredFacet:
    """A metric with no recognised structure; usable only in generic summaries."""

    metric: str

    @property
    def facet_kind(self) -> FacetKind:
        return FacetKind.UNSTRUCTURED


MetricFacet = Union[BandedFacet, FlatFacet, UnstructuredFacet]


def parse_metric(metric: str) -> MetricFacet:
    """
    Decompose a metric identifier into a facet.

    Flat catalogue entries win over the banded grammar; anything matching
    neither is returned as an :class:`UnstructuredFacet`. The function is
    total and deterministic, and results are cached.

    Parameters
    ----------
    metric : str
        Metric identifier as it appears in the training log. Non-string
        values (e.g. a NaN from a hand-built DataFrame) are treated as their
        ``str()`` and come back unstructured.

    Returns
    -------
    BandedFacet | FlatFacet | UnstructuredFacet
    """
    if not isinstance(metric, str):
        return UnstructuredFacet(metric=str(metric))
    return _parse_cached(metric)


@lru_cache(maxsize=65536)
def _parse_cached(metric: str) -> MetricFacet:
    entry = lookup_entry(metric)
    if entry is not None:
        return FlatFacet(metric=metric, entry=entry)

    m = _BANDED_PATTERN.match(metric)
    if m is None:
        return UnstructuredFacet(metric=metric)

    upper = m.group("upper")
    return BandedFacet(
        metric=metric,
        source=m.group("source"),
        kind=BandKind.COUNT if m.group("count") else BandKind.AMOUNT,
        band_index=int(m.group("index")),
        lower_bound=_to_number(m.group("lower")),
        upper_bound=None if upper == "inf" else _to_number(upper),
        namespace=m.group("namespace"),
    )


def is_banded(facet: MetricFacet) -> bool:
    return isinstance(facet, BandedFacet)


def format_banded_metric(
    source: str,
    kind: BandKind | str,
    band_index: int,
    lower_bound: float,
    upper_bound: float | None,
    *,
    namespace: str | None = DEFAULT_NAMESPACE,
) -> str:
    """
    Build the canonical metric identifier for a banded income facet.

    This is the inverse of :func:`parse_metric` for banded facets: integer
    bounds are written with ``_`` digit grouping (``10_000``) and an open
    upper bound as ``inf``.

    Raises
    ------
    ValueError
        If the source cannot be represented unambiguously, the band index is
        negative, or a bound is negative or non-finite.
    """
    kind = BandKind(kind)
    if not source or "/" in source or "income_band_" in source or source.endswith("_count"):
        raise ValueError(f"Source {source!r} cannot be encoded in a banded metric.")
    if band_index < 0:
        raise ValueError(f"band_index must be non-negative; got {band_index}.")

    infix = "count_" if kind is BandKind.COUNT else ""
    upper = "inf" if upper_bound is None else _format_bound(upper_bound)
    body = f"{source}_{infix}income_band_{band_index}_{_format_bound(lower_bound)}_to_{upper}"
    return body if namespace is None else f"{namespace}/{body}"


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------


def _to_number(text: str) -> float:
    return float(text.replace("_", "").replace(",", ""))


def _format_bound(value: float) -> str:
    if not isfinite(value) or value < 0:
        raise ValueError(f"Band bounds must be finite and non-negative; got {value!r}.")
    if float(value).is_integer():
        return f"{int(value):_}"
    text = repr(float(value))
    if "e" in text:
        text = f"{value:.17f}".rstrip("0")
    return text


def _group(value: float) -> str:
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,}"
