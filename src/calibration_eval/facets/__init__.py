"""
Metric identifier facets.

Public API
----------
parse_metric
    Total, deterministic parsing of a metric identifier into a facet.
format_banded_metric
    Canonical identifier for a banded income facet (inverse of parsing).
BandedFacet / FlatFacet / UnstructuredFacet
    The three facet shapes.
AnalysisKind / CatalogueEntry / catalogue_for
    Static flat catalogues used by local-area analysis.
"""

from __future__ import annotations

from .catalogue import (
    AGE_BANDS,
    EMPLOYMENT_BANDS,
    AnalysisKind,
    CatalogueEntry,
    catalogue_for,
    lookup_entry,
)
from .parser import (
    DEFAULT_NAMESPACE,
    TOTAL_BAND_INDEX,
    BandedFacet,
    BandKind,
    FacetKind,
    FlatFacet,
    MetricFacet,
    UnstructuredFacet,
    format_banded_metric,
    is_banded,
    parse_metric,
)

__all__ = [
    "AGE_BANDS",
    "DEFAULT_NAMESPACE",
    "EMPLOYMENT_BANDS",
    "TOTAL_BAND_INDEX",
    "AnalysisKind",
    "BandKind",
    "BandedFacet",
    "CatalogueEntry",
    "FacetKind",
    "FlatFacet",
    "MetricFacet",
    "UnstructuredFacet",
    "catalogue_for",
    "format_banded_metric",
    "is_banded",
    "lookup_entry",
    "parse_metric",
]
