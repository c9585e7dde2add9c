"""
Configuration for training-log evaluation.

All knobs live in one frozen dataclass so a report can record exactly which
conventions produced it. Defaults reproduce the standard dashboard:

- at most 100 epochs are analysed (plus the latest epoch),
- quality tiers break at 5% and 20% relative error,
- income band 55 is the all-bands total and is excluded from band series,
- local-area points with a non-positive target are treated as missing,
- rankings show the five best and five worst areas.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field, fields, replace
from typing import Any, Final

from .diagnostics.quality import QualityThresholds
from .facets.parser import TOTAL_BAND_INDEX
from .utils.validation import ensure_positive_int

DEFAULT_EPOCH_CAP: Final[int] = 100
DEFAULT_RANKING_SIZE: Final[int] = 5


@dataclass(frozen=True)
class EvaluationConfig:
    """
    Parameters shared by every view of one training log.

    Parameters
    ----------
    epoch_cap:
        Target maximum number of epochs kept by downsampling.
    quality:
        Quality tier boundaries and score weights.
    reserved_band_index:
        Band index of the all-bands total, excluded from band series.
    drop_non_positive_targets:
        Whether local-area aggregation treats points with ``target <= 0`` as
        missing data.
    ranking_size:
        Number of areas in each of the best / worst lists.
    """

    epoch_cap: int = DEFAULT_EPOCH_CAP
    quality: QualityThresholds = field(default_factory=QualityThresholds)
    reserved_band_index: int = TOTAL_BAND_INDEX
    drop_non_positive_targets: bool = True
    ranking_size: int = DEFAULT_RANKING_SIZE

    def __post_init__(self) -> None:
        # Normalised to plain int.
        for name in ("epoch_cap", "ranking_size"):
            object.__setattr__(self, name, ensure_positive_int(getattr(self, name), name=name))

    def with_overrides(self, **changes: Any) -> EvaluationConfig:
        return replace(self, **changes)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> EvaluationConfig:
        """
        Build a config from a plain mapping (e.g. a parsed JSON or TOML table).

        ``quality`` may itself be a mapping of :class:`QualityThresholds`
        fields.

        Raises
        ------
        ValueError
            If the mapping contains unknown keys.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown EvaluationConfig keys: {unknown}")

        kwargs = dict(data)
        quality = kwargs.get("quality")
        if isinstance(quality, Mapping):
            q_known = {f.name for f in fields(QualityThresholds)}
            q_unknown = sorted(set(quality) - q_known)
            if q_unknown:
                raise ValueError(f"Unknown QualityThresholds keys: {q_unknown}")
            kwargs["quality"] = QualityThresholds(**quality)
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


DEFAULT_CONFIG: Final[EvaluationConfig] = EvaluationConfig()
