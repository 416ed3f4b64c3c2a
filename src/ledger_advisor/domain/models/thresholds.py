"""Alert threshold configuration."""

from dataclasses import dataclass, field
from typing import Optional

from ledger_advisor.config.settings import get_settings


@dataclass(frozen=True)
class Thresholds:
    """
    Disparity-ratio limits in percent.

    A deviation whose |disparity ratio| exceeds ``warning`` is a warning,
    one exceeding only ``caution`` is a caution.
    """

    caution: float
    warning: float


@dataclass(frozen=True)
class ThresholdOverride:
    """Partial override; unset fields fall through to the next level."""

    caution: Optional[float] = None
    warning: Optional[float] = None


@dataclass
class AlertThresholds:
    """Global thresholds with per-category and per-security overrides."""

    global_thresholds: Thresholds
    category_overrides: dict[str, ThresholdOverride] = field(default_factory=dict)
    security_overrides: dict[str, ThresholdOverride] = field(default_factory=dict)

    @classmethod
    def default(cls) -> "AlertThresholds":
        settings = get_settings()
        return cls(
            global_thresholds=Thresholds(
                caution=settings.default_caution_threshold,
                warning=settings.default_warning_threshold,
            )
        )
