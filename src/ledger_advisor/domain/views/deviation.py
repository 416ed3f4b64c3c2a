"""View models for weight deviations and alerts."""

from dataclasses import dataclass, field
from typing import Optional

from ledger_advisor.domain.models.enums import AlertLevel


@dataclass(frozen=True)
class SecurityWeight:
    """Current vs target weight of one tracked security."""

    security_id: str
    ticker: str
    name: str
    category: str
    current_value: float
    current_weight: float
    target_weight: float
    deviation: float
    disparity_ratio: float
    required_purchase: float
    caution_threshold: float
    warning_threshold: float
    level: AlertLevel = AlertLevel.NONE

    @property
    def is_underweight(self) -> bool:
        return self.deviation < 0

    @property
    def is_overweight(self) -> bool:
        return self.deviation > 0


@dataclass(frozen=True)
class CategoryWeight:
    """Aggregated weight of every tracked security in a category."""

    category: str
    current_value: float
    current_weight: float
    target_weight: float
    deviation: float
    disparity_ratio: float
    level: AlertLevel = AlertLevel.NONE
    securities: tuple[SecurityWeight, ...] = ()


@dataclass(frozen=True)
class CategoryAlertGroup:
    """Alerted securities of one category."""

    category: str
    warnings: tuple[SecurityWeight, ...] = ()
    cautions: tuple[SecurityWeight, ...] = ()


@dataclass(frozen=True)
class AlertReport:
    """Alerts partitioned by tier, most severe first."""

    warnings: tuple[SecurityWeight, ...] = ()
    cautions: tuple[SecurityWeight, ...] = ()
    groups: tuple[CategoryAlertGroup, ...] = ()
    category_warnings: tuple[CategoryWeight, ...] = ()
    category_cautions: tuple[CategoryWeight, ...] = ()

    @property
    def has_alerts(self) -> bool:
        return bool(self.warnings or self.cautions)

    @property
    def ordered(self) -> tuple[SecurityWeight, ...]:
        return self.warnings + self.cautions


@dataclass(frozen=True)
class DeviationReport:
    """
    Full weight snapshot of the tracked portfolio.

    Memoized callers share one instance, so rows are tuples and the report
    is frozen.
    """

    total_tracked_value: float = 0.0
    securities: tuple[SecurityWeight, ...] = ()
    categories: tuple[CategoryWeight, ...] = ()
    alerts: AlertReport = field(default_factory=AlertReport)

    def security(self, security_id: str) -> Optional[SecurityWeight]:
        for row in self.securities:
            if row.security_id == security_id:
                return row
        return None

    def category(self, name: str) -> Optional[CategoryWeight]:
        for row in self.categories:
            if row.category == name:
                return row
        return None
