"""Weight deviation and alert classification."""

from collections.abc import Iterable, Mapping
from typing import Any, Optional

from ledger_advisor.core.numbers import parse_number, percent_of
from ledger_advisor.domain.models import AlertLevel, AlertThresholds, Security
from ledger_advisor.domain.views import (
    AlertReport,
    CategoryAlertGroup,
    CategoryWeight,
    DeviationReport,
    SecurityWeight,
)

THRESHOLD_FIELDS = ("caution", "warning")


def resolve_threshold(
    thresholds: AlertThresholds,
    field: str,
    security_id: Optional[str] = None,
    category: Optional[str] = None,
) -> float:
    """
    Effective threshold for one field.

    Falls back security -> category -> global; caution and warning resolve
    independently, so an override may set only one of them.
    """
    if field not in THRESHOLD_FIELDS:
        raise ValueError(f"Unknown threshold field: {field}")
    if security_id is not None:
        override = thresholds.security_overrides.get(security_id)
        value = getattr(override, field, None) if override else None
        if value is not None:
            return float(value)
    if category is not None:
        override = thresholds.category_overrides.get(category)
        value = getattr(override, field, None) if override else None
        if value is not None:
            return float(value)
    return float(getattr(thresholds.global_thresholds, field))


def classify_level(disparity_ratio: float, caution: float, warning: float) -> AlertLevel:
    """|d| > warning is WARNING, |d| > caution is CAUTION, otherwise NONE."""
    magnitude = abs(disparity_ratio)
    if magnitude > warning:
        return AlertLevel.WARNING
    if magnitude > caution:
        return AlertLevel.CAUTION
    return AlertLevel.NONE


def disparity_ratio(deviation: float, target_weight: float) -> float:
    """Deviation relative to the target weight, in percent of the target."""
    if target_weight <= 0:
        return 0.0
    return deviation / target_weight * 100


class DeviationClassifier:
    """
    Compares current to target weights for tracked securities and categories.

    Securities without a target weight appear in the report but are never
    alerted.
    """

    def classify(
        self,
        securities: Iterable[Security],
        value_by_security: Mapping[str, float],
        target_weights: Mapping[str, Any],
        thresholds: AlertThresholds,
    ) -> DeviationReport:
        """Build the full weight snapshot with its alert report."""
        candidates = []
        for security in securities:
            if not security.is_tracked:
                continue
            value = value_by_security.get(security.security_id, 0.0)
            target = parse_number(target_weights.get(security.security_id))
            if value > 0 or target > 0:
                candidates.append((security, value, target))

        total = sum(value for _, value, _ in candidates)
        rows = [
            self._security_weight(security, value, target, total, thresholds)
            for security, value, target in candidates
        ]
        categories = self._category_weights(rows, thresholds)

        return DeviationReport(
            total_tracked_value=total,
            securities=tuple(rows),
            categories=tuple(categories),
            alerts=self._alert_report(rows, categories),
        )

    def _security_weight(
        self,
        security: Security,
        value: float,
        target: float,
        total: float,
        thresholds: AlertThresholds,
    ) -> SecurityWeight:
        current_weight = percent_of(value, total)
        deviation = current_weight - target
        ratio = disparity_ratio(deviation, target)
        caution = resolve_threshold(
            thresholds, "caution", security.security_id, security.category
        )
        warning = resolve_threshold(
            thresholds, "warning", security.security_id, security.category
        )
        level = classify_level(ratio, caution, warning) if target > 0 else AlertLevel.NONE

        return SecurityWeight(
            security_id=security.security_id,
            ticker=security.ticker,
            name=security.display_name,
            category=security.category,
            current_value=value,
            current_weight=current_weight,
            target_weight=target,
            deviation=deviation,
            disparity_ratio=ratio,
            required_purchase=total * target / 100 - value,
            caution_threshold=caution,
            warning_threshold=warning,
            level=level,
        )

    def _category_weights(
        self,
        rows: list[SecurityWeight],
        thresholds: AlertThresholds,
    ) -> list[CategoryWeight]:
        members: dict[str, list[SecurityWeight]] = {}
        for row in rows:
            members.setdefault(row.category, []).append(row)

        total = sum(row.current_value for row in rows)
        categories = []
        for category, group in members.items():
            value = sum(r.current_value for r in group)
            current_weight = percent_of(value, total)
            target = sum(r.target_weight for r in group)
            deviation = current_weight - target
            ratio = disparity_ratio(deviation, target)
            level = AlertLevel.NONE
            if target > 0:
                level = classify_level(
                    ratio,
                    resolve_threshold(thresholds, "caution", category=category),
                    resolve_threshold(thresholds, "warning", category=category),
                )
            categories.append(
                CategoryWeight(
                    category=category,
                    current_value=value,
                    current_weight=current_weight,
                    target_weight=target,
                    deviation=deviation,
                    disparity_ratio=ratio,
                    level=level,
                    securities=tuple(
                        sorted(group, key=lambda r: r.current_value, reverse=True)
                    ),
                )
            )
        return categories

    @staticmethod
    def _alert_report(
        rows: list[SecurityWeight],
        categories: list[CategoryWeight],
    ) -> AlertReport:
        def severity(item) -> float:
            return -abs(item.disparity_ratio)

        warnings = sorted(
            (r for r in rows if r.level == AlertLevel.WARNING), key=severity
        )
        cautions = sorted(
            (r for r in rows if r.level == AlertLevel.CAUTION), key=severity
        )

        by_category: dict[str, tuple[list[SecurityWeight], list[SecurityWeight]]] = {}
        for row in warnings:
            by_category.setdefault(row.category, ([], []))[0].append(row)
        for row in cautions:
            by_category.setdefault(row.category, ([], []))[1].append(row)
        groups = sorted(
            (
                CategoryAlertGroup(category, tuple(warned), tuple(cautioned))
                for category, (warned, cautioned) in by_category.items()
            ),
            key=lambda g: (0 if g.warnings else 1, g.category),
        )

        return AlertReport(
            warnings=tuple(warnings),
            cautions=tuple(cautions),
            groups=tuple(groups),
            category_warnings=tuple(
                sorted((c for c in categories if c.level == AlertLevel.WARNING), key=severity)
            ),
            category_cautions=tuple(
                sorted((c for c in categories if c.level == AlertLevel.CAUTION), key=severity)
            ),
        )
