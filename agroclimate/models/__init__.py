"""Enumeration registry — application code can do::

    from agroclimate.models import ClimateZone, EnsoStatus, ...
"""

from agroclimate.models.enums import (
    ClimateZone,
    EnsoStatus,
    GrowthStage,
    HazardLevel,
    IrrigationPriority,
    NotificationPriority,
    NotificationType,
    PatternType,
    RiskLevel,
    Season,
    SeasonalType,
    Trend,
)

__all__ = [
    "ClimateZone",
    "EnsoStatus",
    "GrowthStage",
    "HazardLevel",
    "IrrigationPriority",
    "NotificationPriority",
    "NotificationType",
    "PatternType",
    "RiskLevel",
    "Season",
    "SeasonalType",
    "Trend",
]
