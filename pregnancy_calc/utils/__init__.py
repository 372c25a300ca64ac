from .dates import parse_date, parse_int, format_date_range

from .ob_calculators import (
    DatingSource,
    Milestone,
    MilestoneDate,
    PregnancyInfo,
    PREGNANCY_MILESTONES,
    get_redating_threshold,
    calculate_pregnancy_info,
    calculate_pregnancy_from_edd,
    calculate_edd_from_lmp,
    calculate_edd_from_ga,
)

__all__ = [
    # Input helpers
    "parse_date",
    "parse_int",
    "format_date_range",
    # Dating engine
    "DatingSource",
    "Milestone",
    "MilestoneDate",
    "PregnancyInfo",
    "PREGNANCY_MILESTONES",
    "get_redating_threshold",
    "calculate_pregnancy_info",
    "calculate_pregnancy_from_edd",
    "calculate_edd_from_lmp",
    "calculate_edd_from_ga",
]
