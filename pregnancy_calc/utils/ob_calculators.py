"""
OB Dating Calculation Utilities
EDD (Estimated Due Date), GA (Gestational Age), trimesters and milestone windows.
Redating follows ACOG Committee Opinion No. 700 (2017, reaffirmed 2022).
"""
from dataclasses import dataclass, field
from datetime import datetime, date, timedelta
from enum import Enum
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from pregnancy_calc.utils.dates import parse_date, format_date_range

logger = logging.getLogger(__name__)

Clock = Callable[[], Union[date, datetime]]

PREGNANCY_DAYS = 280        # 40 weeks, Naegele's rule
CONCEPTION_TO_EDD_DAYS = 266
FIRST_TRIMESTER_END = timedelta(weeks=13, days=6)
SECOND_TRIMESTER_END = timedelta(weeks=27, days=6)
MIN_REDATING_WEEKS = 5

# (upper bound in completed LMP weeks, max discrepancy in days)
REDATING_THRESHOLDS: Tuple[Tuple[Optional[int], int], ...] = (
    (4, 0),       # do not redate before 5 weeks
    (8, 5),
    (13, 7),
    (15, 10),
    (21, 14),
    (27, 21),
    (None, 21),   # >= 28 weeks
)


class DatingSource(str, Enum):
    """Which estimate became authoritative"""
    LMP = 'LMP'
    ULTRASOUND = 'Ultrasound'
    LMP_CONFIRMED = 'LMP_CONFIRMED'


@dataclass(frozen=True)
class Milestone:
    name: str
    start_weeks: int
    end_weeks: int
    start_days: int = 0
    end_days: int = 0

    @property
    def start_offset(self) -> timedelta:
        return timedelta(weeks=self.start_weeks, days=self.start_days)

    @property
    def end_offset(self) -> timedelta:
        return timedelta(weeks=self.end_weeks, days=self.end_days)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'startWeeks': self.start_weeks,
            'startDays': self.start_days,
            'endWeeks': self.end_weeks,
            'endDays': self.end_days,
        }


PREGNANCY_MILESTONES: Tuple[Milestone, ...] = (
    Milestone('Blood Screening', 10, 13, end_days=6),
    Milestone('First Fetal Heart Tones by Doppler', 11, 12),
    Milestone('NT scan window', 11, 14, start_days=2, end_days=2),
    Milestone('Anatomy scan window', 18, 21),
    Milestone('Typical anatomy scan', 20, 20),
    Milestone('Glucose screen', 24, 28),
    Milestone('GBS screen', 35, 37),
    Milestone('Tdap vaccination', 27, 36),
)


@dataclass(frozen=True)
class MilestoneDate:
    name: str
    date_range: str

    def to_dict(self) -> Dict[str, str]:
        return {'name': self.name, 'dateRange': self.date_range}


@dataclass(frozen=True)
class PregnancyInfo:
    """Computed dating record. A value, rebuilt on every input change."""
    lmp_edd: date
    ultrasound_edd: date
    best_estimate_edd: date
    source: DatingSource
    gestational_age_weeks: int
    gestational_age_days: int
    conception_date: date
    trimester: int
    first_trimester_end: date
    second_trimester_end: date
    discrepancy_days: int
    milestone_dates: Tuple[MilestoneDate, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'lmpEdd': self.lmp_edd.isoformat(),
            'ultrasoundEdd': self.ultrasound_edd.isoformat(),
            'bestEstimateEdd': self.best_estimate_edd.isoformat(),
            'source': self.source.value,
            'gestationalAgeWeeks': self.gestational_age_weeks,
            'gestationalAgeDays': self.gestational_age_days,
            'conceptionDate': self.conception_date.isoformat(),
            'trimester': self.trimester,
            'firstTrimesterEnd': self.first_trimester_end.isoformat(),
            'secondTrimesterEnd': self.second_trimester_end.isoformat(),
            'discrepancyDays': self.discrepancy_days,
            'milestoneDates': [m.to_dict() for m in self.milestone_dates],
        }


def _today(clock: Optional[Clock] = None) -> date:
    now = (clock or datetime.now)()
    return now.date() if isinstance(now, datetime) else now


def get_redating_threshold(ga_weeks: int) -> int:
    """
    Maximum LMP vs ultrasound discrepancy (days) tolerated before redating

    Args:
        ga_weeks: Completed weeks of gestation by LMP at the time of the scan

    Returns:
        int: Threshold in days
    """
    for upper_weeks, threshold in REDATING_THRESHOLDS:
        if upper_weeks is None or ga_weeks <= upper_weeks:
            return threshold
    return REDATING_THRESHOLDS[-1][1]


def calculate_edd_from_lmp(lmp_date):
    """
    Calculate Estimated Due Date from LMP (Naegele's rule: LMP + 280 days)

    Args:
        lmp_date: LMP date (datetime.date)

    Returns:
        datetime.date: EDD
    """
    if not lmp_date:
        return None

    return lmp_date + timedelta(days=PREGNANCY_DAYS)


def calculate_edd_from_ga(ga_weeks, ga_days=0, reference_date=None, clock=None):
    """
    Calculate EDD from Gestational Age

    Args:
        ga_weeks: GA in weeks
        ga_days: Additional days (0-6)
        reference_date: Date of measurement (default: today)
        clock: Optional callable returning "now", used when reference_date is absent

    Returns:
        datetime.date: EDD
    """
    if not reference_date:
        reference_date = _today(clock)

    total_ga_days = (ga_weeks * 7) + ga_days
    days_to_add = PREGNANCY_DAYS - total_ga_days

    return reference_date + timedelta(days=days_to_add)


def calculate_milestone_dates(estimated_lmp: date) -> Tuple[MilestoneDate, ...]:
    """Render every catalog milestone relative to the estimated LMP"""
    return tuple(
        MilestoneDate(
            name=m.name,
            date_range=format_date_range(estimated_lmp + m.start_offset, estimated_lmp + m.end_offset),
        )
        for m in PREGNANCY_MILESTONES
    )


def derive_from_estimated_lmp(estimated_lmp: date, today: date) -> Dict[str, Any]:
    """
    Fields shared by every calculation method, all derived from one estimated LMP

    Returns:
        dict: gestational age, conception date, trimester, cutoffs and milestones
    """
    # Future LMP clamps to zero rather than going negative
    age_days = max(0, (today - estimated_lmp).days)

    first_trimester_end = estimated_lmp + FIRST_TRIMESTER_END
    second_trimester_end = estimated_lmp + SECOND_TRIMESTER_END

    if today > second_trimester_end:
        trimester = 3
    elif today > first_trimester_end:
        trimester = 2
    else:
        trimester = 1

    return {
        'gestational_age_weeks': age_days // 7,
        'gestational_age_days': age_days % 7,
        'conception_date': estimated_lmp + timedelta(days=PREGNANCY_DAYS - CONCEPTION_TO_EDD_DAYS),
        'trimester': trimester,
        'first_trimester_end': first_trimester_end,
        'second_trimester_end': second_trimester_end,
        'milestone_dates': calculate_milestone_dates(estimated_lmp),
    }


def calculate_pregnancy_from_edd(edd, clock: Optional[Clock] = None) -> Optional[PregnancyInfo]:
    """
    Calculate pregnancy info from a known EDD (reverse ultrasound method)

    LMP = EDD - 280 days, conception = EDD - 266 days.

    Args:
        edd: Known estimated due date
        clock: Optional callable returning "now"

    Returns:
        PregnancyInfo, or None when edd is not a valid date or its derived
        dates fall outside the calendar range
    """
    edd = parse_date(edd)
    if not edd:
        return None

    try:
        return _pregnancy_from_edd(edd, _today(clock))
    except OverflowError:
        logger.warning("EDD %s puts derived dates outside the calendar range", edd)
        return None


def _pregnancy_from_edd(edd: date, today: date) -> PregnancyInfo:
    estimated_lmp = edd - timedelta(days=PREGNANCY_DAYS)
    derived = derive_from_estimated_lmp(estimated_lmp, today)
    derived['conception_date'] = edd - timedelta(days=CONCEPTION_TO_EDD_DAYS)

    return PregnancyInfo(
        lmp_edd=edd,
        ultrasound_edd=edd,
        best_estimate_edd=edd,
        source=DatingSource.ULTRASOUND,
        discrepancy_days=0,
        **derived
    )


def calculate_pregnancy_info(lmp_date, ultrasound_date=None, ga_weeks=None, ga_days=None,
                             clock: Optional[Clock] = None) -> Optional[PregnancyInfo]:
    """
    Calculate pregnancy info from LMP, optionally redated by an early ultrasound

    Ultrasound data is used only when the scan date and both GA fields are
    present. The ultrasound EDD replaces the LMP EDD when LMP-based GA at the
    scan is at least 5 weeks and the discrepancy strictly exceeds the ACOG
    threshold for that week.

    Args:
        lmp_date: First day of last menstrual period
        ultrasound_date: Date of the dating scan
        ga_weeks: Sonographic GA at the scan, weeks
        ga_days: Sonographic GA at the scan, days (0-6)
        clock: Optional callable returning "now"

    Returns:
        PregnancyInfo, or None when lmp_date is not a valid date or the
        derived dates fall outside the calendar range
    """
    lmp_date = parse_date(lmp_date)
    if not lmp_date:
        return None

    try:
        return _pregnancy_from_lmp(lmp_date, parse_date(ultrasound_date), ga_weeks, ga_days, _today(clock))
    except OverflowError:
        logger.warning(
            "LMP %s with scan %s at %s+%s weeks puts derived dates outside the calendar range",
            lmp_date, ultrasound_date, ga_weeks, ga_days
        )
        return None


def _pregnancy_from_lmp(lmp_date: date, ultrasound_date: Optional[date], ga_weeks, ga_days,
                        today: date) -> PregnancyInfo:
    lmp_edd = calculate_edd_from_lmp(lmp_date)
    best_estimate_edd = lmp_edd
    ultrasound_edd = lmp_edd
    source = DatingSource.LMP
    discrepancy_days = 0

    if ultrasound_date and ga_weeks is not None and ga_days is not None:
        measured_ga_days = ga_weeks * 7 + ga_days
        ultrasound_edd = calculate_edd_from_ga(ga_weeks, ga_days, reference_date=ultrasound_date)

        lmp_based_ga_days = (ultrasound_date - lmp_date).days
        discrepancy_days = abs(lmp_based_ga_days - measured_ga_days)

        ga_weeks_by_lmp = lmp_based_ga_days // 7
        threshold = get_redating_threshold(ga_weeks_by_lmp)

        if ga_weeks_by_lmp >= MIN_REDATING_WEEKS and discrepancy_days > threshold:
            best_estimate_edd = ultrasound_edd
            source = DatingSource.ULTRASOUND
        else:
            source = DatingSource.LMP_CONFIRMED

        logger.debug(
            "Dating scan at %sw by LMP: discrepancy %sd, threshold %sd, source %s",
            ga_weeks_by_lmp, discrepancy_days, threshold, source.value
        )

    estimated_lmp = best_estimate_edd - timedelta(days=PREGNANCY_DAYS)
    derived = derive_from_estimated_lmp(estimated_lmp, today)

    return PregnancyInfo(
        lmp_edd=lmp_edd,
        ultrasound_edd=ultrasound_edd,
        best_estimate_edd=best_estimate_edd,
        source=source,
        discrepancy_days=discrepancy_days,
        **derived
    )


def redating_threshold_table() -> List[Dict[str, Any]]:
    """ACOG threshold bands as JSON-ready rows"""
    rows = []
    lower = 0
    for upper_weeks, threshold in REDATING_THRESHOLDS:
        rows.append({
            'minWeeks': lower,
            'maxWeeks': upper_weeks,
            'thresholdDays': threshold,
        })
        lower = (upper_weeks or lower) + 1
    return rows
