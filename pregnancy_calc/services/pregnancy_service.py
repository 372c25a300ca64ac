"""
Pregnancy Calculation Service
Picks the dating method and turns raw form values into engine inputs
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

from pregnancy_calc.utils.dates import parse_int
from pregnancy_calc.utils.ob_calculators import (
    Clock,
    PregnancyInfo,
    calculate_pregnancy_from_edd,
    calculate_pregnancy_info,
)

logger = logging.getLogger(__name__)


class CalculationMethod(str, Enum):
    LMP = 'lmp'
    ULTRASOUND = 'ultrasound'
    REVERSE_ULTRASOUND = 'reverseUltrasound'


class InvalidCalculationMethod(ValueError):
    """Raised for a method name outside CalculationMethod"""


@dataclass
class PregnancyInputs:
    """Raw values as supplied by an input form"""
    lmp_date: Any = None
    ultrasound_date: Any = None
    ga_weeks: Any = None
    ga_days: Any = None
    edd_date: Any = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PregnancyInputs':
        return cls(
            lmp_date=data.get('lmpDate'),
            ultrasound_date=data.get('ultrasoundDate'),
            ga_weeks=data.get('gaWeeks'),
            ga_days=data.get('gaDays'),
            edd_date=data.get('eddDate'),
        )


def resolve_method(method: Union[str, CalculationMethod, None],
                   default: Union[str, CalculationMethod] = CalculationMethod.LMP) -> CalculationMethod:
    """Map a method name to CalculationMethod, falling back to default when empty"""
    if method is None or method == '':
        method = default
    try:
        return CalculationMethod(method)
    except ValueError:
        valid = ', '.join(m.value for m in CalculationMethod)
        raise InvalidCalculationMethod(f"Unknown calculation method '{method}'. Use one of: {valid}")


def calculate(method: Union[str, CalculationMethod, None], inputs: PregnancyInputs,
              clock: Optional[Clock] = None) -> Optional[PregnancyInfo]:
    """
    Compute pregnancy info for the selected method

    Args:
        method: 'lmp', 'ultrasound' or 'reverseUltrasound'
        inputs: Raw input values
        clock: Optional callable returning "now"

    Returns:
        PregnancyInfo, or None when the primary date is missing or invalid
    """
    method = resolve_method(method)

    if method is CalculationMethod.REVERSE_ULTRASOUND:
        return calculate_pregnancy_from_edd(inputs.edd_date, clock=clock)

    # LMP and ultrasound methods share one path; complete scan data is
    # honoured whichever of the two is selected
    weeks = parse_int(inputs.ga_weeks)
    days = parse_int(inputs.ga_days)
    info = calculate_pregnancy_info(
        inputs.lmp_date,
        inputs.ultrasound_date,
        weeks,
        days,
        clock=clock,
    )
    if info is None:
        logger.debug("No LMP date for %s calculation", method.value)
    return info
