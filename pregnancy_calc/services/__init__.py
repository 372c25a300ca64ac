from .pregnancy_service import (
    CalculationMethod,
    InvalidCalculationMethod,
    PregnancyInputs,
    calculate,
    resolve_method,
)

__all__ = [
    # Pregnancy Services
    "CalculationMethod",
    "InvalidCalculationMethod",
    "PregnancyInputs",
    "calculate",
    "resolve_method",
]
