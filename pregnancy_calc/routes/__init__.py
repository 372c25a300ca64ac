from .calculator import calculator_bp
from .health import health_bp

__all__ = ['calculator_bp', 'health_bp']
