# Emitters Package
# Literal and expression text helpers for node variants

from .const import format_constant
from .math import get_math_operation

__all__ = ['format_constant', 'get_math_operation']
