"""
Compliance rule families, in evaluation order.
"""

from .breaks import BREAK_RULES
from .documentation import DOCUMENTATION_RULES
from .hour_limits import HOUR_LIMIT_RULES
from .task_restrictions import TASK_RESTRICTION_RULES
from .time_window import TIME_WINDOW_RULES

ALL_RULE_MODULES = [
    DOCUMENTATION_RULES,
    HOUR_LIMIT_RULES,
    TIME_WINDOW_RULES,
    TASK_RESTRICTION_RULES,
    BREAK_RULES,
]

ALL_RULES = [rule for module in ALL_RULE_MODULES for rule in module]

__all__ = [
    "ALL_RULE_MODULES",
    "ALL_RULES",
    "BREAK_RULES",
    "DOCUMENTATION_RULES",
    "HOUR_LIMIT_RULES",
    "TASK_RESTRICTION_RULES",
    "TIME_WINDOW_RULES",
]
