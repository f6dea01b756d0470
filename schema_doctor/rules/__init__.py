from .base import BaseRule, FindingLevel
from .registry import RuleRegistry

from .missing_presence_validation import MissingPresenceValidation

DEFAULT_RULES = [
    MissingPresenceValidation,
]

__all__ = [
    "BaseRule",
    "FindingLevel",
    "RuleRegistry",
    "MissingPresenceValidation",
    "DEFAULT_RULES",
]
