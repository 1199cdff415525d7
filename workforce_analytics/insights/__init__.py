from .generator import generate_strategic_insights
from .registry import InsightContext, InsightRule, get_all_rules, get_rule, register_rule

__all__ = [
    "generate_strategic_insights",
    "InsightContext",
    "InsightRule",
    "get_all_rules",
    "get_rule",
    "register_rule",
]
