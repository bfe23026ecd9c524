"""Tag rule library - parsing and built-in rules for ``validate`` tags."""

from .parser import NAME_KEY, Rule, TAG_KEY, parse_tag, tag
from .rules import BUILTIN_RULES, FieldLevel, RuleFunc, default_message, is_empty, kind_of, lookup_rule

__all__ = [
    "BUILTIN_RULES",
    "FieldLevel",
    "Rule",
    "NAME_KEY",
    "RuleFunc",
    "TAG_KEY",
    "default_message",
    "is_empty",
    "kind_of",
    "lookup_rule",
    "parse_tag",
    "tag",
]
