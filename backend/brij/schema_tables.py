from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

# Table data only; checks read FieldSpec.types directly.
KINDS = ("string", "number", "boolean", "object", "array")


class NestedCheck(str, Enum):
    NONE = "none"
    RULE_TREE = "rule_tree"
    CONDITION = "condition"
    ACTIONS = "actions"


@dataclass(frozen=True)
class FieldSpec:
    required: bool = False
    types: tuple[str, ...] = ()
    check: NestedCheck = NestedCheck.NONE
    # Table data only, not enforced by any check.
    additional_fields: tuple[str, ...] = ()

    @property
    def has_type(self) -> bool:
        return bool(self.types)


def _spec(required: bool, *types: str, check=NestedCheck.NONE, additional_fields=()) -> FieldSpec:
    return FieldSpec(
        required=required,
        types=tuple(types),
        check=check,
        additional_fields=tuple(additional_fields),
    )


MAIN_FIELDS = MappingProxyType(
    {
        "id": _spec(False, "string"),
        "description": _spec(False, "string"),
        "rule": _spec(True, "object", check=NestedCheck.RULE_TREE),
        "actions": _spec(False, "array", check=NestedCheck.ACTIONS),
    }
)

RULE_FIELDS = MappingProxyType(
    {
        "condition": _spec(True, "string", check=NestedCheck.CONDITION),
        "property": _spec(True, "string"),
    }
)

# Iteration order is significant: errors are reported in this order.
COMBINATION_FIELDS = MappingProxyType(
    {
        "if": _spec(False, "object"),
        "then": _spec(False, "object"),
        "and": _spec(False, "array"),
        "or": _spec(False, "array"),
    }
)

# "args" is listed against the call fields but is not enforced.
ACTION_FIELDS = MappingProxyType(
    {
        "callOnTrue": _spec(False, "string", additional_fields=("args",)),
        "callOnFalse": _spec(False, "string", additional_fields=("args",)),
        "args": _spec(False, "array"),
        "returnOnTrue": _spec(False, "string"),
        "returnOnFalse": _spec(False, "string"),
    }
)

ADDITIONAL_FIELDS = MappingProxyType(
    {
        "value": _spec(True, "string", "number"),
        "values": _spec(True, "array"),
        "start": _spec(True, "number"),
        "end": _spec(True, "number"),
        "function": _spec(True, "string"),
    }
)

_VALUE = ("value",)
_VALUES = ("values",)

VALID_CONDITIONS = MappingProxyType(
    {
        "call": ("function",),
        "email_address": (),
        "zipcode": (),
        "yyyy_mm_dd_hh_mm_ss": (),
        "yyyy_mm_dd_hh_mm": (),
        "yyyy_mm_dd": (),
        "mm_dd_yyyy": (),
        "yyyy": (),
        "hh_mm": (),
        "hh_mm_ss": (),
        "matches_regex": _VALUE,
        "is_integer": (),
        "is_float": (),
        "equal": _VALUE,
        "not_equal": _VALUE,
        "greater_than": _VALUE,
        "less_than": _VALUE,
        "greater_than_or_equal": _VALUE,
        "less_than_or_equal": _VALUE,
        "equal_property": _VALUE,
        "not_equal_property": _VALUE,
        "greater_than_property": _VALUE,
        "less_than_property": _VALUE,
        "greater_than_or_equal_property": _VALUE,
        "less_than_or_equal_property": _VALUE,
        "between": ("start", "end"),
        "starts_with": _VALUE,
        "ends_with": _VALUE,
        "contains": _VALUE,
        "not_empty": (),
        "is_empty": (),
        "is_true": (),
        "is_false": (),
        "in": _VALUES,
        "not_in": _VALUES,
        "does_not_contain": _VALUE,
        "includes_all": _VALUES,
        "includes_none": _VALUES,
    }
)
