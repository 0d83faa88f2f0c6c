import json
import logging
from dataclasses import dataclass
from typing import Any, Iterable

from . import config
from .schema_tables import (
    ACTION_FIELDS,
    ADDITIONAL_FIELDS,
    COMBINATION_FIELDS,
    MAIN_FIELDS,
    RULE_FIELDS,
    VALID_CONDITIONS,
    FieldSpec,
    NestedCheck,
)

logger = logging.getLogger(__name__)

_OBJECT = FieldSpec(types=("object",))

_NODE = "node"
_ERRORS = "errors"


class CriticalError(ValueError):
    pass


@dataclass(frozen=True)
class ValidationContext:
    label: str
    max_depth: int = config.DEFAULT_MAX_RULE_DEPTH


@dataclass
class ValidationResult:
    valid: bool
    errors: list[str] | None = None
    critical: str | None = None

    def as_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"valid": self.valid}
        if self.errors:
            out["errors"] = list(self.errors)
        if self.critical is not None:
            out["critical"] = self.critical
        return out


def _reject_constant(token: str):
    raise ValueError(f"Unexpected token {token}")


def kind_of(value: Any) -> str:
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if value is None:
        return "null"
    return type(value).__name__


def parse(content: Any) -> list:
    if not isinstance(content, str):
        raise CriticalError("Invalid data - Not a string")
    try:
        parsed = json.loads(content, parse_constant=_reject_constant)
    except RecursionError as exc:
        raise CriticalError("Invalid JSON - document nested too deeply") from exc
    except ValueError as exc:
        raise CriticalError(f"Invalid JSON - {exc}") from exc
    if not isinstance(parsed, (dict, list)):
        raise CriticalError(f"Invalid brij JSON - not an object: got instead: {kind_of(parsed)}")
    if not isinstance(parsed, list):
        raise CriticalError("Invalid brij JSON - not an array")
    return parsed


def rule_set_label(rule_set: Any, index: int) -> str:
    if isinstance(rule_set, dict) and "id" in rule_set:
        value = rule_set["id"]
        return value if isinstance(value, str) else json.dumps(value)
    return f"Rule #{index}"


def check_type(ctx: ValidationContext, name: str, spec: FieldSpec, value: Any) -> list[str]:
    if not spec.has_type:
        return []
    actual = kind_of(value)
    if actual in spec.types:
        return []
    expected = " or ".join(spec.types)
    return [f"{ctx.label}: Type for field {name}, was expected to be {expected}, not {actual}"]


def validate_field(ctx: ValidationContext, name: str, spec: FieldSpec, container: dict) -> list[str]:
    if name not in container:
        if spec.required:
            return [f"{ctx.label} missing required field: {name}"]
        return []

    value = container[name]
    type_errors = check_type(ctx, name, spec, value)
    if type_errors:
        return type_errors
    return _run_check(ctx, spec.check, value, container)


def _run_check(ctx: ValidationContext, check: NestedCheck, value: Any, container: dict) -> list[str]:
    if check is NestedCheck.RULE_TREE:
        return validate_rule(ctx, value)
    if check is NestedCheck.CONDITION:
        return validate_condition(ctx, container)
    if check is NestedCheck.ACTIONS:
        return validate_actions(ctx, value)
    return []


def validate_condition(ctx: ValidationContext, node: dict) -> list[str]:
    condition = node.get("condition")
    if not isinstance(condition, str) or condition not in VALID_CONDITIONS:
        return [f"{ctx.label} does not have valid condition specified: {condition}"]

    errors: list[str] = []
    for name in VALID_CONDITIONS[condition]:
        spec = ADDITIONAL_FIELDS[name]
        if name not in node and spec.required:
            errors.append(f"{ctx.label} missing required additional field for {condition}: {name}")
            continue
        errors.extend(validate_field(ctx, name, spec, node))
    return errors


def validate_actions(ctx: ValidationContext, actions: list) -> list[str]:
    # Unknown keys are rejected here, unlike the top-level rule set fields.
    errors: list[str] = []
    for action in actions:
        if not isinstance(action, dict):
            errors.extend(check_type(ctx, "actions", _OBJECT, action))
            continue
        for key, value in action.items():
            spec = ACTION_FIELDS.get(key)
            if spec is None:
                errors.append(f"{ctx.label} invalid action specified: {key}")
                continue
            errors.extend(check_type(ctx, key, spec, value))
    return errors


def _expand_node(ctx: ValidationContext, node: dict, depth: int) -> list[tuple[str, Any, int]]:
    items: list[tuple[str, Any, int]] = []
    combo_found = False
    for name, spec in COMBINATION_FIELDS.items():
        if name not in node:
            continue
        combo_found = True
        value = node[name]
        type_errors = check_type(ctx, name, spec, value)
        if type_errors:
            items.append((_ERRORS, type_errors, depth))
            continue
        children = value if isinstance(value, list) else [value]
        for child in children:
            if isinstance(child, dict):
                items.append((_NODE, child, depth + 1))
            else:
                items.append((_ERRORS, check_type(ctx, name, _OBJECT, child), depth))

    # Leaf fields are ignored on any node carrying a combinator key.
    if not combo_found:
        for name, spec in RULE_FIELDS.items():
            items.append((_ERRORS, validate_field(ctx, name, spec, node), depth))
    return items


def validate_rule(ctx: ValidationContext, node: Any) -> list[str]:
    """Validate a rule tree rooted at ``node``.

    Combinator nodes (``if``/``then``/``and``/``or``) are expanded into their
    children; any other node is checked as a leaf condition. The walk uses an
    explicit stack, so errors come out in the same depth-first order a
    recursive walk would give while nesting is bounded by ``ctx.max_depth``.
    """
    if not isinstance(node, dict):
        return check_type(ctx, "rule", _OBJECT, node)

    errors: list[str] = []
    too_deep = False
    stack: list[tuple[str, Any, int]] = [(_NODE, node, 1)]
    while stack:
        tag, item, depth = stack.pop()
        if tag == _ERRORS:
            errors.extend(item)
            continue
        if depth > ctx.max_depth:
            if not too_deep:
                errors.append(
                    f"{ctx.label} rule nested too deeply: exceeds maximum depth of {ctx.max_depth}"
                )
                too_deep = True
            continue
        stack.extend(reversed(_expand_node(ctx, item, depth)))
    return errors


def validate_rule_set(ctx: ValidationContext, rule_set: dict) -> list[str]:
    errors: list[str] = []
    for name, spec in MAIN_FIELDS.items():
        errors.extend(validate_field(ctx, name, spec, rule_set))
    return errors


def validate(content: Any, max_depth: int | None = None) -> ValidationResult:
    if max_depth is None:
        max_depth = config.max_rule_depth()

    try:
        parsed = parse(content)
    except CriticalError as exc:
        logger.debug("Rule set document rejected: %s", exc)
        return ValidationResult(valid=False, critical=str(exc))

    errors: list[str] = []
    for index, rule_set in enumerate(parsed):
        ctx = ValidationContext(label=rule_set_label(rule_set, index), max_depth=max_depth)
        if not isinstance(rule_set, dict):
            errors.extend(check_type(ctx, "rule set", _OBJECT, rule_set))
            continue
        errors.extend(validate_rule_set(ctx, rule_set))

    logger.debug("Validated %d rule sets, %d errors", len(parsed), len(errors))
    if errors:
        return ValidationResult(valid=False, errors=errors)
    return ValidationResult(valid=True)


def validate_many(contents: Iterable[Any], max_depth: int | None = None) -> list[ValidationResult]:
    return [validate(content, max_depth=max_depth) for content in contents]
