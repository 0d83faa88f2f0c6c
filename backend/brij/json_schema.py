from functools import lru_cache
from typing import Any

from jsonschema import Draft7Validator

from .schema_tables import (
    ACTION_FIELDS,
    ADDITIONAL_FIELDS,
    COMBINATION_FIELDS,
    MAIN_FIELDS,
    RULE_FIELDS,
    VALID_CONDITIONS,
    FieldSpec,
)


def _type_schema(spec: FieldSpec) -> dict[str, Any]:
    if len(spec.types) == 1:
        return {"type": spec.types[0]}
    return {"type": list(spec.types)}


def _required(fields) -> list[str]:
    return [name for name, spec in fields.items() if spec.required]


def _combinator_schema() -> dict[str, Any]:
    properties = {}
    for name, spec in COMBINATION_FIELDS.items():
        if "array" in spec.types:
            properties[name] = {"type": "array", "items": {"$ref": "#/definitions/rule"}}
        else:
            properties[name] = {"$ref": "#/definitions/rule"}
    return {
        "type": "object",
        "properties": properties,
        "anyOf": [{"required": [name]} for name in COMBINATION_FIELDS],
    }


def _condition_schema() -> dict[str, Any]:
    properties = {name: _type_schema(spec) for name, spec in RULE_FIELDS.items()}
    properties["condition"]["enum"] = list(VALID_CONDITIONS)

    requirements = []
    for condition, fields in VALID_CONDITIONS.items():
        if not fields:
            continue
        requirements.append(
            {
                "if": {"properties": {"condition": {"const": condition}}, "required": ["condition"]},
                "then": {
                    "required": list(fields),
                    "properties": {name: _type_schema(ADDITIONAL_FIELDS[name]) for name in fields},
                },
            }
        )

    return {
        "type": "object",
        "required": _required(RULE_FIELDS),
        "properties": properties,
        "not": {"anyOf": [{"required": [name]} for name in COMBINATION_FIELDS]},
        "allOf": requirements,
    }


def _action_schema() -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {name: _type_schema(spec) for name, spec in ACTION_FIELDS.items()},
        "additionalProperties": False,
    }


def build_rule_set_schema() -> dict[str, Any]:
    properties = {name: _type_schema(spec) for name, spec in MAIN_FIELDS.items()}
    properties["rule"] = {"$ref": "#/definitions/rule"}
    properties["actions"] = {"type": "array", "items": {"$ref": "#/definitions/action"}}

    schema = {
        "$schema": "http://json-schema.org/draft-07/schema#",
        "title": "brij rule sets",
        "type": "array",
        "items": {
            "type": "object",
            "required": _required(MAIN_FIELDS),
            "properties": properties,
        },
        "definitions": {
            "rule": {"anyOf": [_combinator_schema(), {"$ref": "#/definitions/condition"}]},
            "condition": _condition_schema(),
            "action": _action_schema(),
        },
    }
    Draft7Validator.check_schema(schema)
    return schema


@lru_cache(maxsize=1)
def _validator() -> Draft7Validator:
    return Draft7Validator(build_rule_set_schema())


def schema_errors(document: Any) -> list[str]:
    validator = _validator()
    errors = sorted(validator.iter_errors(document), key=lambda e: [str(p) for p in e.path])
    messages = []
    for error in errors:
        path = ".".join(str(p) for p in error.path) or "<root>"
        messages.append(f"{path}: {error.message}")
    return messages
