import pytest

from brij.schema_tables import (
    ACTION_FIELDS,
    ADDITIONAL_FIELDS,
    COMBINATION_FIELDS,
    KINDS,
    MAIN_FIELDS,
    RULE_FIELDS,
    VALID_CONDITIONS,
    NestedCheck,
)


def test_tables_are_read_only():
    with pytest.raises(TypeError):
        VALID_CONDITIONS["shiny"] = ()
    with pytest.raises(TypeError):
        MAIN_FIELDS["owner"] = MAIN_FIELDS["id"]


def test_every_condition_field_is_declared():
    for fields in VALID_CONDITIONS.values():
        for name in fields:
            assert name in ADDITIONAL_FIELDS


def test_declared_types_are_known_kinds():
    for table in (MAIN_FIELDS, RULE_FIELDS, COMBINATION_FIELDS, ACTION_FIELDS, ADDITIONAL_FIELDS):
        for spec in table.values():
            assert set(spec.types) <= set(KINDS)


def test_combinator_order():
    assert list(COMBINATION_FIELDS) == ["if", "then", "and", "or"]


def test_nested_checks_are_tags():
    assert MAIN_FIELDS["rule"].check is NestedCheck.RULE_TREE
    assert MAIN_FIELDS["actions"].check is NestedCheck.ACTIONS
    assert RULE_FIELDS["condition"].check is NestedCheck.CONDITION
    assert RULE_FIELDS["property"].check is NestedCheck.NONE
