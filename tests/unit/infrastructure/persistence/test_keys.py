"""Tests for primary-key resolution."""

import pytest

from flexrepo.domain.exceptions import InvalidArgument, PrimaryKeyResolutionFailure
from flexrepo.infrastructure.persistence.keys import (
    identity_values,
    key_criterion,
    key_of,
    primary_key_columns,
)


class _NotMapped:
    pass


def test_single_column_key_resolved(models):
    assert [c.name for c in primary_key_columns(models.Customer)] == ["id"]


def test_composite_key_resolved_in_declaration_order(models):
    assert [c.name for c in primary_key_columns(models.LedgerLine)] == ["ledger", "line_no"]


def test_resolution_is_cached(models):
    assert primary_key_columns(models.Customer) is primary_key_columns(models.Customer)


def test_unmapped_class_fails_resolution():
    with pytest.raises(PrimaryKeyResolutionFailure) as exc_info:
        primary_key_columns(_NotMapped)
    assert exc_info.value.entity_name == "_NotMapped"


def test_scalar_id_normalised_to_one_value(models):
    assert identity_values(models.Customer, 5) == (5,)


def test_tuple_id_for_composite_key(models):
    assert identity_values(models.LedgerLine, ("cash", 3)) == ("cash", 3)


def test_wrong_arity_rejected(models):
    with pytest.raises(InvalidArgument) as exc_info:
        identity_values(models.LedgerLine, "cash")
    assert exc_info.value.argument == "id"


def test_none_id_rejected(models):
    with pytest.raises(InvalidArgument):
        identity_values(models.Customer, None)


def test_key_criterion_renders_every_key_column(models):
    sql = str(key_criterion(models.LedgerLine, ("cash", 3)))
    assert "ledger_lines.ledger" in sql
    assert "ledger_lines.line_no" in sql


def test_key_of_transient_without_key_is_none(models):
    assert key_of(models.Customer(name="new")) is None


def test_key_of_instance_with_key(models):
    assert key_of(models.Customer(id=9, name="known")) == (9,)
