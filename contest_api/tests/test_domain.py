# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Unit tests for pure domain functions.
"""

import pytest

from contest_api.domain.authorization import (
    authorize_team_creation,
    authorize_team_update,
    check_country_access,
    check_team_membership
)
from contest_api.domain.quotas import category_quota, check_category_quota
from contest_api.domain.results import DomainResult, require
from contest_api.errors import (
    ForbiddenError,
    InvalidReferenceError,
    NotAuthorizedError,
    NotFoundError,
    QuotaExceededError
)
from contest_api.models.entities import Category, Country, Participant, Team
from contest_api.models.enums import EntityKind, ErrorKind


CUBA = Country(id=1, name="Cuba")
MEXICO = Country(id=2, name="Mexico")
COMPETITION = Category(id=1, name="Competition")


class TestCountryAccess:
    """Test country scoping of delegation heads."""

    @pytest.mark.parametrize("head_country", ["Cuba", "cuba", "CUBA", " Cuba "])
    def test_same_country_ignoring_case(self, head_country):
        assert check_country_access(head_country, CUBA).allowed is True

    def test_other_country(self):
        result = check_country_access("Mexico", CUBA)

        assert result.allowed is False
        assert "Cuba" in result.reason

    def test_missing_country(self):
        assert check_country_access("Cuba", None).allowed is False

    def test_update_replaces_supplied_country(self):
        existing = Team(id=3, name="Alpha", country_id=1, category_id=1, country=CUBA, category=COMPETITION)
        incoming = Team(id=3, name="Alpha", country_id=2, category_id=1)

        result = authorize_team_update(incoming, existing, "cuba")

        assert result.value.country == CUBA
        assert incoming.country_id == 2

    def test_update_other_country(self):
        existing = Team(id=3, name="Tacos", country_id=2, category_id=1, country=MEXICO, category=COMPETITION)

        result = authorize_team_update(existing, existing, "Cuba")

        assert result.error.kind == ErrorKind.FORBIDDEN
        assert result.error.entity == EntityKind.TEAM
        assert result.error.entity_id == 3

    def test_creation_for_other_country(self):
        result = authorize_team_creation(Team(name="Alpha", country_id=2, category_id=1), MEXICO, "Cuba")

        assert result.error.kind == ErrorKind.FORBIDDEN

    def test_membership(self):
        member = Participant(id=5, name="Ana", country_id=1, team_id=3)

        assert check_team_membership(member, 3).value.team_id is None
        assert check_team_membership(member, 4).error.kind == ErrorKind.INVALID_REFERENCE


class TestCategoryQuota:
    """Test per-country category caps."""

    @pytest.mark.parametrize("name,expected", [
        ("Competition", 2),
        ("competition", 2),
        ("JUNIOR", 1),
        ("Observer", None),
        ("", None),
    ])
    def test_category_quota(self, name, expected):
        assert category_quota(name) == expected

    def test_below_cap_attaches_category(self):
        team = Team(name="Alpha", country_id=1, category_id=1)

        result = check_category_quota(team, COMPETITION, 1)

        assert result.ok
        assert result.value.category == COMPETITION

    def test_at_cap(self):
        result = check_category_quota(Team(name="Alpha", country_id=1, category_id=1), COMPETITION, 2)

        assert result.error.kind == ErrorKind.QUOTA_EXCEEDED
        assert result.error.limit == 2
        assert result.error.rule == "competition_teams_per_country"

    def test_uncapped_category(self):
        observer = Category(id=9, name="Observer")

        assert check_category_quota(Team(name="Alpha", country_id=1, category_id=9), observer, 50).ok


class TestDomainResult:
    """Test result chaining and exception mapping."""

    def test_then_short_circuits(self):
        calls = []
        failed = DomainResult.failure(ErrorKind.NOT_FOUND, "missing")

        result = failed.then(lambda v: calls.append(v) or DomainResult.success(v))

        assert calls == []
        assert result.error.message == "missing"

    def test_require(self):
        assert require(5, ErrorKind.NOT_FOUND, "missing").value == 5
        assert require(None, ErrorKind.NOT_FOUND, "missing").error.kind == ErrorKind.NOT_FOUND

    @pytest.mark.parametrize("kind,exc_class,status", [
        (ErrorKind.NOT_FOUND, NotFoundError, 404),
        (ErrorKind.NOT_AUTHORIZED, NotAuthorizedError, 401),
        (ErrorKind.FORBIDDEN, ForbiddenError, 403),
        (ErrorKind.INVALID_REFERENCE, InvalidReferenceError, 422),
        (ErrorKind.QUOTA_EXCEEDED, QuotaExceededError, 409),
    ])
    def test_unwrap_raises_mapped_exception(self, kind, exc_class, status):
        with pytest.raises(exc_class) as exc_info:
            DomainResult.failure(kind, "failed").unwrap()

        assert exc_info.value.status_code == status
        assert exc_info.value.message == "failed"

    def test_error_context_in_dict(self):
        result = DomainResult.failure(
            ErrorKind.INVALID_REFERENCE, "Category 9 does not exist", entity=EntityKind.CATEGORY, entity_id=9
        )

        with pytest.raises(InvalidReferenceError) as exc_info:
            result.unwrap()

        assert exc_info.value.to_dict() == {
            "type": "invalid-reference",
            "status": 422,
            "detail": "Category 9 does not exist",
            "entity": "category",
            "entity_id": 9
        }
