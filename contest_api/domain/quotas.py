# SPDX-License-Identifier: Apache-2.0

"""
Per-country team quotas by category.
"""

from typing import Dict, Optional

from ..models.entities import Category, Team
from ..models.enums import ErrorKind, TeamCategoryName
from .results import DomainResult


CATEGORY_QUOTAS: Dict[TeamCategoryName, int] = {
    TeamCategoryName.COMPETITION: 2,
    TeamCategoryName.JUNIOR: 1,
}

QUOTA_MESSAGES: Dict[TeamCategoryName, str] = {
    TeamCategoryName.COMPETITION: "There are already 2 Competition teams for this country",
    TeamCategoryName.JUNIOR: "There is already a Junior team for this country",
}


def category_quota(category_name: str) -> Optional[int]:
    """
    Get the maximum number of teams per country for a category.

    Args:
        category_name: Category name, matched ignoring case

    Returns:
        Team limit, or None when the category is not capped
    """
    member = TeamCategoryName.match(category_name)
    if member is None:
        return None
    return CATEGORY_QUOTAS[member]


def check_category_quota(team: Team, category: Category, existing_count: int) -> DomainResult[Team]:
    """
    Check that saving ``team`` keeps its country within the category cap.

    Args:
        team: Team being saved
        category: Resolved category of the team
        existing_count: Persisted teams of the same country and category,
            excluding the team itself

    Returns:
        DomainResult with the team bound to ``category``
    """
    limit = category_quota(category.name)
    if limit is not None and existing_count >= limit:
        member = TeamCategoryName.match(category.name)
        return DomainResult.failure(
            ErrorKind.QUOTA_EXCEEDED,
            QUOTA_MESSAGES[member],
            rule=f"{member.value.lower()}_teams_per_country",
            limit=limit
        )

    return DomainResult.success(team.with_category(category))
