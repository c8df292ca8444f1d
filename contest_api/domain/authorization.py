# SPDX-License-Identifier: Apache-2.0

"""
Authorization domain logic for delegation heads.

A delegation head may only manage teams and participants of their own
country. This module contains pure functions for that country scoping; the
store lookups feeding them live in the service layer.
"""

from dataclasses import dataclass
from typing import Optional

from ..models.entities import Country, Team, Participant, Category
from ..models.enums import EntityKind, ErrorKind
from .results import DomainResult


@dataclass
class AuthorizationResult:
    """Result of an authorization check."""
    allowed: bool
    reason: Optional[str] = None


def check_country_access(head_country: str, country: Optional[Country]) -> AuthorizationResult:
    """
    Check if a head whose country is ``head_country`` may act on ``country``.

    Country names are compared ignoring case.

    Args:
        head_country: Country name of the delegation head
        country: Country owning the target entity

    Returns:
        AuthorizationResult indicating if access is granted
    """
    if country is not None and country.same_country(head_country):
        return AuthorizationResult(allowed=True)

    target = country.name if country is not None else "unknown"
    return AuthorizationResult(
        allowed=False,
        reason=f"Access denied to country {target} for delegation head of {head_country}"
    )


def authorize_team_update(team: Team, existing: Team, head_country: str) -> DomainResult[Team]:
    """
    Authorize an update of an existing team.

    The returned team always keeps the existing team's country; whatever
    country the caller supplied is discarded.

    Args:
        team: Incoming team data
        existing: Persisted team with the same id
        head_country: Country name of the delegation head

    Returns:
        DomainResult with the team bound to its original country
    """
    access = check_country_access(head_country, existing.country)
    if not access.allowed:
        return DomainResult.failure(
            ErrorKind.FORBIDDEN,
            "You cannot modify teams of a country other than your own",
            entity=EntityKind.TEAM,
            entity_id=existing.id
        )

    return DomainResult.success(team.with_country(existing.country))


def authorize_team_creation(team: Team, country: Country, head_country: str) -> DomainResult[Team]:
    """
    Authorize creation of a team for ``country``.

    Args:
        team: Incoming team data
        country: Fully loaded country referenced by the team
        head_country: Country name of the delegation head

    Returns:
        DomainResult with the team bound to the resolved country
    """
    access = check_country_access(head_country, country)
    if not access.allowed:
        return DomainResult.failure(
            ErrorKind.FORBIDDEN,
            "You cannot create teams for a country other than your own",
            entity=EntityKind.COUNTRY,
            entity_id=country.id
        )

    return DomainResult.success(team.with_country(country))


def attach_category(team: Team, category: Category) -> DomainResult[Team]:
    """Bind the resolved category to the team."""
    return DomainResult.success(team.with_category(category))


def authorize_participant_change(
    participant: Participant,
    country: Country,
    head_country: str
) -> DomainResult[Participant]:
    """
    Authorize creating or modifying a participant of ``country``.

    Args:
        participant: Participant being written
        country: Country the participant represents
        head_country: Country name of the delegation head

    Returns:
        DomainResult with the participant bound to ``country``
    """
    access = check_country_access(head_country, country)
    if not access.allowed:
        return DomainResult.failure(
            ErrorKind.FORBIDDEN,
            "You cannot manage participants of a country other than your own",
            entity=EntityKind.PARTICIPANT,
            entity_id=participant.id or None
        )

    return DomainResult.success(participant.with_country(country))


def check_team_country(participant: Participant, team: Team) -> DomainResult[Participant]:
    """
    A participant may only join a team of the country they represent.

    Args:
        participant: Participant with a resolved country
        team: Team with a resolved country

    Returns:
        DomainResult with the participant unchanged
    """
    if participant.country_id != team.country_id:
        return DomainResult.failure(
            ErrorKind.FORBIDDEN,
            f"Participant {participant.id} cannot join team {team.id} of another country",
            entity=EntityKind.TEAM,
            entity_id=team.id
        )

    return DomainResult.success(participant)


def check_team_membership(participant: Participant, team_id: int) -> DomainResult[Participant]:
    """
    Verify that the participant currently belongs to ``team_id``.

    Args:
        participant: Participant to check
        team_id: Team the participant is expected to belong to

    Returns:
        DomainResult with the participant unassigned from the team
    """
    if participant.team_id != team_id:
        return DomainResult.failure(
            ErrorKind.INVALID_REFERENCE,
            f"Participant {participant.id} is not a member of team {team_id}",
            entity=EntityKind.TEAM,
            entity_id=team_id
        )

    return DomainResult.success(participant.with_team(None))
