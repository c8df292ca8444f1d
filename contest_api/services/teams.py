# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Team service: queries plus validated, country-scoped mutations.
"""

import logging
from typing import List, Optional

from opentelemetry import trace

from ..domain.authorization import attach_category, authorize_team_creation, authorize_team_update
from ..domain.quotas import category_quota, check_category_quota
from ..domain.results import DomainResult, require
from ..errors import ConflictError, CustomException, NotFoundError
from ..models.entities import Team
from ..models.enums import EntityKind, ErrorKind
from ..models.requests import TeamFilters
from ..models.responses import TeamSummary
from .stores import CategoryStore, CountryStore, DelegationHeadStore, ParticipantStore, TeamStore

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


def resolve_head_country(heads: DelegationHeadStore, username: str) -> DomainResult[str]:
    """
    Resolve the country a delegation head is allowed to manage.

    Args:
        heads: Delegation head store
        username: Normalized username of the acting user

    Returns:
        DomainResult with the head's country name
    """
    head = heads.find_by_normalized_username(username)
    if head is None:
        return DomainResult.failure(
            ErrorKind.NOT_AUTHORIZED,
            "User is not registered as a delegation head",
            username=username
        )

    country_name = heads.find_country_by_participant_id(head.participant_id)
    if not country_name:
        return DomainResult.failure(
            ErrorKind.NOT_AUTHORIZED,
            "You do not have a country assigned",
            username=username
        )

    return DomainResult.success(country_name)


class TeamService:
    """Service for team management with delegation-head authorization."""

    def __init__(
        self,
        teams: TeamStore,
        countries: CountryStore,
        categories: CategoryStore,
        heads: DelegationHeadStore,
        participants: ParticipantStore
    ):
        """Initialize team service with its store collaborators."""
        self.teams = teams
        self.countries = countries
        self.categories = categories
        self.heads = heads
        self.participants = participants
        logger.info("Team service initialized")

    # Queries

    def list_teams(self) -> List[TeamSummary]:
        """List all teams."""
        return [TeamSummary.from_team(team) for team in self.teams.find_all()]

    def get_team(self, team_id: int) -> TeamSummary:
        """
        Get a team by id.

        Raises:
            NotFoundError: If no team has this id
        """
        team = self.teams.find_by_id(team_id)
        if team is None:
            raise NotFoundError(f"Team not found with ID {team_id}", EntityKind.TEAM, team_id)
        return TeamSummary.from_team(team)

    def list_teams_by_country(self, country_id: int) -> List[TeamSummary]:
        """List teams owned by a country."""
        return [TeamSummary.from_team(team) for team in self.teams.find_by_country(country_id)]

    def search_teams(
        self,
        name: Optional[str] = None,
        country_id: Optional[int] = None,
        category_id: Optional[int] = None
    ) -> List[TeamSummary]:
        """
        Search teams by any combination of name substring, country and category.

        Absent filters are not applied.
        """
        filters = TeamFilters(name=name, country_id=country_id, category_id=category_id)
        teams = self.teams.search(filters.name, filters.country_id, filters.category_id)
        logger.debug(
            f"Team search returned {len(teams)} results",
            extra={"filters": filters.model_dump(exclude_none=True)}
        )
        return [TeamSummary.from_team(team) for team in teams]

    # Validation

    def validate_head_permission(self, team: Team, username: str) -> DomainResult[Team]:
        """
        Check that ``username`` may write ``team`` and resolve its references.

        On update (nonzero id) the existing team must belong to the head's
        country and the result keeps the existing country. On create the
        referenced country and category are loaded and the country must be
        the head's own. The incoming team is never modified.

        Args:
            team: Team to create or update
            username: Normalized username of the acting user

        Returns:
            DomainResult with a new team carrying the resolved references
        """
        with tracer.start_as_current_span("teams.validate_head_permission") as span:
            span.set_attributes({
                "team.id": team.id,
                "team.is_new": team.is_new(),
                "user.username": username
            })

            def authorize(head_country: str) -> DomainResult[Team]:
                if not team.is_new():
                    return require(
                        self.teams.find_by_id(team.id),
                        ErrorKind.NOT_FOUND,
                        f"Team not found with ID {team.id}",
                        EntityKind.TEAM,
                        team.id
                    ).then(lambda existing: authorize_team_update(team, existing, head_country))

                return require(
                    self.countries.find_by_id(team.country_id),
                    ErrorKind.INVALID_REFERENCE,
                    f"Country {team.country_id} does not exist",
                    EntityKind.COUNTRY,
                    team.country_id
                ).then(
                    lambda country: authorize_team_creation(team, country, head_country)
                ).then(
                    lambda created: require(
                        self.categories.find_by_id(created.category_id),
                        ErrorKind.INVALID_REFERENCE,
                        f"Category {created.category_id} does not exist",
                        EntityKind.CATEGORY,
                        created.category_id
                    ).then(lambda category: attach_category(created, category))
                )

            result = resolve_head_country(self.heads, username).then(authorize)
            span.set_attribute("authorization.result", "allowed" if result.ok else result.error.kind.value)
            return result

    def validate_category_restrictions(self, team: Team) -> DomainResult[Team]:
        """
        Check the per-country category cap for ``team``.

        The count covers persisted teams of the same country and category,
        excluding the team's own id, so an update that keeps its category
        is never rejected because of itself.

        Args:
            team: Team with resolved country

        Returns:
            DomainResult with the team bound to its resolved category
        """
        with tracer.start_as_current_span("teams.validate_category_restrictions") as span:
            span.set_attributes({
                "team.country_id": team.country_id,
                "team.category_id": team.category_id
            })

            def check(category) -> DomainResult[Team]:
                existing_count = 0
                if category_quota(category.name) is not None:
                    existing_count = self.teams.count_by_country_and_category(
                        team.country_id,
                        category.id,
                        exclude_id=None if team.is_new() else team.id
                    )
                span.set_attribute("quota.existing_count", existing_count)
                return check_category_quota(team, category, existing_count)

            return require(
                self.categories.find_by_id(team.category_id),
                ErrorKind.INVALID_REFERENCE,
                f"Category {team.category_id} does not exist",
                EntityKind.CATEGORY,
                team.category_id
            ).then(check)

    # Mutations

    def save_team(self, team: Team, username: str) -> TeamSummary:
        """
        Create (id 0) or update a team on behalf of a delegation head.

        Raises:
            NotAuthorizedError: If the user is not a head or has no country
            NotFoundError: If an updated team does not exist
            ForbiddenError: If the team belongs to another country
            InvalidReferenceError: If the country or category does not exist
            QuotaExceededError: If the country reached the category cap
            ConflictError: If the country already has a team with this name
        """
        with tracer.start_as_current_span("teams.save") as span:
            span.set_attributes({"team.id": team.id, "user.username": username})

            result = self.validate_head_permission(team, username).then(self.validate_category_restrictions)
            validated = self._unwrap(result, "save", team.id, username)

            try:
                saved = self.teams.save(validated)
            except ConflictError as e:
                logger.warning(
                    f"Team save rejected: {e.error_type}",
                    extra={"team_id": team.id, "username": username, **e.to_dict()}
                )
                raise
            span.set_attribute("team.saved_id", saved.id)
            logger.info(
                f"{'Created' if team.is_new() else 'Updated'} team {saved.id}",
                extra={
                    "team_id": saved.id,
                    "country_id": saved.country_id,
                    "category_id": saved.category_id,
                    "username": username
                }
            )
            return TeamSummary.from_team(saved)

    def delete_team(self, team_id: int, username: str) -> None:
        """
        Delete a team on behalf of a delegation head.

        The team must exist before any authorization takes place. Members of
        the team are left unassigned.

        Raises:
            NotFoundError: If no team has this id
            NotAuthorizedError: If the user is not a head or has no country
            ForbiddenError: If the team belongs to another country
        """
        with tracer.start_as_current_span("teams.delete") as span:
            span.set_attributes({"team.id": team_id, "user.username": username})

            existing = self.teams.find_by_id(team_id)
            if existing is None:
                raise NotFoundError(f"Team not found with ID {team_id}", EntityKind.TEAM, team_id)

            self._unwrap(self.validate_head_permission(existing, username), "delete", team_id, username)

            released = self.participants.clear_team(team_id)
            span.set_attribute("team.released_members", released)
            self.teams.delete_by_id(team_id)
            logger.info(
                f"Deleted team {team_id}",
                extra={
                    "team_id": team_id,
                    "country_id": existing.country_id,
                    "released_members": released,
                    "username": username
                }
            )

    def _unwrap(self, result: DomainResult[Team], action: str, team_id: int, username: str) -> Team:
        """Return the validated team or log and raise the failure."""
        try:
            return result.unwrap()
        except CustomException as e:
            logger.warning(
                f"Team {action} rejected: {e.error_type}",
                extra={"team_id": team_id, "username": username, **e.to_dict()}
            )
            raise
