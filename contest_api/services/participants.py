# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Participant service: listings, search and country-scoped membership changes.
"""

import logging
from typing import Dict, List, Optional

from opentelemetry import trace

from ..domain.authorization import authorize_participant_change, check_team_country, check_team_membership
from ..domain.results import DomainResult, require
from ..errors import CustomException, NotFoundError
from ..models.entities import Participant, Team
from ..models.enums import EntityKind, ErrorKind
from ..models.requests import ParticipantFilters
from ..models.responses import (
    CountryParticipants,
    ParticipantSummary,
    RegionParticipants,
    TeamParticipants,
    TeamSummary
)
from .stores import CountryStore, DelegationHeadStore, ParticipantStore, RegionStore, TeamStore
from .teams import resolve_head_country

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


class ParticipantService:
    """Service for participant management with delegation-head authorization."""

    def __init__(
        self,
        participants: ParticipantStore,
        teams: TeamStore,
        countries: CountryStore,
        regions: RegionStore,
        heads: DelegationHeadStore
    ):
        """Initialize participant service with its store collaborators."""
        self.participants = participants
        self.teams = teams
        self.countries = countries
        self.regions = regions
        self.heads = heads
        logger.info("Participant service initialized")

    # Queries

    def list_participants(self) -> List[ParticipantSummary]:
        """List all participants."""
        return self._summaries(self.participants.find_all())

    def get_participant(self, participant_id: int) -> ParticipantSummary:
        """
        Get a participant by id.

        Raises:
            NotFoundError: If no participant has this id
        """
        return self._summary(self._get_or_raise(participant_id))

    def list_participants_by_country(self, country_id: int) -> CountryParticipants:
        """List participants of a country, grouped under it."""
        country = self.countries.find_by_id(country_id)
        if country is None:
            raise NotFoundError(f"Country not found with ID {country_id}", EntityKind.COUNTRY, country_id)
        return CountryParticipants(
            country_id=country.id,
            country_name=country.name,
            participants=self._summaries(self.participants.find_by_country(country_id))
        )

    def list_participants_by_region(self, region_id: int) -> RegionParticipants:
        """List participants of every country in a region."""
        region = self.regions.find_by_id(region_id)
        if region is None:
            raise NotFoundError(f"Region not found with ID {region_id}", EntityKind.REGION, region_id)
        return RegionParticipants(
            region_id=region.id,
            region_name=region.name,
            participants=self._summaries(self.participants.find_by_region(region_id))
        )

    def list_participants_by_team(self, team_id: int) -> TeamParticipants:
        """List members of a team."""
        team = self.teams.find_by_id(team_id)
        if team is None:
            raise NotFoundError(f"Team not found with ID {team_id}", EntityKind.TEAM, team_id)
        return TeamParticipants(
            team=TeamSummary.from_team(team),
            participants=self._summaries(self.participants.find_by_team(team_id), team)
        )

    def list_unassigned_by_country(self, country_id: int) -> List[ParticipantSummary]:
        """List participants of a country that are not on any team."""
        return self._summaries(self.participants.find_unassigned_by_country(country_id))

    def search_participants(
        self,
        name: Optional[str] = None,
        country_id: Optional[int] = None,
        team_id: Optional[int] = None,
        region_id: Optional[int] = None
    ) -> List[ParticipantSummary]:
        """Search participants; every filter is optional."""
        filters = ParticipantFilters(name=name, country_id=country_id, team_id=team_id, region_id=region_id)
        return self._summaries(
            self.participants.search(filters.name, filters.country_id, filters.team_id, filters.region_id)
        )

    def get_participant_id_by_name(self, name: str) -> Optional[int]:
        """Get the id of the participant with this exact name, ignoring case."""
        if not name or not name.strip():
            return None
        return self.participants.find_id_by_name(name.strip())

    # Mutations

    def create_participant(self, participant: Participant, username: str) -> ParticipantSummary:
        """
        Register a participant for the head's country.

        Raises:
            NotAuthorizedError: If the user is not a head or has no country
            InvalidReferenceError: If the country or team does not exist
            ForbiddenError: If the country or team is not the head's
        """
        with tracer.start_as_current_span("participants.create") as span:
            span.set_attributes({"participant.country_id": participant.country_id, "user.username": username})

            new_participant = participant.model_copy(update={"id": 0})
            result = resolve_head_country(self.heads, username).then(
                lambda head_country: self._authorize_country(new_participant, head_country)
            )
            if new_participant.team_id is not None:
                result = result.then(lambda p: self._check_team(p, p.team_id, ErrorKind.INVALID_REFERENCE))

            saved = self.participants.save(self._unwrap(result, "create", None, username))
            logger.info(
                f"Created participant {saved.id}",
                extra={"participant_id": saved.id, "country_id": saved.country_id, "username": username}
            )
            return self._summary(saved)

    def update_participant(self, participant_id: int, participant: Participant, username: str) -> ParticipantSummary:
        """
        Update a participant's data. The country and team cannot be changed here.

        Raises:
            NotFoundError: If the participant does not exist
            NotAuthorizedError: If the user is not a head or has no country
            ForbiddenError: If the participant belongs to another country
        """
        with tracer.start_as_current_span("participants.update") as span:
            span.set_attributes({"participant.id": participant_id, "user.username": username})

            existing = self._get_or_raise(participant_id)
            result = resolve_head_country(self.heads, username).then(
                lambda head_country: self._authorize_country(existing, head_country)
            ).then(
                lambda authorized: DomainResult.success(authorized.model_copy(update={"name": participant.name}))
            )

            saved = self.participants.save(self._unwrap(result, "update", participant_id, username))
            logger.info(
                f"Updated participant {participant_id}",
                extra={"participant_id": participant_id, "username": username}
            )
            return self._summary(saved)

    def delete_participant(self, participant_id: int, username: str) -> None:
        """
        Delete a participant.

        Raises:
            NotFoundError: If the participant does not exist
            NotAuthorizedError: If the user is not a head or has no country
            ForbiddenError: If the participant belongs to another country
        """
        with tracer.start_as_current_span("participants.delete") as span:
            span.set_attributes({"participant.id": participant_id, "user.username": username})

            existing = self._get_or_raise(participant_id)
            result = resolve_head_country(self.heads, username).then(
                lambda head_country: self._authorize_country(existing, head_country)
            )
            self._unwrap(result, "delete", participant_id, username)

            self.participants.delete_by_id(participant_id)
            logger.info(
                f"Deleted participant {participant_id}",
                extra={"participant_id": participant_id, "username": username}
            )

    def assign_to_team(self, participant_id: int, team_id: int, username: str) -> ParticipantSummary:
        """
        Assign a participant to a team of the same country.

        Raises:
            NotFoundError: If the participant or team does not exist
            NotAuthorizedError: If the user is not a head or has no country
            ForbiddenError: If participant, team and head countries differ
        """
        with tracer.start_as_current_span("participants.assign_to_team") as span:
            span.set_attributes({"participant.id": participant_id, "team.id": team_id, "user.username": username})

            existing = self._get_or_raise(participant_id)
            result = resolve_head_country(self.heads, username).then(
                lambda head_country: self._authorize_country(existing, head_country)
            ).then(
                lambda authorized: self._check_team(authorized, team_id, ErrorKind.NOT_FOUND)
            ).then(
                lambda checked: DomainResult.success(checked.with_team(team_id))
            )

            saved = self.participants.save(self._unwrap(result, "assign", participant_id, username))
            logger.info(
                f"Assigned participant {participant_id} to team {team_id}",
                extra={"participant_id": participant_id, "team_id": team_id, "username": username}
            )
            return self._summary(saved)

    def remove_from_team(self, participant_id: int, team_id: int, username: str) -> ParticipantSummary:
        """
        Remove a participant from the team they belong to.

        Raises:
            NotFoundError: If the participant does not exist
            NotAuthorizedError: If the user is not a head or has no country
            ForbiddenError: If the participant belongs to another country
            InvalidReferenceError: If the participant is not on that team
        """
        with tracer.start_as_current_span("participants.remove_from_team") as span:
            span.set_attributes({"participant.id": participant_id, "team.id": team_id, "user.username": username})

            existing = self._get_or_raise(participant_id)
            result = resolve_head_country(self.heads, username).then(
                lambda head_country: self._authorize_country(existing, head_country)
            ).then(
                lambda authorized: check_team_membership(authorized, team_id)
            )

            saved = self.participants.save(self._unwrap(result, "remove", participant_id, username))
            logger.info(
                f"Removed participant {participant_id} from team {team_id}",
                extra={"participant_id": participant_id, "team_id": team_id, "username": username}
            )
            return self._summary(saved)

    # Helpers

    def _summary(self, participant: Participant) -> ParticipantSummary:
        team = self.teams.find_by_id(participant.team_id) if participant.team_id is not None else None
        return ParticipantSummary.from_participant(participant, team)

    def _summaries(self, participants: List[Participant], team: Optional[Team] = None) -> List[ParticipantSummary]:
        """Project participants, loading each distinct team once unless ``team`` is given."""
        teams: Dict[int, Optional[Team]] = {team.id: team} if team is not None else {}
        summaries = []
        for participant in participants:
            team_id = participant.team_id
            if team_id is not None and team_id not in teams:
                teams[team_id] = self.teams.find_by_id(team_id)
            summaries.append(
                ParticipantSummary.from_participant(participant, teams.get(team_id) if team_id is not None else None)
            )
        return summaries

    def _get_or_raise(self, participant_id: int) -> Participant:
        participant = self.participants.find_by_id(participant_id)
        if participant is None:
            raise NotFoundError(
                f"Participant not found with ID {participant_id}", EntityKind.PARTICIPANT, participant_id
            )
        return participant

    def _authorize_country(self, participant: Participant, head_country: str) -> DomainResult[Participant]:
        return require(
            self.countries.find_by_id(participant.country_id),
            ErrorKind.INVALID_REFERENCE,
            f"Country {participant.country_id} does not exist",
            EntityKind.COUNTRY,
            participant.country_id
        ).then(lambda country: authorize_participant_change(participant, country, head_country))

    def _check_team(self, participant: Participant, team_id: int, missing: ErrorKind) -> DomainResult[Participant]:
        team: Optional[Team] = self.teams.find_by_id(team_id)
        return require(
            team,
            missing,
            f"Team not found with ID {team_id}",
            EntityKind.TEAM,
            team_id
        ).then(lambda found: check_team_country(participant, found))

    def _unwrap(self, result: DomainResult[Participant], action: str,
                participant_id: Optional[int], username: str) -> Participant:
        try:
            return result.unwrap()
        except CustomException as e:
            logger.warning(
                f"Participant {action} rejected: {e.error_type}",
                extra={"participant_id": participant_id, "username": username, **e.to_dict()}
            )
            raise
