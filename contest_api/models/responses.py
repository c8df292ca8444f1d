# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Summary projections returned to the calling boundary.
"""

from typing import List, Optional
from pydantic import BaseModel, Field

from .entities import Team, Participant


class TeamSummary(BaseModel):
    """Team projection: id, name, category name, country name."""

    id: int = Field(..., description="Team ID")
    name: str = Field(..., description="Team name")
    category_name: str = Field(..., description="Category name")
    country_name: str = Field(..., description="Country name")

    @classmethod
    def from_team(cls, team: Team) -> "TeamSummary":
        """Build a summary from a resolved team."""
        if not team.is_resolved():
            raise ValueError(f"Team {team.id} has unresolved country or category")
        return cls(
            id=team.id,
            name=team.name,
            category_name=team.category.name,
            country_name=team.country.name
        )


class ParticipantSummary(BaseModel):
    """Participant projection: id, name, country name, team id, team name."""

    id: int = Field(..., description="Participant ID")
    name: str = Field(..., description="Participant name")
    country_name: Optional[str] = Field(None, description="Country name")
    team_id: Optional[int] = Field(None, description="Team ID, if assigned")
    team_name: Optional[str] = Field(None, description="Team name, if assigned")

    @classmethod
    def from_participant(cls, participant: Participant, team: Optional[Team] = None) -> "ParticipantSummary":
        """Build a summary from a participant and the team it belongs to, if any."""
        if team is not None and team.id != participant.team_id:
            raise ValueError(f"Participant {participant.id} is not a member of team {team.id}")
        return cls(
            id=participant.id,
            name=participant.name,
            country_name=participant.country.name if participant.country else None,
            team_id=participant.team_id,
            team_name=team.name if team else None
        )


class TeamParticipants(BaseModel):
    """Participants grouped under a team."""

    team: TeamSummary = Field(..., description="Team the participants belong to")
    participants: List[ParticipantSummary] = Field(default_factory=list, description="Team members")


class CountryParticipants(BaseModel):
    """Participants grouped under a country."""

    country_id: int = Field(..., description="Country ID")
    country_name: str = Field(..., description="Country name")
    participants: List[ParticipantSummary] = Field(default_factory=list, description="Participants of the country")


class RegionParticipants(BaseModel):
    """Participants grouped under a region."""

    region_id: int = Field(..., description="Region ID")
    region_name: str = Field(..., description="Region name")
    participants: List[ParticipantSummary] = Field(default_factory=list, description="Participants of the region")
