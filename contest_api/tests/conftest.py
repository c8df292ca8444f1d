# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Pytest configuration and fixtures.
"""

import os
import pytest
from typing import Dict, List, Optional

from contest_api.models.entities import Category, Country, DelegationHead, Participant, Region, Team
from contest_api.services.participants import ParticipantService
from contest_api.services.teams import TeamService

# Set test environment
os.environ['ENVIRONMENT'] = 'test'
os.environ['MONGODB_DATABASE'] = 'contest_admin_test'


class InMemoryTeamStore:
    """Team store keeping resolved teams in a dict."""

    def __init__(self):
        self.rows: Dict[int, Team] = {}
        self._seq = 0
        self.calls: List[str] = []

    def add(self, team: Team) -> Team:
        self._seq = max(self._seq, team.id)
        self.rows[team.id] = team
        return team

    def find_all(self) -> List[Team]:
        return list(self.rows.values())

    def find_by_id(self, team_id: int) -> Optional[Team]:
        self.calls.append("find_by_id")
        return self.rows.get(team_id)

    def find_by_country(self, country_id: int) -> List[Team]:
        return [t for t in self.rows.values() if t.country_id == country_id]

    def save(self, team: Team) -> Team:
        if team.is_new():
            self._seq += 1
            team = team.model_copy(update={"id": self._seq})
        self.rows[team.id] = team
        return team

    def delete_by_id(self, team_id: int) -> None:
        self.calls.append("delete_by_id")
        self.rows.pop(team_id, None)

    def count_by_country_and_category(self, country_id: int, category_id: int,
                                      exclude_id: Optional[int] = None) -> int:
        return sum(
            1 for t in self.rows.values()
            if t.country_id == country_id and t.category_id == category_id and t.id != exclude_id
        )

    def search(self, name: Optional[str] = None, country_id: Optional[int] = None,
               category_id: Optional[int] = None) -> List[Team]:
        return [
            t for t in self.rows.values()
            if (name is None or name.lower() in t.name.lower())
            and (country_id is None or t.country_id == country_id)
            and (category_id is None or t.category_id == category_id)
        ]


class InMemoryParticipantStore:
    """Participant store keeping participants with resolved countries."""

    def __init__(self):
        self.rows: Dict[int, Participant] = {}
        self._seq = 0

    def add(self, participant: Participant) -> Participant:
        self._seq = max(self._seq, participant.id)
        self.rows[participant.id] = participant
        return participant

    def find_all(self) -> List[Participant]:
        return list(self.rows.values())

    def find_by_id(self, participant_id: int) -> Optional[Participant]:
        return self.rows.get(participant_id)

    def find_by_country(self, country_id: int) -> List[Participant]:
        return [p for p in self.rows.values() if p.country_id == country_id]

    def find_by_region(self, region_id: int) -> List[Participant]:
        return [p for p in self.rows.values() if p.country and p.country.region_id == region_id]

    def find_by_team(self, team_id: int) -> List[Participant]:
        return [p for p in self.rows.values() if p.team_id == team_id]

    def find_unassigned_by_country(self, country_id: int) -> List[Participant]:
        return [p for p in self.rows.values() if p.country_id == country_id and p.team_id is None]

    def save(self, participant: Participant) -> Participant:
        if participant.is_new():
            self._seq += 1
            participant = participant.model_copy(update={"id": self._seq})
        self.rows[participant.id] = participant
        return participant

    def delete_by_id(self, participant_id: int) -> None:
        self.rows.pop(participant_id, None)

    def search(self, name: Optional[str] = None, country_id: Optional[int] = None,
               team_id: Optional[int] = None, region_id: Optional[int] = None) -> List[Participant]:
        return [
            p for p in self.rows.values()
            if (name is None or name.lower() in p.name.lower())
            and (country_id is None or p.country_id == country_id)
            and (team_id is None or p.team_id == team_id)
            and (region_id is None or (p.country is not None and p.country.region_id == region_id))
        ]

    def find_id_by_name(self, name: str) -> Optional[int]:
        for p in self.rows.values():
            if p.name.lower() == name.lower():
                return p.id
        return None

    def clear_team(self, team_id: int) -> int:
        members = self.find_by_team(team_id)
        for p in members:
            self.rows[p.id] = p.with_team(None)
        return len(members)


class InMemoryLookupStore:
    """find_by_id over a fixed set of entities."""

    def __init__(self, *entities):
        self.rows = {e.id: e for e in entities}

    def find_by_id(self, entity_id: int):
        return self.rows.get(entity_id)


class InMemoryDelegationHeadStore:
    """Delegation heads resolving their country through the participant store."""

    def __init__(self, participants: InMemoryParticipantStore, *heads: DelegationHead):
        self.participants = participants
        self.heads = {h.normalized_username: h for h in heads}

    def find_by_normalized_username(self, username: str) -> Optional[DelegationHead]:
        return self.heads.get(username)

    def find_country_by_participant_id(self, participant_id: int) -> Optional[str]:
        participant = self.participants.find_by_id(participant_id)
        if participant is None or participant.country is None:
            return None
        return participant.country.name


@pytest.fixture
def regions():
    return {"americas": Region(id=1, name="Americas"), "europe": Region(id=2, name="Europe")}


@pytest.fixture
def countries(regions):
    return {
        "cuba": Country(id=1, name="Cuba", region_id=1),
        "mexico": Country(id=2, name="Mexico", region_id=1),
        "spain": Country(id=3, name="Spain", region_id=2),
    }


@pytest.fixture
def categories():
    return {
        "competition": Category(id=1, name="Competition"),
        "junior": Category(id=2, name="Junior"),
        "observer": Category(id=3, name="Observer"),
    }


@pytest.fixture
def team_store():
    return InMemoryTeamStore()


@pytest.fixture
def participant_store(countries):
    store = InMemoryParticipantStore()
    # Participant records of the delegation heads
    store.add(Participant(id=100, name="Head Cuba", country_id=1, country=countries["cuba"]))
    store.add(Participant(id=101, name="Head Mexico", country_id=2, country=countries["mexico"]))
    return store


@pytest.fixture
def head_store(participant_store):
    return InMemoryDelegationHeadStore(
        participant_store,
        DelegationHead(id=1, normalized_username="HEAD.CUBA", participant_id=100),
        DelegationHead(id=2, normalized_username="HEAD.MEXICO", participant_id=101),
        # No participant record, so no country can be resolved
        DelegationHead(id=3, normalized_username="HEAD.NOCOUNTRY", participant_id=999),
    )


@pytest.fixture
def team_service(team_store, countries, categories, head_store, participant_store):
    return TeamService(
        teams=team_store,
        countries=InMemoryLookupStore(*countries.values()),
        categories=InMemoryLookupStore(*categories.values()),
        heads=head_store,
        participants=participant_store
    )


@pytest.fixture
def participant_service(participant_store, team_store, countries, regions, head_store):
    return ParticipantService(
        participants=participant_store,
        teams=team_store,
        countries=InMemoryLookupStore(*countries.values()),
        regions=InMemoryLookupStore(*regions.values()),
        heads=head_store
    )


@pytest.fixture
def make_team(team_store, countries, categories):
    """Persist a resolved team directly in the store."""
    def _make(team_id: int, name: str, country: str = "cuba", category: str = "competition") -> Team:
        return team_store.add(Team(
            id=team_id,
            name=name,
            country_id=countries[country].id,
            category_id=categories[category].id,
            country=countries[country],
            category=categories[category]
        ))
    return _make
