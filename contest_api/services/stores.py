# SPDX-License-Identifier: Apache-2.0

"""
Data-access contracts consumed by the team and participant services.

Stores perform simple key-based lookups and persistence; each call is
atomic on its own. No lock or transaction spans several calls, so the
count-then-insert quota sequence can over-admit under concurrent saves.
"""

from typing import List, Optional, Protocol

from ..models.entities import Category, Country, DelegationHead, Participant, Region, Team


class TeamStore(Protocol):
    """Persistence of teams. Returned teams have country and category resolved."""

    def find_all(self) -> List[Team]: ...

    def find_by_id(self, team_id: int) -> Optional[Team]: ...

    def find_by_country(self, country_id: int) -> List[Team]: ...

    def save(self, team: Team) -> Team: ...

    def delete_by_id(self, team_id: int) -> None: ...

    def count_by_country_and_category(self, country_id: int, category_id: int,
                                      exclude_id: Optional[int] = None) -> int: ...

    def search(self, name: Optional[str] = None, country_id: Optional[int] = None,
               category_id: Optional[int] = None) -> List[Team]: ...


class CountryStore(Protocol):
    def find_by_id(self, country_id: int) -> Optional[Country]: ...


class RegionStore(Protocol):
    def find_by_id(self, region_id: int) -> Optional[Region]: ...


class CategoryStore(Protocol):
    def find_by_id(self, category_id: int) -> Optional[Category]: ...


class DelegationHeadStore(Protocol):
    """Lookup of delegation heads and the country they manage."""

    def find_by_normalized_username(self, username: str) -> Optional[DelegationHead]: ...

    def find_country_by_participant_id(self, participant_id: int) -> Optional[str]: ...


class ParticipantStore(Protocol):
    """Persistence of participants. Returned participants have their country resolved."""

    def find_all(self) -> List[Participant]: ...

    def find_by_id(self, participant_id: int) -> Optional[Participant]: ...

    def find_by_country(self, country_id: int) -> List[Participant]: ...

    def find_by_region(self, region_id: int) -> List[Participant]: ...

    def find_by_team(self, team_id: int) -> List[Participant]: ...

    def find_unassigned_by_country(self, country_id: int) -> List[Participant]: ...

    def save(self, participant: Participant) -> Participant: ...

    def delete_by_id(self, participant_id: int) -> None: ...

    def search(self, name: Optional[str] = None, country_id: Optional[int] = None,
               team_id: Optional[int] = None, region_id: Optional[int] = None) -> List[Participant]: ...

    def find_id_by_name(self, name: str) -> Optional[int]: ...

    def clear_team(self, team_id: int) -> int: ...
