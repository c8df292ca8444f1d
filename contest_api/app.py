"""
Contest Admin - service wiring entry point

Builds the team and participant services over the MongoDB store adapters
and initializes observability. The transport layer (HTTP, CLI) is expected
to call ``create_services`` once and reuse the returned container.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .config import Settings, get_settings
from .observability.config import setup_observability
from .services.mongodb import (
    MongoCategoryStore,
    MongoCountryStore,
    MongoDBService,
    MongoDelegationHeadStore,
    MongoParticipantStore,
    MongoRegionStore,
    MongoTeamStore
)
from .services.participants import ParticipantService
from .services.teams import TeamService

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Services sharing one MongoDB connection pool."""
    mongodb: MongoDBService
    teams: TeamService
    participants: ParticipantService

    def close(self) -> None:
        self.mongodb.close_connection()


def create_services(settings: Optional[Settings] = None, mongodb: Optional[MongoDBService] = None) -> ServiceContainer:
    """Initialize observability and wire services to MongoDB."""
    settings = settings or get_settings()
    setup_observability(settings)

    mongodb = mongodb or MongoDBService(settings=settings)

    team_store = MongoTeamStore(mongodb)
    country_store = MongoCountryStore(mongodb)
    head_store = MongoDelegationHeadStore(mongodb)
    participant_store = MongoParticipantStore(mongodb)

    teams = TeamService(
        teams=team_store,
        countries=country_store,
        categories=MongoCategoryStore(mongodb),
        heads=head_store,
        participants=participant_store
    )
    participants = ParticipantService(
        participants=participant_store,
        teams=team_store,
        countries=country_store,
        regions=MongoRegionStore(mongodb),
        heads=head_store
    )

    logger.info(
        "Contest admin services created",
        extra={"environment": settings.environment, "database": mongodb.database_name}
    )
    return ServiceContainer(mongodb=mongodb, teams=teams, participants=participants)
