# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
MongoDB service layer: connection pooling plus store adapters.

Entities use integer ids allocated from the ``counters`` collection. Teams
and participants embed a copy of their country (and category) so reads do
not need joins.
"""

import logging
import re
from typing import Any, Dict, List, Optional

from pymongo import MongoClient, ASCENDING, ReturnDocument
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError, DuplicateKeyError

from ..config import Settings, get_settings
from ..errors import ConflictError
from ..models.entities import Category, Country, DelegationHead, Participant, Region, Team
from ..models.enums import EntityKind

logger = logging.getLogger(__name__)

TEAMS = "teams"
PARTICIPANTS = "participants"
COUNTRIES = "countries"
REGIONS = "regions"
CATEGORIES = "team_categories"
DELEGATION_HEADS = "delegation_heads"
COUNTERS = "counters"


class MongoDBService:
    """MongoDB service with connection pooling and id allocation."""

    def __init__(self, connection_string: str = None, database_name: str = None, settings: Settings = None):
        """Initialize MongoDB service with connection pooling."""
        settings = settings or get_settings()
        self.connection_string = connection_string or settings.mongodb_uri
        self.database_name = database_name or settings.mongodb_database
        self._client: Optional[MongoClient] = None
        self._database: Optional[Database] = None

        # Connection pool settings
        self.max_pool_size = settings.mongodb_max_pool_size
        self.min_pool_size = settings.mongodb_min_pool_size
        self.max_idle_time_ms = settings.mongodb_max_idle_time_ms
        self.server_selection_timeout_ms = settings.mongodb_server_selection_timeout_ms

        logger.info(f"MongoDB service initialized for database: {self.database_name}")

    @property
    def client(self) -> MongoClient:
        """Get MongoDB client with connection pooling."""
        if self._client is None:
            try:
                self._client = MongoClient(
                    self.connection_string,
                    maxPoolSize=self.max_pool_size,
                    minPoolSize=self.min_pool_size,
                    maxIdleTimeMS=self.max_idle_time_ms,
                    serverSelectionTimeoutMS=self.server_selection_timeout_ms,
                    retryWrites=True,
                    retryReads=True
                )
                # Test connection
                self._client.admin.command('ping')
                logger.info("MongoDB connection established successfully")
            except (ConnectionFailure, ServerSelectionTimeoutError) as e:
                logger.error(f"Failed to connect to MongoDB: {e}")
                raise

        return self._client

    @property
    def database(self) -> Database:
        """Get MongoDB database."""
        if self._database is None:
            self._database = self.client[self.database_name]
        return self._database

    def get_collection(self, collection_name: str) -> Collection:
        """Get MongoDB collection."""
        return self.database[collection_name]

    def close_connection(self) -> None:
        """Close MongoDB connection."""
        if self._client:
            self._client.close()
            self._client = None
            self._database = None
            logger.info("MongoDB connection closed")

    def health_check(self) -> Dict[str, Any]:
        """Check MongoDB connection health."""
        try:
            result = self.client.admin.command('ping')
            return {
                'status': 'healthy',
                'ping': result.get('ok') == 1,
                'database': self.database_name,
                'connection_pool_size': self.max_pool_size
            }
        except (ConnectionFailure, ServerSelectionTimeoutError) as e:
            logger.error(f"MongoDB health check failed: {e}")
            return {
                'status': 'unhealthy',
                'error': str(e),
                'database': self.database_name
            }

    def next_id(self, collection: str) -> int:
        """Allocate the next integer id for a collection."""
        counter = self.get_collection(COUNTERS).find_one_and_update(
            {"_id": collection},
            {"$inc": {"seq": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER
        )
        return int(counter["seq"])

    # Index Management

    def create_indexes(self) -> None:
        """Create lookup and uniqueness indexes for all collections."""
        try:
            logger.info("Creating MongoDB indexes...")

            teams = self.get_collection(TEAMS)
            teams.create_index([("country.id", ASCENDING), ("category.id", ASCENDING)])
            teams.create_index([("country.id", ASCENDING), ("name", ASCENDING)], unique=True)

            participants = self.get_collection(PARTICIPANTS)
            participants.create_index([("country.id", ASCENDING), ("teamId", ASCENDING)])
            participants.create_index("country.regionId")
            participants.create_index("teamId")

            self.get_collection(COUNTRIES).create_index("name", unique=True)
            self.get_collection(DELEGATION_HEADS).create_index("normalizedUsername", unique=True)

            logger.info("MongoDB indexes created successfully")

        except Exception as e:
            logger.error(f"Failed to create MongoDB indexes: {e}")
            raise


def _name_pattern(name: str) -> Dict[str, str]:
    """Case-insensitive substring match."""
    return {"$regex": re.escape(name), "$options": "i"}


def _country_to_doc(country: Country) -> Dict[str, Any]:
    return {"id": country.id, "name": country.name, "regionId": country.region_id}


def _country_from_doc(doc: Dict[str, Any]) -> Country:
    return Country(id=doc["id"], name=doc["name"], region_id=doc.get("regionId"))


def team_to_document(team: Team) -> Dict[str, Any]:
    """Convert a resolved team to its stored form."""
    if not team.is_resolved():
        raise ValueError(f"Team {team.id} must have country and category resolved before saving")
    return {
        "_id": team.id,
        "name": team.name,
        "country": _country_to_doc(team.country),
        "category": {"id": team.category.id, "name": team.category.name}
    }


def team_from_document(doc: Dict[str, Any]) -> Team:
    """Convert a stored team document to a resolved team."""
    country = _country_from_doc(doc["country"])
    category = Category(id=doc["category"]["id"], name=doc["category"]["name"])
    return Team(
        id=doc["_id"],
        name=doc["name"],
        country_id=country.id,
        category_id=category.id,
        country=country,
        category=category
    )


def participant_to_document(participant: Participant) -> Dict[str, Any]:
    """Convert a participant with resolved country to its stored form."""
    if participant.country is None:
        raise ValueError(f"Participant {participant.id} must have its country resolved before saving")
    return {
        "_id": participant.id,
        "name": participant.name,
        "country": _country_to_doc(participant.country),
        "teamId": participant.team_id
    }


def participant_from_document(doc: Dict[str, Any]) -> Participant:
    """Convert a stored participant document to a participant."""
    country = _country_from_doc(doc["country"])
    return Participant(
        id=doc["_id"],
        name=doc["name"],
        country_id=country.id,
        country=country,
        team_id=doc.get("teamId")
    )


class MongoTeamStore:
    """Team store over the ``teams`` collection."""

    def __init__(self, mongo: MongoDBService):
        self.mongo = mongo

    @property
    def collection(self) -> Collection:
        return self.mongo.get_collection(TEAMS)

    def find_all(self) -> List[Team]:
        return [team_from_document(doc) for doc in self.collection.find({}).sort("_id", ASCENDING)]

    def find_by_id(self, team_id: int) -> Optional[Team]:
        doc = self.collection.find_one({"_id": team_id})
        return team_from_document(doc) if doc else None

    def find_by_country(self, country_id: int) -> List[Team]:
        cursor = self.collection.find({"country.id": country_id}).sort("_id", ASCENDING)
        return [team_from_document(doc) for doc in cursor]

    def save(self, team: Team) -> Team:
        if team.is_new():
            team = team.model_copy(update={"id": self.mongo.next_id(TEAMS)})
        document = team_to_document(team)
        try:
            self.collection.replace_one({"_id": team.id}, document, upsert=True)
        except DuplicateKeyError as e:
            logger.error(f"Duplicate team name in country {team.country_id}: {e}")
            raise ConflictError(
                f"A team named '{team.name}' already exists for this country", EntityKind.TEAM, team.id
            ) from e
        logger.debug(f"Saved team {team.id}")
        return team

    def delete_by_id(self, team_id: int) -> None:
        result = self.collection.delete_one({"_id": team_id})
        if result.deleted_count == 0:
            logger.warning(f"No team deleted for {team_id}")

    def count_by_country_and_category(self, country_id: int, category_id: int,
                                      exclude_id: Optional[int] = None) -> int:
        query: Dict[str, Any] = {"country.id": country_id, "category.id": category_id}
        if exclude_id is not None:
            query["_id"] = {"$ne": exclude_id}
        return self.collection.count_documents(query)

    def search(self, name: Optional[str] = None, country_id: Optional[int] = None,
               category_id: Optional[int] = None) -> List[Team]:
        query: Dict[str, Any] = {}
        if name:
            query["name"] = _name_pattern(name)
        if country_id is not None:
            query["country.id"] = country_id
        if category_id is not None:
            query["category.id"] = category_id
        return [team_from_document(doc) for doc in self.collection.find(query).sort("_id", ASCENDING)]


class MongoParticipantStore:
    """Participant store over the ``participants`` collection."""

    def __init__(self, mongo: MongoDBService):
        self.mongo = mongo

    @property
    def collection(self) -> Collection:
        return self.mongo.get_collection(PARTICIPANTS)

    def _find(self, query: Dict[str, Any]) -> List[Participant]:
        return [participant_from_document(doc) for doc in self.collection.find(query).sort("_id", ASCENDING)]

    def find_all(self) -> List[Participant]:
        return self._find({})

    def find_by_id(self, participant_id: int) -> Optional[Participant]:
        doc = self.collection.find_one({"_id": participant_id})
        return participant_from_document(doc) if doc else None

    def find_by_country(self, country_id: int) -> List[Participant]:
        return self._find({"country.id": country_id})

    def find_by_region(self, region_id: int) -> List[Participant]:
        return self._find({"country.regionId": region_id})

    def find_by_team(self, team_id: int) -> List[Participant]:
        return self._find({"teamId": team_id})

    def find_unassigned_by_country(self, country_id: int) -> List[Participant]:
        return self._find({"country.id": country_id, "teamId": None})

    def save(self, participant: Participant) -> Participant:
        if participant.is_new():
            participant = participant.model_copy(update={"id": self.mongo.next_id(PARTICIPANTS)})
        self.collection.replace_one({"_id": participant.id}, participant_to_document(participant), upsert=True)
        logger.debug(f"Saved participant {participant.id}")
        return participant

    def delete_by_id(self, participant_id: int) -> None:
        result = self.collection.delete_one({"_id": participant_id})
        if result.deleted_count == 0:
            logger.warning(f"No participant deleted for {participant_id}")

    def clear_team(self, team_id: int) -> int:
        result = self.collection.update_many({"teamId": team_id}, {"$set": {"teamId": None}})
        logger.debug(f"Released {result.modified_count} participants from team {team_id}")
        return result.modified_count

    def search(self, name: Optional[str] = None, country_id: Optional[int] = None,
               team_id: Optional[int] = None, region_id: Optional[int] = None) -> List[Participant]:
        query: Dict[str, Any] = {}
        if name:
            query["name"] = _name_pattern(name)
        if country_id is not None:
            query["country.id"] = country_id
        if team_id is not None:
            query["teamId"] = team_id
        if region_id is not None:
            query["country.regionId"] = region_id
        return self._find(query)

    def find_id_by_name(self, name: str) -> Optional[int]:
        doc = self.collection.find_one(
            {"name": {"$regex": f"^{re.escape(name)}$", "$options": "i"}},
            {"_id": 1}
        )
        return doc["_id"] if doc else None


class MongoCountryStore:
    """Country lookups over the ``countries`` collection."""

    def __init__(self, mongo: MongoDBService):
        self.mongo = mongo

    def find_by_id(self, country_id: int) -> Optional[Country]:
        doc = self.mongo.get_collection(COUNTRIES).find_one({"_id": country_id})
        if doc is None:
            return None
        return Country(id=doc["_id"], name=doc["name"], region_id=doc.get("regionId"))


class MongoRegionStore:
    """Region lookups over the ``regions`` collection."""

    def __init__(self, mongo: MongoDBService):
        self.mongo = mongo

    def find_by_id(self, region_id: int) -> Optional[Region]:
        doc = self.mongo.get_collection(REGIONS).find_one({"_id": region_id})
        return Region(id=doc["_id"], name=doc["name"]) if doc else None


class MongoCategoryStore:
    """Category lookups over the ``team_categories`` collection."""

    def __init__(self, mongo: MongoDBService):
        self.mongo = mongo

    def find_by_id(self, category_id: int) -> Optional[Category]:
        doc = self.mongo.get_collection(CATEGORIES).find_one({"_id": category_id})
        return Category(id=doc["_id"], name=doc["name"]) if doc else None


class MongoDelegationHeadStore:
    """Delegation head lookups; the country comes from the head's participant record."""

    def __init__(self, mongo: MongoDBService):
        self.mongo = mongo

    def find_by_normalized_username(self, username: str) -> Optional[DelegationHead]:
        doc = self.mongo.get_collection(DELEGATION_HEADS).find_one({"normalizedUsername": username})
        if doc is None:
            return None
        return DelegationHead(
            id=doc["_id"],
            normalized_username=doc["normalizedUsername"],
            participant_id=doc["participantId"]
        )

    def find_country_by_participant_id(self, participant_id: int) -> Optional[str]:
        doc = self.mongo.get_collection(PARTICIPANTS).find_one({"_id": participant_id}, {"country.name": 1})
        if not doc or not doc.get("country"):
            return None
        return doc["country"].get("name")


# Singleton instance for application use
_mongodb_service: Optional[MongoDBService] = None


def get_mongodb_service() -> MongoDBService:
    """Get singleton MongoDB service instance."""
    global _mongodb_service
    if _mongodb_service is None:
        _mongodb_service = MongoDBService()
    return _mongodb_service


def close_mongodb_connection() -> None:
    """Close MongoDB connection (for cleanup)."""
    global _mongodb_service
    if _mongodb_service:
        _mongodb_service.close_connection()
        _mongodb_service = None
