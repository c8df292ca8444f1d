# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Unit tests for the MongoDB store adapters.
"""

import pytest
from unittest.mock import MagicMock, Mock

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from contest_api.config import Settings
from contest_api.errors import ConflictError, CustomException
from contest_api.models.entities import Category, Country, Participant, Team
from contest_api.models.enums import EntityKind
from contest_api.services.mongodb import (
    MongoDBService,
    MongoDelegationHeadStore,
    MongoParticipantStore,
    MongoTeamStore,
    participant_from_document,
    team_from_document,
    team_to_document
)


TEAM_DOC = {
    "_id": 3,
    "name": "Alpha Squad",
    "country": {"id": 1, "name": "Cuba", "regionId": 1},
    "category": {"id": 1, "name": "Competition"}
}


@pytest.fixture
def mongo():
    """MongoDBService whose collections are mocks."""
    service = Mock(spec=MongoDBService)
    collections = {}

    def get_collection(name):
        return collections.setdefault(name, MagicMock(name=name))

    service.get_collection.side_effect = get_collection
    service.collections = collections
    return service


class TestDocumentMapping:
    """Test conversion between entities and documents."""

    def test_team_from_document(self):
        team = team_from_document(TEAM_DOC)

        assert team.id == 3
        assert team.is_resolved()
        assert team.country.region_id == 1
        assert team.category.name == "Competition"

    def test_team_to_document(self):
        assert team_to_document(team_from_document(TEAM_DOC)) == TEAM_DOC

    def test_unresolved_team_cannot_be_stored(self):
        with pytest.raises(ValueError):
            team_to_document(Team(name="Alpha", country_id=1, category_id=1))

    def test_participant_without_team(self):
        participant = participant_from_document({
            "_id": 8, "name": "Ana", "country": {"id": 1, "name": "Cuba"}
        })

        assert participant.team_id is None
        assert participant.country.region_id is None


class TestMongoTeamStore:
    """Test team store queries."""

    def test_find_by_id(self, mongo):
        store = MongoTeamStore(mongo)
        mongo.get_collection("teams").find_one.return_value = TEAM_DOC

        team = store.find_by_id(3)

        mongo.get_collection("teams").find_one.assert_called_once_with({"_id": 3})
        assert team.name == "Alpha Squad"

    def test_find_missing(self, mongo):
        mongo.get_collection("teams").find_one.return_value = None

        assert MongoTeamStore(mongo).find_by_id(3) is None

    def test_count_excludes_own_id(self, mongo):
        collection = mongo.get_collection("teams")
        collection.count_documents.return_value = 1

        count = MongoTeamStore(mongo).count_by_country_and_category(1, 2, exclude_id=7)

        assert count == 1
        collection.count_documents.assert_called_once_with(
            {"country.id": 1, "category.id": 2, "_id": {"$ne": 7}}
        )

    def test_search_builds_query_from_present_filters(self, mongo):
        collection = mongo.get_collection("teams")
        collection.find.return_value.sort.return_value = [TEAM_DOC]

        teams = MongoTeamStore(mongo).search(name="a.b", category_id=1)

        collection.find.assert_called_once_with({
            "name": {"$regex": r"a\.b", "$options": "i"},
            "category.id": 1
        })
        assert [t.id for t in teams] == [3]

    def test_search_without_filters(self, mongo):
        collection = mongo.get_collection("teams")
        collection.find.return_value.sort.return_value = []

        MongoTeamStore(mongo).search()

        collection.find.assert_called_once_with({})

    def test_save_new_team_allocates_id(self, mongo):
        mongo.next_id.return_value = 11
        team = Team(
            name="Alpha", country_id=1, category_id=1,
            country=Country(id=1, name="Cuba"), category=Category(id=1, name="Competition")
        )

        saved = MongoTeamStore(mongo).save(team)

        assert saved.id == 11
        assert team.id == 0
        args, kwargs = mongo.get_collection("teams").replace_one.call_args
        assert args[0] == {"_id": 11}
        assert args[1]["country"]["name"] == "Cuba"
        assert kwargs == {"upsert": True}

    def test_duplicate_name_raises_conflict(self, mongo):
        mongo.next_id.return_value = 12
        mongo.get_collection("teams").replace_one.side_effect = DuplicateKeyError("E11000 duplicate key")
        team = Team(
            name="Alpha", country_id=1, category_id=1,
            country=Country(id=1, name="Cuba"), category=Category(id=1, name="Competition")
        )

        with pytest.raises(ConflictError) as exc_info:
            MongoTeamStore(mongo).save(team)

        assert exc_info.value.status_code == 409
        assert exc_info.value.entity == EntityKind.TEAM
        assert isinstance(exc_info.value.__cause__, DuplicateKeyError)

    def test_duplicate_name_through_team_service(self, mongo, team_service):
        mongo.next_id.return_value = 12
        mongo.get_collection("teams").replace_one.side_effect = DuplicateKeyError("E11000 duplicate key")
        team_service.teams = MongoTeamStore(mongo)

        with pytest.raises(CustomException) as exc_info:
            team_service.save_team(Team(name="Alpha", country_id=1, category_id=3), "HEAD.CUBA")

        assert isinstance(exc_info.value, ConflictError)
        assert exc_info.value.to_dict()["type"] == "resource-conflict"


class TestMongoParticipantStore:
    """Test participant store queries."""

    def test_unassigned_by_country(self, mongo):
        collection = mongo.get_collection("participants")
        collection.find.return_value.sort.return_value = []

        MongoParticipantStore(mongo).find_unassigned_by_country(2)

        collection.find.assert_called_once_with({"country.id": 2, "teamId": None})

    def test_find_id_by_name_is_exact(self, mongo):
        collection = mongo.get_collection("participants")
        collection.find_one.return_value = {"_id": 5}

        assert MongoParticipantStore(mongo).find_id_by_name("Ana.Jr") == 5
        query, projection = collection.find_one.call_args[0]
        assert query == {"name": {"$regex": r"^Ana\.Jr$", "$options": "i"}}
        assert projection == {"_id": 1}

    def test_clear_team_unsets_members(self, mongo):
        collection = mongo.get_collection("participants")
        collection.update_many.return_value.modified_count = 3

        assert MongoParticipantStore(mongo).clear_team(7) == 3
        collection.update_many.assert_called_once_with({"teamId": 7}, {"$set": {"teamId": None}})

    def test_save_requires_country(self, mongo):
        mongo.next_id.return_value = 1

        with pytest.raises(ValueError):
            MongoParticipantStore(mongo).save(Participant(name="Ana", country_id=1))


class TestMongoDelegationHeadStore:
    """Test delegation head lookups."""

    def test_country_by_participant(self, mongo):
        mongo.get_collection("participants").find_one.return_value = {"_id": 4, "country": {"name": "Cuba"}}

        assert MongoDelegationHeadStore(mongo).find_country_by_participant_id(4) == "Cuba"

    def test_participant_without_country(self, mongo):
        mongo.get_collection("participants").find_one.return_value = None

        assert MongoDelegationHeadStore(mongo).find_country_by_participant_id(4) is None

    def test_find_head(self, mongo):
        mongo.get_collection("delegation_heads").find_one.return_value = {
            "_id": 1, "normalizedUsername": "HEAD.CUBA", "participantId": 4
        }

        head = MongoDelegationHeadStore(mongo).find_by_normalized_username("HEAD.CUBA")

        assert head.participant_id == 4


class TestMongoDBService:
    """Test connection settings and id allocation."""

    def test_settings_applied(self):
        settings = Settings(
            mongodb_uri="mongodb://db:27017/contest",
            mongodb_database="contest",
            mongodb_max_pool_size=25
        )

        service = MongoDBService(settings=settings)

        assert service.connection_string == "mongodb://db:27017/contest"
        assert service.database_name == "contest"
        assert service.max_pool_size == 25

    def test_next_id_increments_counter(self):
        service = MongoDBService(database_name="contest_admin_test")
        counters = MagicMock()
        counters.find_one_and_update.return_value = {"_id": "teams", "seq": 4}
        service.get_collection = Mock(return_value=counters)

        assert service.next_id("teams") == 4
        counters.find_one_and_update.assert_called_once_with(
            {"_id": "teams"},
            {"$inc": {"seq": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER
        )
