# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Models package - Pydantic schemas and data models for the contest administration platform.
"""

# Base models
from .base import BaseEntity, NEW_ENTITY_ID

# Enumerations
from .enums import TeamCategoryName, EntityKind, ErrorKind

# Core entities
from .entities import (
    Region,
    Country,
    Category,
    Team,
    Participant,
    DelegationHead
)

# Query filters
from .requests import TeamFilters, ParticipantFilters

# Projections
from .responses import (
    TeamSummary,
    ParticipantSummary,
    TeamParticipants,
    CountryParticipants,
    RegionParticipants
)

__all__ = [
    # Base models
    "BaseEntity",
    "NEW_ENTITY_ID",

    # Enumerations
    "TeamCategoryName",
    "EntityKind",
    "ErrorKind",

    # Core entities
    "Region",
    "Country",
    "Category",
    "Team",
    "Participant",
    "DelegationHead",

    # Query filters
    "TeamFilters",
    "ParticipantFilters",

    # Projections
    "TeamSummary",
    "ParticipantSummary",
    "TeamParticipants",
    "CountryParticipants",
    "RegionParticipants"
]
