# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Core entity models for the contest administration platform.
"""

from typing import Optional
from pydantic import Field, field_validator, model_validator
from .base import BaseEntity


class Region(BaseEntity):
    """Geographic region grouping several countries."""

    name: str = Field(..., min_length=1, max_length=100, description="Region name")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        """Validate region name."""
        if not v.strip():
            raise ValueError('Region name cannot be empty')
        return v.strip()


class Country(BaseEntity):
    """Country taking part in the contest."""

    name: str = Field(..., min_length=1, max_length=100, description="Country name")
    region_id: Optional[int] = Field(None, description="Region the country belongs to")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        """Validate country name."""
        if not v.strip():
            raise ValueError('Country name cannot be empty')
        return v.strip()

    def same_country(self, other_name: Optional[str]) -> bool:
        """Compare country names ignoring case."""
        if other_name is None:
            return False
        return self.name.lower() == other_name.strip().lower()


class Category(BaseEntity):
    """Team category, e.g. Competition or Junior."""

    name: str = Field(..., min_length=1, max_length=100, description="Category name")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        """Validate category name."""
        if not v.strip():
            raise ValueError('Category name cannot be empty')
        return v.strip()


class Team(BaseEntity):
    """
    Contest team.

    Callers usually supply only ``country_id`` and ``category_id``. The
    ``country`` and ``category`` fields hold the fully loaded entities once
    they have been resolved against the stores.
    """

    name: str = Field(..., min_length=1, max_length=200, description="Team name")
    country_id: int = Field(..., ge=1, description="Owning country identifier")
    category_id: int = Field(..., ge=1, description="Team category identifier")
    country: Optional[Country] = Field(None, description="Resolved owning country")
    category: Optional[Category] = Field(None, description="Resolved team category")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        """Validate team name."""
        if not v.strip():
            raise ValueError('Team name cannot be empty')
        return v.strip()

    @model_validator(mode='after')
    def validate_references(self):
        """Resolved entities must match their identifiers."""
        if self.country is not None and self.country.id != self.country_id:
            raise ValueError('Resolved country does not match country_id')
        if self.category is not None and self.category.id != self.category_id:
            raise ValueError('Resolved category does not match category_id')
        return self

    def is_resolved(self) -> bool:
        """Check if both country and category are loaded."""
        return self.country is not None and self.category is not None

    def with_country(self, country: Country) -> "Team":
        """Return a copy owned by ``country``."""
        return self.model_copy(update={"country_id": country.id, "country": country})

    def with_category(self, category: Category) -> "Team":
        """Return a copy in ``category``."""
        return self.model_copy(update={"category_id": category.id, "category": category})


class Participant(BaseEntity):
    """Contestant registered for a country, optionally assigned to a team."""

    name: str = Field(..., min_length=1, max_length=200, description="Participant full name")
    country_id: int = Field(..., ge=1, description="Country the participant represents")
    team_id: Optional[int] = Field(None, ge=1, description="Team the participant belongs to")
    country: Optional[Country] = Field(None, description="Resolved country")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        """Validate participant name."""
        if not v.strip():
            raise ValueError('Participant name cannot be empty')
        return v.strip()

    @model_validator(mode='after')
    def validate_references(self):
        """Resolved country must match country_id."""
        if self.country is not None and self.country.id != self.country_id:
            raise ValueError('Resolved country does not match country_id')
        return self

    def with_country(self, country: Country) -> "Participant":
        """Return a copy representing ``country``."""
        return self.model_copy(update={"country_id": country.id, "country": country})

    def with_team(self, team_id: Optional[int]) -> "Participant":
        """Return a copy assigned to ``team_id`` (None to unassign)."""
        return self.model_copy(update={"team_id": team_id})


class DelegationHead(BaseEntity):
    """User allowed to manage teams and participants of a single country."""

    normalized_username: str = Field(..., min_length=1, description="Normalized login name")
    participant_id: int = Field(..., ge=1, description="Participant record of the head")

    @field_validator('normalized_username')
    @classmethod
    def validate_username(cls, v):
        """Validate normalized username."""
        if not v.strip():
            raise ValueError('Username cannot be empty')
        return v.strip()
