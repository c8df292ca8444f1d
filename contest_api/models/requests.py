# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Query filter models for team and participant searches.
"""

from typing import Optional
from pydantic import BaseModel, Field, field_validator


class TeamFilters(BaseModel):
    """Filters for team queries. Absent filters match everything."""

    name: Optional[str] = Field(None, description="Substring of the team name, case-insensitive")
    country_id: Optional[int] = Field(None, ge=1, description="Filter by country")
    category_id: Optional[int] = Field(None, ge=1, description="Filter by category")

    @field_validator('name')
    @classmethod
    def blank_name_is_wildcard(cls, v):
        """Treat blank search terms as no filter."""
        if v is None or not v.strip():
            return None
        return v.strip()


class ParticipantFilters(BaseModel):
    """Filters for participant queries. Absent filters match everything."""

    name: Optional[str] = Field(None, description="Substring of the participant name, case-insensitive")
    country_id: Optional[int] = Field(None, ge=1, description="Filter by country")
    team_id: Optional[int] = Field(None, ge=1, description="Filter by team")
    region_id: Optional[int] = Field(None, ge=1, description="Filter by region of the country")

    @field_validator('name')
    @classmethod
    def blank_name_is_wildcard(cls, v):
        """Treat blank search terms as no filter."""
        if v is None or not v.strip():
            return None
        return v.strip()
