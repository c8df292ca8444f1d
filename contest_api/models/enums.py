# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Enumeration types for the contest administration platform.
"""

from enum import Enum
from typing import Optional


class TeamCategoryName(str, Enum):
    """Team category names with a per-country quota."""
    COMPETITION = "Competition"
    JUNIOR = "Junior"

    @classmethod
    def match(cls, name: Optional[str]) -> Optional["TeamCategoryName"]:
        """Return the member whose value equals ``name`` ignoring case."""
        if not name:
            return None
        lowered = name.strip().lower()
        for member in cls:
            if member.value.lower() == lowered:
                return member
        return None


class EntityKind(str, Enum):
    """Entity kinds reported in error context."""
    TEAM = "team"
    PARTICIPANT = "participant"
    COUNTRY = "country"
    REGION = "region"
    CATEGORY = "category"


class ErrorKind(str, Enum):
    """Failure taxonomy for team and participant mutations."""
    NOT_FOUND = "not_found"
    NOT_AUTHORIZED = "not_authorized"
    FORBIDDEN = "forbidden"
    INVALID_REFERENCE = "invalid_reference"
    QUOTA_EXCEEDED = "quota_exceeded"
