# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Base entity models with common fields and validation.
"""

from pydantic import BaseModel, Field, ConfigDict


# Identifier carried by entities that have not been persisted yet
NEW_ENTITY_ID = 0


class BaseEntity(BaseModel):
    """Base entity with common fields for all domain objects."""

    model_config = ConfigDict(
        # Allow population by field name or alias
        populate_by_name=True,
        # Validate assignment
        validate_assignment=True
    )

    id: int = Field(default=NEW_ENTITY_ID, ge=0, description="Unique identifier, 0 until persisted")

    def is_new(self) -> bool:
        """Check if entity has not been persisted yet."""
        return self.id == NEW_ENTITY_ID

