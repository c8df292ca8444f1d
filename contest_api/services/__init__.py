# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Services package - store contracts, MongoDB adapters and application services.
"""

from .mongodb import MongoDBService, get_mongodb_service, close_mongodb_connection
from .teams import TeamService
from .participants import ParticipantService

__all__ = [
    "MongoDBService",
    "get_mongodb_service",
    "close_mongodb_connection",
    "TeamService",
    "ParticipantService"
]
