# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Environment-driven settings for the contest administration service.
"""

import os
from dataclasses import dataclass, field


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == 'true'


@dataclass
class Settings:
    """Runtime configuration read from environment variables."""
    environment: str = field(default_factory=lambda: os.getenv('ENVIRONMENT', 'development'))
    service_name: str = 'contest-admin-api'
    service_version: str = field(default_factory=lambda: os.getenv('SERVICE_VERSION', '1.0.0'))
    log_level: str = field(default_factory=lambda: os.getenv('LOG_LEVEL', ''))
    otel_enabled: bool = field(default_factory=lambda: _env_bool('OTEL_ENABLED', 'true'))
    otel_endpoint: str = field(default_factory=lambda: os.getenv('OTEL_EXPORTER_OTLP_ENDPOINT', ''))

    mongodb_uri: str = field(
        default_factory=lambda: os.getenv('MONGODB_URI', 'mongodb://localhost:27017/contest_admin_dev')
    )
    mongodb_database: str = field(default_factory=lambda: os.getenv('MONGODB_DATABASE', 'contest_admin_dev'))
    mongodb_max_pool_size: int = field(default_factory=lambda: int(os.getenv('MONGODB_MAX_POOL_SIZE', '10')))
    mongodb_min_pool_size: int = field(default_factory=lambda: int(os.getenv('MONGODB_MIN_POOL_SIZE', '1')))
    mongodb_max_idle_time_ms: int = field(
        default_factory=lambda: int(os.getenv('MONGODB_MAX_IDLE_TIME_MS', '30000'))
    )
    mongodb_server_selection_timeout_ms: int = field(
        default_factory=lambda: int(os.getenv('MONGODB_SERVER_SELECTION_TIMEOUT_MS', '5000'))
    )

    @property
    def is_production(self) -> bool:
        return self.environment == 'production'


def get_settings() -> Settings:
    """Build settings from the current environment."""
    return Settings()
