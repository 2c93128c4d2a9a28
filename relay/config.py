# -*- coding: utf-8 -*-

# Relay Gateway
# Copyright (C) 2025 Jwadow
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program. If not, see <https://www.gnu.org/licenses/>.

"""
Relay Gateway Configuration.

Centralized storage for all settings and constants.
Loads environment variables and provides typed access to them.
"""

import os
from typing import List

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


# ==================================================================================================
# Server Settings
# ==================================================================================================

# Server host (default: 0.0.0.0 - listen on all interfaces)
# Use "127.0.0.1" to only allow local connections
DEFAULT_SERVER_HOST: str = "0.0.0.0"
SERVER_HOST: str = os.getenv("SERVER_HOST", DEFAULT_SERVER_HOST)

# Server port (default: 8000)
# Can be overridden by CLI: python main.py --port 9000
DEFAULT_SERVER_PORT: int = 8000
SERVER_PORT: int = int(os.getenv("SERVER_PORT", str(DEFAULT_SERVER_PORT)))

# ==================================================================================================
# Upstream Settings
# ==================================================================================================

# Base URL of the OpenAI-compatible upstream. The chat endpoint is
# "{UPSTREAM_BASE_URL}/chat/completions".
DEFAULT_UPSTREAM_BASE_URL: str = "https://dashscope-intl.aliyuncs.com/compatible-mode/v1"
UPSTREAM_BASE_URL: str = os.getenv("UPSTREAM_BASE_URL", DEFAULT_UPSTREAM_BASE_URL)

# Bearer token sent to the upstream. Empty = no Authorization header.
UPSTREAM_API_KEY: str = os.getenv("UPSTREAM_API_KEY", "")

# Timeout for a single upstream request (seconds).
# Generous default because non-streaming completions can take a while.
UPSTREAM_TIMEOUT: float = float(os.getenv("UPSTREAM_TIMEOUT", "120"))

# ==================================================================================================
# Retry Configuration
# ==================================================================================================

# Maximum number of attempts on transient upstream errors (timeouts, 429, 5xx)
MAX_RETRIES: int = int(os.getenv("MAX_RETRIES", "3"))

# Base delay between attempts (seconds)
# Uses exponential backoff: delay * (2 ** attempt)
BASE_RETRY_DELAY: float = float(os.getenv("BASE_RETRY_DELAY", "1.0"))

# ==================================================================================================
# Model Settings
# ==================================================================================================

# Model used when the client omits "model" or sends an empty string.
# No existence check is done here - an unknown model is the upstream's problem.
DEFAULT_MODEL: str = os.getenv("DEFAULT_MODEL", "qwen3-coder-plus")

# Models advertised by /v1/models (comma-separated).
# Any other model name still works when requested directly.
_available_models_raw: str = os.getenv("AVAILABLE_MODELS", "")
AVAILABLE_MODELS: List[str] = [
    value.strip() for value in _available_models_raw.split(",") if value.strip()
] or [DEFAULT_MODEL]

# ==================================================================================================
# CORS Settings
# ==================================================================================================

# Allowed browser origins (comma-separated). Default "*" allows any origin.
_cors_origins_raw: str = os.getenv("CORS_ALLOW_ORIGINS", "*")
CORS_ALLOW_ORIGINS: List[str] = [
    value.strip() for value in _cors_origins_raw.split(",") if value.strip()
] or ["*"]

CORS_ALLOW_METHODS: List[str] = ["GET", "POST", "OPTIONS"]
CORS_ALLOW_HEADERS: List[str] = ["Content-Type", "Authorization"]

# ==================================================================================================
# Logging Settings
# ==================================================================================================

# Log level for the application
# Available levels: TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL
# Default: INFO (recommended for production)
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# ==================================================================================================
# Application Version
# ==================================================================================================

APP_VERSION: str = "1.0"
APP_TITLE: str = "Relay Gateway"
APP_DESCRIPTION: str = "Validating proxy for OpenAI-compatible chat completion APIs."


def get_upstream_chat_url(base_url: str) -> str:
    """Return the chat completions URL for the given upstream base URL."""
    return f"{base_url.rstrip('/')}/chat/completions"
