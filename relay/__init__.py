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
Relay Gateway - validating proxy for OpenAI-compatible chat APIs.

This package validates OpenAI-style chat completion requests and reshapes
them into the flat payload the upstream API expects.

Modules:
    - config: Configuration and constants
    - errors: Validation error taxonomy
    - models: Pydantic models for requests and upstream payloads
    - validation: Request validator
    - model_resolver: Default model resolution
    - mapper: Validated request -> upstream payload
    - pipeline: Validation + resolution + mapping entry point
    - http_client: Upstream HTTP client with retry logic
    - routes: FastAPI routes
    - exceptions: Exception handlers
"""

# Version is imported from config.py - the single source of truth
from relay.config import APP_VERSION as __version__

# Configuration
from relay.config import (
    APP_VERSION,
    DEFAULT_MODEL,
    UPSTREAM_BASE_URL,
)

# Errors
from relay.errors import (
    ChatRequestError,
    InvalidMessageError,
    MalformedBodyError,
    MissingMessagesError,
    RangeViolationError,
    TypeMismatchError,
    ValidationErrorKind,
)

# Models
from relay.models import (
    ImageUrlContent,
    Message,
    OtherContent,
    TextContent,
    UpstreamMessage,
    UpstreamPayload,
    ValidatedChatRequest,
)

# Pipeline
from relay.validation import validate_chat_request
from relay.model_resolver import resolve_model
from relay.mapper import flatten_content, to_upstream_payload
from relay.pipeline import prepare_upstream_payload

# HTTP
from relay.http_client import UpstreamHttpClient
from relay.routes import router
from relay.exceptions import register_exception_handlers

__all__ = [
    # Version
    "__version__",

    # Configuration
    "APP_VERSION",
    "DEFAULT_MODEL",
    "UPSTREAM_BASE_URL",

    # Errors
    "ChatRequestError",
    "InvalidMessageError",
    "MalformedBodyError",
    "MissingMessagesError",
    "RangeViolationError",
    "TypeMismatchError",
    "ValidationErrorKind",

    # Models
    "ImageUrlContent",
    "Message",
    "OtherContent",
    "TextContent",
    "UpstreamMessage",
    "UpstreamPayload",
    "ValidatedChatRequest",

    # Pipeline
    "validate_chat_request",
    "resolve_model",
    "flatten_content",
    "to_upstream_payload",
    "prepare_upstream_payload",

    # HTTP
    "UpstreamHttpClient",
    "router",
    "register_exception_handlers",
]
