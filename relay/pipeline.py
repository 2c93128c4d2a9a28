# -*- coding: utf-8 -*-

# Relay Gateway
# Copyright (C) 2025 Jwadow
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""
Request pipeline orchestrator.

Single entry point used by the routes:
  1. validate_chat_request - raw JSON -> ValidatedChatRequest
  2. resolve_model - explicit model, else body model, else default
  3. to_upstream_payload - ValidatedChatRequest -> UpstreamPayload

Pure and synchronous; safe to call from any number of concurrent requests.
"""

from typing import Any, Optional

from relay.mapper import to_upstream_payload
from relay.model_resolver import resolve_model
from relay.models import UpstreamPayload
from relay.validation import validate_chat_request


def prepare_upstream_payload(
    body: Any,
    requested_model: Optional[str] = None,
) -> UpstreamPayload:
    """
    Validates a request body and shapes it for the upstream.

    Args:
        body: Parsed JSON request body
        requested_model: Model chosen by the caller; overrides body["model"] when given

    Returns:
        UpstreamPayload ready for serialization

    Raises:
        ChatRequestError: Any validation failure (propagated unchanged)
    """
    validated = validate_chat_request(body)
    model = resolve_model(requested_model if requested_model is not None else validated.model)
    return to_upstream_payload(validated, model)
