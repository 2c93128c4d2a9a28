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
FastAPI routes for Relay Gateway.

Contains all API endpoints:
- / and /health: Health check
- /v1/models: Models list
- /v1/chat/completions: Chat completions

Upstream responses are relayed unchanged; only the request is reshaped.
"""

import time
from datetime import datetime, timezone
from typing import Any, Dict

import httpx
from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse, StreamingResponse
from loguru import logger

from relay.config import APP_TITLE, APP_VERSION, AVAILABLE_MODELS
from relay.errors import MalformedBodyError
from relay.http_client import UpstreamHttpClient, read_response_error_text
from relay.models import ModelList, OpenAIModel
from relay.pipeline import prepare_upstream_payload

router = APIRouter()


def _upstream_error_body(message: str) -> Dict[str, Any]:
    return {
        "error": {
            "message": message,
            "type": "upstream_error",
            "param": None,
            "code": "upstream_unavailable",
        }
    }


def get_upstream_client(request: Request) -> UpstreamHttpClient:
    """Returns the shared upstream client created in the app lifespan."""
    return request.app.state.upstream_client


@router.get("/")
async def root():
    """
    Health check endpoint.

    Returns:
        Status and application version
    """
    return {
        "status": "ok",
        "message": f"{APP_TITLE} is running",
        "version": APP_VERSION,
    }


@router.get("/health")
async def health():
    """
    Detailed health check.

    Returns:
        Status, timestamp and version
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": APP_VERSION,
    }


@router.get("/v1/models", response_model=ModelList)
async def get_models():
    """
    Returns the list of advertised models.

    Models not in the list still work when requested directly.
    """
    created = int(time.time())
    return ModelList(
        data=[OpenAIModel(id=model_id, created=created) for model_id in AVAILABLE_MODELS]
    )


@router.post("/v1/chat/completions")
async def chat_completions(request: Request):
    """
    Chat completions endpoint, OpenAI compatible.

    The body is validated and reshaped by the request pipeline, then sent
    upstream. Validation errors are answered with 400 by the exception
    handler before any upstream call.

    Returns:
        StreamingResponse for stream=true, otherwise the upstream response as-is
    """
    try:
        body = await request.json()
    except ValueError:
        raise MalformedBodyError("Request body must be valid JSON")

    payload = prepare_upstream_payload(body)
    logger.info(
        "Request to /v1/chat/completions: model={}, messages={}, stream={}",
        payload.model, len(payload.messages), payload.stream,
    )

    upstream = get_upstream_client(request)
    try:
        response = await upstream.post_chat_completions(
            payload.to_request_body(), stream=payload.stream
        )
    except httpx.HTTPError as e:
        logger.error("Upstream unavailable: {}", e)
        return JSONResponse(
            status_code=502,
            content=_upstream_error_body(f"Upstream request failed: {e}"),
        )

    content_type = response.headers.get("content-type", "application/json")

    if not payload.stream:
        if response.status_code >= 400:
            logger.warning("Upstream returned {}", response.status_code)
        return Response(
            content=response.content,
            status_code=response.status_code,
            media_type=content_type,
        )

    if response.status_code != 200:
        error_text = await read_response_error_text(response)
        await response.aclose()
        logger.warning("Upstream returned {}: {}", response.status_code, error_text[:200])
        return Response(
            content=error_text,
            status_code=response.status_code,
            media_type=content_type,
        )

    async def relay_stream():
        try:
            # Decoded bytes: the upstream content-encoding is not forwarded
            async for chunk in response.aiter_bytes():
                yield chunk
        finally:
            await response.aclose()

    return StreamingResponse(
        relay_stream(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
    )
