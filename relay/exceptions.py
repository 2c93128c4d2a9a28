# -*- coding: utf-8 -*-

# Relay Gateway
# Copyright (C) 2025 Jwadow
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""
Exception handlers for the FastAPI application.

Validation failures raised by the request pipeline become HTTP 400
responses with an OpenAI-style error body.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

from relay.errors import ChatRequestError, InvalidMessageError


async def chat_request_exception_handler(
    request: Request, exc: ChatRequestError
) -> JSONResponse:
    """
    Converts a ChatRequestError into a 400 response.

    Args:
        request: Request that failed validation
        exc: The validation error

    Returns:
        JSONResponse with {"error": {...}} body
    """
    if isinstance(exc, InvalidMessageError):
        logger.warning(
            "Rejected request to {}: {} at index {} ({})",
            request.url.path, exc.kind.value, exc.index, exc.reason,
        )
    else:
        logger.warning(
            "Rejected request to {}: {} - {}", request.url.path, exc.kind.value, exc.message
        )
    return JSONResponse(status_code=400, content=exc.to_openai_error())


def register_exception_handlers(app: FastAPI) -> None:
    """Registers all gateway exception handlers on the app."""
    app.add_exception_handler(ChatRequestError, chat_request_exception_handler)
