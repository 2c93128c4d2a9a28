# -*- coding: utf-8 -*-

# Relay Gateway
# Copyright (C) 2025 Jwadow
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""
Model resolution.

The gateway does not know which models exist upstream. It only fills in
the configured default when the client sends no model name.
"""

from typing import Optional

from relay.config import DEFAULT_MODEL


def resolve_model(requested: Optional[str] = None, default: Optional[str] = None) -> str:
    """
    Returns the model name to send upstream.

    Args:
        requested: Model requested by the client (may be None or "")
        default: Fallback model (DEFAULT_MODEL from config when omitted)

    Returns:
        requested if it is a non-empty string, otherwise the default

    Example:
        >>> resolve_model("gpt-x")
        'gpt-x'
        >>> resolve_model("")
        'qwen3-coder-plus'
    """
    if isinstance(requested, str) and requested:
        return requested
    return default if default is not None else DEFAULT_MODEL
