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
Converter from a validated chat request to the upstream payload.

The upstream only accepts flat string content, so multimodal messages are
flattened: text blocks are joined with newlines and everything else
(images, unknown block types) is dropped.
"""

from typing import Any, Dict, Tuple, Union

from relay.models import (
    SAMPLING_FIELDS,
    ContentItem,
    Message,
    TextContent,
    UpstreamMessage,
    UpstreamPayload,
    ValidatedChatRequest,
)


def flatten_content(content: Union[str, Tuple[ContentItem, ...]]) -> str:
    """
    Flattens message content into a single string.

    - String content is returned verbatim (no trimming)
    - Block content: text blocks joined by "\\n" in original order,
      non-text blocks skipped

    A message made only of non-text blocks flattens to "" and is
    forwarded that way.

    Example:
        >>> flatten_content("hello")
        'hello'
        >>> flatten_content((TextContent(text="a"), TextContent(text="b")))
        'a\\nb'
    """
    if isinstance(content, str):
        return content
    return "\n".join(item.text for item in content if isinstance(item, TextContent))


def to_upstream_message(message: Message) -> UpstreamMessage:
    """Converts one validated message to upstream format."""
    return UpstreamMessage(role=message.role, content=flatten_content(message.content))


def to_upstream_payload(validated: ValidatedChatRequest, model: str) -> UpstreamPayload:
    """
    Builds the upstream payload.

    Args:
        validated: Request that passed validate_chat_request()
        model: Already resolved model name

    Returns:
        UpstreamPayload with stream coerced to bool and sampling fields
        carried over only when the client sent them
    """
    sampling: Dict[str, Any] = {
        field: getattr(validated, field)
        for field in SAMPLING_FIELDS
        if validated.is_set(field)
    }
    return UpstreamPayload(
        model=model,
        messages=tuple(to_upstream_message(m) for m in validated.messages),
        stream=bool(validated.stream),
        **sampling,
    )
