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
Pydantic models for validated chat requests and upstream payloads.

Instances are built by relay.validation and relay.mapper, never parsed
directly from client JSON. All models are frozen.

Optional fields default to None, but only fields that were explicitly set
(pydantic's model_fields_set) are serialized, so an absent field never turns
into a null in the outgoing JSON.
"""

from typing import Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, StrictBool, StrictFloat, StrictInt

# JSON number that keeps its original type (1 stays 1, 1.0 stays 1.0)
Number = Union[StrictInt, StrictFloat]

Role = Literal["system", "user", "assistant"]

# Optional sampling fields shared by the validated request and the upstream payload.
# Order is the order they are validated in.
SAMPLING_FIELDS: Tuple[str, ...] = (
    "temperature",
    "top_p",
    "max_tokens",
    "presence_penalty",
    "frequency_penalty",
    "seed",
)


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


# ==================================================================================================
# Content Items
# ==================================================================================================


class TextContent(_FrozenModel):
    """Text content block: {"type": "text", "text": "..."}."""

    type: Literal["text"] = "text"
    text: str


class ImageUrl(BaseModel):
    """
    Image reference inside an image_url block.

    The url is not checked; extra keys (e.g. "detail") are kept.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    url: Any


class ImageUrlContent(_FrozenModel):
    """Image content block: {"type": "image_url", "image_url": {"url": "..."}}."""

    type: Literal["image_url"] = "image_url"
    image_url: ImageUrl


class OtherContent(_FrozenModel):
    """
    Content block of a kind this gateway does not know.

    Kept verbatim in payload so new content kinds pass validation
    without a gateway update.
    """

    type: str
    payload: Dict[str, Any]


ContentItem = Union[TextContent, ImageUrlContent, OtherContent]


# ==================================================================================================
# Validated Request
# ==================================================================================================


class Message(_FrozenModel):
    """One conversational turn."""

    role: Role
    content: Union[str, Tuple[ContentItem, ...]]


class ValidatedChatRequest(_FrozenModel):
    """
    Chat request that passed validation.

    Attributes:
        messages: Conversation in order (never empty)
        model: Client-requested model, if any
        stream: Streaming flag, if sent
        temperature, top_p, max_tokens, presence_penalty, frequency_penalty, seed:
            Sampling parameters, if sent
    """

    messages: Tuple[Message, ...]
    model: Optional[str] = None
    stream: Optional[StrictBool] = None
    temperature: Optional[Number] = None
    top_p: Optional[Number] = None
    max_tokens: Optional[Number] = None
    presence_penalty: Optional[Number] = None
    frequency_penalty: Optional[Number] = None
    seed: Optional[Number] = None

    def is_set(self, field: str) -> bool:
        """True if the client explicitly sent this field."""
        return field in self.model_fields_set

    def to_dict(self) -> Dict[str, Any]:
        """Serializable dict with absent optional fields omitted."""
        return self.model_dump(exclude_unset=True)


# ==================================================================================================
# Upstream Payload
# ==================================================================================================


class UpstreamMessage(_FrozenModel):
    """Message in upstream format: content is always a flat string."""

    role: str
    content: str


class UpstreamPayload(_FrozenModel):
    """
    Request body for the upstream chat completions call.

    model, messages and stream are always present; sampling fields only
    when the client sent them, so upstream defaults apply otherwise.
    """

    model: str
    messages: Tuple[UpstreamMessage, ...]
    stream: StrictBool
    temperature: Optional[Number] = None
    top_p: Optional[Number] = None
    max_tokens: Optional[Number] = None
    presence_penalty: Optional[Number] = None
    frequency_penalty: Optional[Number] = None
    seed: Optional[Number] = None

    def to_request_body(self) -> Dict[str, Any]:
        """
        Returns the JSON body for the upstream call.

        Example:
            >>> payload.to_request_body()
            {'model': 'qwen3-coder-plus', 'messages': [{'role': 'user', 'content': 'Hi'}], 'stream': False, 'temperature': 0.7}
        """
        return self.model_dump(mode="json", exclude_unset=True)


class OpenAIModel(BaseModel):
    """Entry of the /v1/models list."""

    id: str
    object: str = "model"
    created: int
    owned_by: str = "relay-gateway"


class ModelList(BaseModel):
    """Response of /v1/models."""

    object: str = "list"
    data: List[OpenAIModel]
