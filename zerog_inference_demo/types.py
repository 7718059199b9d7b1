"""Data shapes exchanged with the broker bridge and inference providers."""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ChatMessage(BaseModel):
    """A single chat message in OpenAI format."""

    model_config = ConfigDict(extra="allow")

    role: Optional[str] = None
    content: Optional[str] = None


class Choice(BaseModel):
    """One completion choice returned by a provider."""

    model_config = ConfigDict(extra="allow")

    message: Optional[ChatMessage] = None


class InferenceResult(BaseModel):
    """
    Parsed body of a ``/chat/completions`` response.

    Providers answer either with ``{"choices": [...]}`` or with
    ``{"error": "..."}``. Anything else in the body is kept as extra fields
    so it can be logged as-is.
    """

    model_config = ConfigDict(extra="allow")

    choices: Optional[List[Choice]] = None
    error: Optional[str] = None

    @property
    def content(self) -> Optional[str]:
        """Content of the first choice's message, if any."""
        if not self.choices:
            return None
        message = self.choices[0].message
        if message is None:
            return None
        return message.content

    @property
    def is_success(self) -> bool:
        return bool(self.content)


class ServiceMetadata(BaseModel):
    """Endpoint and model served by a provider."""

    model_config = ConfigDict(extra="allow")

    endpoint: str
    model: str


class ServiceInfo(BaseModel):
    """A provider entry from the broker's service listing."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    provider: str
    model: Optional[str] = None
    url: Optional[str] = None
    service_type: Optional[str] = Field(default=None, alias="serviceType")
    input_price: Optional[Any] = Field(default=None, alias="inputPrice")
    output_price: Optional[Any] = Field(default=None, alias="outputPrice")
    verifiability: Optional[str] = None


class LedgerInfo(BaseModel):
    """Ledger account record as reported by the broker."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    ledger_info: Optional[Any] = Field(default=None, alias="ledgerInfo")
    balance: Optional[Any] = None
