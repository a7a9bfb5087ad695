"""
Data Models for API Client Module
===================================

Request models for the model management endpoints and the typed results the
server returns for them. Each request renders itself with
``to_http_request()``; optional fields left as None are omitted from the
JSON body.
"""

from typing import Annotated, Optional, Union

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from ollama_core.api.constants import CREATE_MODEL_PATH, GENERATE_PATH, PUSH_MODEL_PATH
from ollama_core.api.serialization import HttpRequest, build_http_request


def _require_text(value: str) -> str:
    if not value or not value.strip():
        raise ValueError("must be a non-empty string")
    return value


# Model identifier in the form <namespace>/<model>:<tag>
ModelReference = Annotated[str, AfterValidator(_require_text)]

_REQUEST_CONFIG = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")


# =============================================================================
# Requests
# =============================================================================


class CreateModelRequest(BaseModel):
    """Create a model from a Modelfile.

    Remote creation needs the Modelfile content itself, not just a path on
    the client machine. Blobs referenced by FROM / ADAPTER must be uploaded
    separately first.
    """

    model_config = _REQUEST_CONFIG

    name: ModelReference = Field(..., description="Name of the model to create")
    modelfile: str = Field(..., description="Contents of the Modelfile")
    path: Optional[str] = Field(None, description="Path to the Modelfile on the server")
    quantize: Optional[str] = Field(None, description="Quantization type, e.g. 'q4_K_M'")
    stream: Optional[bool] = Field(None, description="Stream progress frames instead of one result")

    def to_http_request(self) -> HttpRequest:
        return build_http_request(CREATE_MODEL_PATH, "POST", self)


class PushModelRequest(BaseModel):
    """Push a model to a model library."""

    model_config = _REQUEST_CONFIG

    name: ModelReference = Field(..., description="Model to push, in the form <namespace>/<model>:<tag>")
    insecure: Optional[bool] = Field(
        None,
        description="Allow insecure connections to the library; only for your own library during development",
    )
    stream: Optional[bool] = Field(None, description="Stream progress frames instead of one result")

    def to_http_request(self) -> HttpRequest:
        return build_http_request(PUSH_MODEL_PATH, "POST", self)


class LoadModelRequest(BaseModel):
    """Load a model into memory (a generate call without a prompt)."""

    model_config = _REQUEST_CONFIG

    model: ModelReference = Field(..., description="Name of the model to load")
    keep_alive: Optional[Union[int, str]] = Field(
        None,
        description="How long the model stays loaded, e.g. 300 or '5m'; 0 unloads it",
    )
    stream: Optional[bool] = Field(None, description="Stream the response")

    def to_http_request(self) -> HttpRequest:
        return build_http_request(GENERATE_PATH, "POST", self)


# =============================================================================
# Results
# =============================================================================


class ProgressStatus(BaseModel):
    """Status frame returned by long-running model operations."""

    status: Optional[str] = None
    digest: Optional[str] = None
    total: Optional[int] = None
    completed: Optional[int] = None

    @property
    def is_success(self) -> bool:
        return self.status == "success"


class CreateModel(ProgressStatus):
    """Result of a create model call."""


class PushModel(ProgressStatus):
    """Result of a push model call."""


class LoadModel(BaseModel):
    """Result of a load (or unload) model call."""

    model: Optional[str] = None
    created_at: Optional[str] = None
    response: str = ""
    done: bool = False
    done_reason: Optional[str] = None
