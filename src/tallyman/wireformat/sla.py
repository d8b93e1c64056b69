"""Wire entities for the SLA service."""

from typing import Any

from pydantic import Field

from .common import WireModel


class SLARequest(WireModel):
    """Request for an SLA authorization of a model."""

    model_uuid: str = Field("", alias="model")
    level: str = Field("", alias="sla")
    budget: str = ""


class SLAResponse(WireModel):
    """The SLA authorization issued by the service.

    ``credentials`` is an opaque authorization token; it is passed through
    exactly as decoded.
    """

    owner: str = ""
    credentials: Any = None
    message: str = ""
