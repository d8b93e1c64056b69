"""Wire entities for the terms service."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from .common import WireModel


class GetTermsResponse(WireModel):
    """A terms document the user has not yet agreed to."""

    name: str = ""
    owner: str = ""
    title: str = ""
    revision: int = 0
    content: str = ""
    created_on: Optional[datetime] = Field(None, alias="created-on")


class AgreementResponse(WireModel):
    """A recorded agreement to a terms revision."""

    user: str = ""
    owner: str = ""
    term: str = ""
    revision: int = 0
    created_on: Optional[datetime] = Field(None, alias="created-on")


class CheckAgreementsRequest(WireModel):
    """Terms to check, each as "<name>/<revision>"."""

    terms: List[str] = Field(default_factory=list)


class SaveAgreement(WireModel):
    """One agreement to record."""

    term: str = ""
    revision: int = 0


class SaveAgreements(WireModel):
    """Agreements to record in one request."""

    agreements: List[SaveAgreement] = Field(default_factory=list)


class SaveAgreementResponses(WireModel):
    """Agreements recorded by the service."""

    agreements: List[AgreementResponse] = Field(default_factory=list)
