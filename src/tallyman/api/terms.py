"""
Tallyman Terms API Client

Agreements to terms documents. The service URL may be overridden through the
TALLYMAN_TERMS_URL environment variable, read once when the client is built.
"""

from typing import List, Mapping, Optional

from ..utils.config import ClientConfig, resolve_terms_url
from ..utils.errors import ValidationError
from ..wireformat.requests import (
    GetUnsignedTermsRequest,
    GetUsersAgreementsRequest,
    SaveAgreementRequest,
)
from ..wireformat.terms import (
    AgreementResponse,
    CheckAgreementsRequest,
    GetTermsResponse,
    SaveAgreementResponses,
    SaveAgreements,
)
from .base import APIClient


class TermsClient(APIClient):
    """Client for the terms service."""

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self._environ = environ
        super().__init__(config)

    def _resolve_base_url(self, config: ClientConfig) -> str:
        return resolve_terms_url(config, self._environ)

    def get_users_agreements(self) -> List[AgreementResponse]:
        """Return the agreements the user has signed."""
        return self._call(
            "get_users_agreements", GetUsersAgreementsRequest(), List[AgreementResponse]
        )

    def get_unsigned_terms(self, request: CheckAgreementsRequest) -> List[GetTermsResponse]:
        """Return those of the requested terms the user has not agreed to."""
        if not request.terms:
            raise ValidationError("no terms specified", field="terms")
        return self._call(
            "get_unsigned_terms",
            GetUnsignedTermsRequest(tuple(request.terms)),
            List[GetTermsResponse],
        )

    def save_agreement(self, agreements: SaveAgreements) -> SaveAgreementResponses:
        """Record the user's agreement to the given terms."""
        if not agreements.agreements:
            raise ValidationError("no agreements specified", field="agreements")
        return self._call(
            "save_agreement", SaveAgreementRequest(agreements), SaveAgreementResponses
        )
