"""Source client for the residency datasource endpoints.

Each endpoint is an authenticated POST list resource returning
``{"records": [{"id", "fields", "createdTime"}], "offset"}``. Endpoints with a
detail path get one extra POST per record to pull the long-form description.

Failure policy: a missing token aborts before any request. Everything else is
fail-soft. A failed endpoint is logged and skipped; a failed detail lookup
keeps the record without a description.

Security: the token travels in a Cookie header. Do not log request headers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from residency_board.config import Settings, get_settings
from residency_board.ingestion.endpoints import SourceEndpoint, get_endpoints
from residency_board.schemas.residency import ResidencyType, SourceRecord

logger = logging.getLogger(__name__)

USER_AGENT = "ResidencyBoard/0.1 (residency-sync)"
DESCRIPTION_FIELD = "Job Description"


class MissingCredentialError(RuntimeError):
    """Raised when SOFTR_JWT_TOKEN is not configured. Fatal for the whole sync."""

    pass


@dataclass
class FetchResult:
    """Records from every endpoint that answered, plus the count that did not."""

    records: list[SourceRecord] = field(default_factory=list)
    endpoints_failed: int = 0


def _to_source_record(label: ResidencyType, item: Any) -> SourceRecord | None:
    """Map one upstream list item to a SourceRecord. Items without an id are dropped."""
    if not isinstance(item, dict):
        logger.warning("Dropping non-object record from %s", label.value)
        return None
    record_id = item.get("id")
    if not record_id or not str(record_id).strip():
        logger.warning("Dropping record without id from %s", label.value)
        return None
    fields = item.get("fields")
    created = item.get("createdTime")
    try:
        return SourceRecord(
            program_type=label,
            id=str(record_id).strip(),
            fields=dict(fields) if isinstance(fields, dict) else {},
            created_time=str(created) if created else None,
        )
    except ValidationError as exc:
        logger.warning("Dropping invalid record from %s: %s", label.value, exc)
        return None


class SourceClient:
    """Fetches raw residency records from all configured endpoints."""

    def __init__(
        self,
        token: str | None,
        *,
        base_url: str,
        endpoints: tuple[SourceEndpoint, ...],
        timeout: float = 30.0,
        max_pages: int = 50,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not token or not token.strip():
            raise MissingCredentialError("SOFTR_JWT_TOKEN environment variable is not set")
        self._token = token.strip()
        self._base_url = base_url
        self._endpoints = endpoints
        self._timeout = timeout
        self._max_pages = max(1, max_pages)
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "SourceClient":
        """Build a client from application settings.

        Raises MissingCredentialError when the token is unset.
        """
        settings = settings or get_settings()
        return cls(
            settings.softr_jwt_token,
            base_url=settings.source_base_url,
            endpoints=get_endpoints(settings),
            timeout=settings.source_timeout,
            max_pages=settings.source_max_pages,
        )

    def fetch_all(self) -> FetchResult:
        """Fetch every endpoint in order. Never raises for network or HTTP errors."""
        result = FetchResult()
        headers = {
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
            "Cookie": f"jwtToken={self._token}",
        }
        with httpx.Client(
            base_url=self._base_url,
            headers=headers,
            timeout=self._timeout,
            transport=self._transport,
        ) as client:
            for endpoint in self._endpoints:
                records = self._fetch_endpoint(client, endpoint)
                if records is None:
                    result.endpoints_failed += 1
                    continue
                if endpoint.detail_path:
                    records = [self._with_detail(client, endpoint, r) for r in records]
                result.records.extend(records)
                logger.info("Fetched %d records from %s", len(records), endpoint.label.value)
        return result

    def _post_json(
        self, client: httpx.Client, path: str, body: dict, context: str
    ) -> dict | None:
        """POST and decode a JSON object. Returns None (logged) on any failure."""
        try:
            response = client.post(path, json=body)
        except httpx.HTTPError as exc:
            logger.warning("Request failed for %s: %s", context, exc)
            return None
        if not response.is_success:
            logger.warning("Failed to fetch %s: HTTP %s", context, response.status_code)
            return None
        try:
            data = response.json()
        except ValueError:
            logger.warning("Invalid JSON from %s", context)
            return None
        if not isinstance(data, dict):
            logger.warning("Unexpected payload type from %s: %s", context, type(data).__name__)
            return None
        return data

    def _fetch_endpoint(
        self, client: httpx.Client, endpoint: SourceEndpoint
    ) -> list[SourceRecord] | None:
        """Fetch all pages of one endpoint.

        Returns None when the first page fails. A later page failure keeps the
        records already fetched.
        """
        label = endpoint.label.value
        records: list[SourceRecord] = []
        body: dict[str, Any] = {}

        for page in range(self._max_pages):
            data = self._post_json(client, endpoint.list_path, body, label)
            if data is None:
                if page == 0:
                    return None
                logger.warning(
                    "Pagination stopped for %s after %d pages; keeping %d records",
                    label,
                    page,
                    len(records),
                )
                break

            items = data.get("records")
            if items is None:
                items = []
            elif not isinstance(items, list):
                logger.warning(
                    "Unexpected records type from %s: %s", label, type(items).__name__
                )
                items = []
            for item in items:
                record = _to_source_record(endpoint.label, item)
                if record is not None:
                    records.append(record)

            offset = data.get("offset")
            if not offset:
                break
            body = {"offset": offset}
        else:
            logger.warning("Reached max pages (%d) for %s", self._max_pages, label)

        return records

    def _with_detail(
        self, client: httpx.Client, endpoint: SourceEndpoint, record: SourceRecord
    ) -> SourceRecord:
        """Attach the detail description. On failure the description is absent."""
        path = endpoint.detail_path.format(record_id=quote(record.id, safe=""))
        data = self._post_json(
            client, path, {}, f"{endpoint.label.value} detail {record.id}"
        )

        fields = {k: v for k, v in record.fields.items() if k != DESCRIPTION_FIELD}
        description = None
        if data is not None:
            detail_records = data.get("records")
            first = None
            if isinstance(detail_records, list) and detail_records:
                first = detail_records[0]
            if isinstance(first, dict) and isinstance(first.get("fields"), dict):
                description = first["fields"].get(DESCRIPTION_FIELD)
        if description:
            fields[DESCRIPTION_FIELD] = description
        return record.model_copy(update={"fields": fields})
