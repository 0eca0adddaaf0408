"""Source endpoint table: one list resource per residency program type."""

from __future__ import annotations

import json
from dataclasses import dataclass

from residency_board.config import Settings
from residency_board.schemas.residency import ResidencyType

_DATASOURCE_ROOT = (
    "/v1/datasource/airtable/1a4e99c5-7a8f-4323-b0d5-aaa96a38141c/"
    "ae026310-d476-499d-bb4d-a126de2c0378"
)


@dataclass(frozen=True)
class SourceEndpoint:
    """A remote list resource, optionally paired with a per-record detail resource.

    detail_path is a template containing ``{record_id}``.
    """

    label: ResidencyType
    list_path: str
    detail_path: str | None = None


DEFAULT_ENDPOINTS: tuple[SourceEndpoint, ...] = (
    SourceEndpoint(
        ResidencyType.r1,
        f"{_DATASOURCE_ROOT}/7b879f15-4c21-464d-8b99-4620a0e320b0/"
        "fb5530e8-e944-4c77-81e6-b38bc987396b/data",
    ),
    SourceEndpoint(
        ResidencyType.r1_r2,
        f"{_DATASOURCE_ROOT}/8cfabc27-6292-40e3-bd4f-fed6b8fc3a2c/"
        "cd955d21-6984-43fb-a6dc-4d4b35127ec4/data",
    ),
    SourceEndpoint(
        ResidencyType.r2,
        f"{_DATASOURCE_ROOT}/99d9522a-421a-467e-a645-73a89ed71bf0/"
        "f57e3170-bf24-4bb6-92f9-814e08ab32c4/data",
    ),
    SourceEndpoint(
        ResidencyType.r3,
        f"{_DATASOURCE_ROOT}/cd82fbb7-b0da-42e5-afd6-0adf9faf6757/"
        "478384e9-5ad7-47a6-8411-a9474249fdc0/data",
    ),
    SourceEndpoint(
        ResidencyType.r4,
        f"{_DATASOURCE_ROOT}/9857663e-7306-4961-b035-3688fd4a4471/"
        "d3a4d32d-f920-44a3-89a2-0705b30a6890/data",
    ),
)


def parse_endpoints(raw: str) -> tuple[SourceEndpoint, ...]:
    """Parse the SOURCE_ENDPOINTS JSON override.

    Expects a list of objects with ``label``, ``list_path`` and optional
    ``detail_path``. Raises ValueError on malformed input or unknown labels.
    """
    try:
        items = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"SOURCE_ENDPOINTS is not valid JSON: {exc}") from exc
    if not isinstance(items, list):
        raise ValueError("SOURCE_ENDPOINTS must be a JSON list")

    endpoints: list[SourceEndpoint] = []
    for item in items:
        if not isinstance(item, dict) or not item.get("list_path"):
            raise ValueError("Each SOURCE_ENDPOINTS entry needs label and list_path")
        detail_path = item.get("detail_path") or None
        if detail_path is not None and "{record_id}" not in detail_path:
            raise ValueError(f"detail_path must contain {{record_id}}: {detail_path}")
        endpoints.append(
            SourceEndpoint(
                label=ResidencyType(item.get("label")),
                list_path=item["list_path"],
                detail_path=detail_path,
            )
        )
    return tuple(endpoints)


def get_endpoints(settings: Settings) -> tuple[SourceEndpoint, ...]:
    """Endpoint table from settings, falling back to the production defaults."""
    if settings.source_endpoints_json:
        return parse_endpoints(settings.source_endpoints_json)
    return DEFAULT_ENDPOINTS
