"""Tests for record normalization and company-name extraction."""

from __future__ import annotations

from datetime import UTC, datetime

from residency_board.ingestion.normalize import extract_company_name, normalize_record
from residency_board.schemas.residency import ResidencyType, SourceRecord


class TestExtractCompanyName:
    def test_second_segment_without_counter(self) -> None:
        assert extract_company_name("R2 | Acme Corp 03") == "Acme Corp"

    def test_no_pipe_returns_name(self) -> None:
        assert extract_company_name("Solo Name") == "Solo Name"

    def test_underscore_and_hyphen_counters(self) -> None:
        assert extract_company_name("R1 | Beta_2") == "Beta"
        assert extract_company_name("R1|Gamma-12") == "Gamma"

    def test_only_second_segment_is_used(self) -> None:
        assert extract_company_name("R3 | Delta Labs | Berlin") == "Delta Labs"

    def test_empty_inputs(self) -> None:
        assert extract_company_name("") == ""
        assert extract_company_name("R1 | ") == ""


def _record(**fields) -> SourceRecord:
    return SourceRecord(
        program_type=ResidencyType.r2,
        id="recABC",
        fields=fields,
        created_time="2025-01-15T10:00:00.000Z",
    )


class TestNormalizeRecord:
    def test_maps_all_fields(self) -> None:
        record = _record(
            **{
                "Name": "R2 | Acme Corp 03",
                "Residency Title": "Product Residency",
                "Job Title": "Backend Engineer",
                "Job Description": "Build things",
                "Email Application Address": "jobs@acme.test",
                "Monthly Salary": "3000 EUR",
                "Accommodation Support": "Yes",
                "Location": "Lisbon",
            }
        )

        result = normalize_record(record)

        assert result.external_id == "recABC"
        assert result.residency_type == ResidencyType.r2
        assert result.name == "R2 | Acme Corp 03"
        assert result.residency_title == "Product Residency"
        assert result.job_title == "Backend Engineer"
        assert result.description == "Build things"
        assert result.email_address == "jobs@acme.test"
        assert result.monthly_salary == "3000 EUR"
        assert result.accommodation_support == "Yes"
        assert result.location == "Lisbon"
        assert result.created_at == datetime(2025, 1, 15, 10, 0, tzinfo=UTC)

    def test_missing_fields_are_absent_not_errors(self) -> None:
        result = normalize_record(_record())

        assert result.name == ""
        assert result.residency_title == ""
        assert result.job_title == ""
        assert result.description is None
        assert result.email_address is None
        assert result.location is None

    def test_blank_strings_become_absent(self) -> None:
        result = normalize_record(_record(**{"Monthly Salary": "   "}))
        assert result.monthly_salary is None

    def test_non_string_values_are_coerced(self) -> None:
        result = normalize_record(
            _record(**{"Monthly Salary": 2500, "Location": ["Paris", "Remote"]})
        )
        assert result.monthly_salary == "2500"
        assert result.location == "Paris, Remote"

    def test_bad_created_time_is_absent(self) -> None:
        record = SourceRecord(
            program_type=ResidencyType.r1, id="rec1", fields={}, created_time="yesterday"
        )
        assert normalize_record(record).created_at is None
