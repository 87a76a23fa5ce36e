"""
Samanvi Backend — Schema & Helper Tests
=========================================

What we test:
    ✅ camelCase input and output, snake_case construction
    ✅ Validation error flattening into {field, location, message}
    ✅ Year-of-make bounds, file URL check, UTC normalisation
    ✅ `_count` rendering on list items
"""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from app.schemas.bus import BusCreate, BusListItem, BusUpdate
from app.schemas.bus_document import BusDocumentCreate, BusDocumentUpdate
from app.schemas.common import DocumentCount, format_validation_errors
from app.schemas.user import UserCreate
from app.utils.time_utils import days_from_now, to_utc


class TestFormatValidationErrors:
    def test_strips_request_location(self):
        details = format_validation_errors(
            [
                {"loc": ("body", "registrationNo"), "msg": "Field required"},
                {"loc": ("query", "page"), "msg": "Input should be greater than or equal to 1"},
            ]
        )

        assert details == [
            {"field": "registrationNo", "location": "body", "message": "Field required"},
            {
                "field": "page",
                "location": "query",
                "message": "Input should be greater than or equal to 1",
            },
        ]

    def test_model_errors_have_no_location(self):
        with pytest.raises(ValidationError) as exc_info:
            UserCreate(username="x", password="123")

        details = format_validation_errors(exc_info.value.errors())

        assert {d["field"] for d in details} == {"username", "password"}
        assert all(d["location"] is None for d in details)

    def test_whole_body_error(self):
        details = format_validation_errors([{"loc": ("body",), "msg": "Field required"}])

        assert details == [{"field": "body", "location": "body", "message": "Field required"}]


class TestBusSchemas:
    def test_accepts_camel_and_snake_case(self):
        assert BusCreate(registrationNo="KA01").registration_no == "KA01"
        assert BusCreate(registration_no="KA01").registration_no == "KA01"

    @pytest.mark.parametrize("year", [1900, datetime.now(timezone.utc).year + 1])
    def test_year_bounds_inclusive(self, year):
        assert BusCreate(registrationNo="KA01", yearOfMake=year).year_of_make == year

    def test_year_out_of_range_message(self):
        with pytest.raises(ValidationError) as exc_info:
            BusUpdate(yearOfMake=1850)

        assert "Year of make must be between 1900" in str(exc_info.value)

    def test_update_tracks_supplied_fields(self):
        update = BusUpdate(ownerName="New Owner", model=None)

        assert update.model_dump(exclude_unset=True) == {"owner_name": "New Owner", "model": None}

    def test_list_item_count_alias(self):
        item = BusListItem(
            id="abc",
            registration_no="KA01",
            created_at=datetime.now(timezone.utc),
            updated_at=datetime.now(timezone.utc),
            count=DocumentCount(documents=3),
        )

        dumped = item.model_dump(by_alias=True)
        assert dumped["_count"] == {"documents": 3}
        assert dumped["registrationNo"] == "KA01"


class TestBusDocumentSchemas:
    @pytest.mark.parametrize(
        "url", ["https://files.example.com/a.pdf", "s3://bucket/key.pdf", "http://localhost:9000/x"]
    )
    def test_valid_urls(self, url):
        assert BusDocumentCreate(docTypeId="t", fileUrl=url).file_url == url

    @pytest.mark.parametrize("url", ["not a url", "files/a.pdf"])
    def test_invalid_urls(self, url):
        with pytest.raises(ValidationError) as exc_info:
            BusDocumentCreate(docTypeId="t", fileUrl=url)

        assert "File URL must be a valid URL" in str(exc_info.value)

    def test_dates_normalised_to_utc(self):
        doc = BusDocumentCreate(
            docTypeId="t",
            fileUrl="https://x.example.com/a",
            issueDate="2024-01-01T00:00:00",
            expiryDate="2025-01-01T05:30:00+05:30",
        )

        assert doc.issue_date == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert doc.expiry_date == datetime(2025, 1, 1, tzinfo=timezone.utc)
        assert doc.expiry_date.utcoffset() == timedelta(0)

    def test_update_may_clear_expiry(self):
        update = BusDocumentUpdate(expiryDate=None)

        assert update.model_dump(exclude_unset=True) == {"expiry_date": None}


class TestTimeUtils:
    def test_to_utc(self):
        naive = datetime(2024, 6, 1, 12, 0)
        ist = timezone(timedelta(hours=5, minutes=30))

        assert to_utc(None) is None
        assert to_utc(naive) == datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
        assert to_utc(datetime(2024, 6, 1, 17, 30, tzinfo=ist)).hour == 12

    def test_days_from_now(self):
        now = datetime(2024, 1, 1, tzinfo=timezone.utc)

        assert days_from_now(30, now) == datetime(2024, 1, 31, tzinfo=timezone.utc)
        assert days_from_now(0, now) == now
