"""
Samanvi Backend — Bus Document API Tests
==========================================

What we test:
    ✅ Upload requires an existing bus and document type
    ✅ Responses nest `bus` and `docType`
    ✅ File URL and date validation
    ✅ Expiring window: inclusive of expired, excludes never-expiring
    ✅ Missing-required: only unexpired documents count, type list parsing
    ✅ Literal report paths are not swallowed by `{id}` routes
"""

import pytest
import pytest_asyncio


@pytest_asyncio.fixture
async def fleet(make_bus, make_doc_type):
    """Two buses and two document types, returned by name."""
    return {
        "alpha": await make_bus("KA01AA0001"),
        "beta": await make_bus("KA01BB0002"),
        "insurance": await make_doc_type("Insurance"),
        "permit": await make_doc_type("Permit"),
    }


class TestCreateDocument:
    @pytest.mark.asyncio
    async def test_create_document_nests_bus_and_type(self, client, api_headers, fleet, in_days):
        response = await client.post(
            f"/api/buses/{fleet['alpha']['id']}/documents",
            json={
                "docTypeId": fleet["insurance"]["id"],
                "documentNumber": "POL-778812",
                "issueDate": in_days(-300),
                "expiryDate": in_days(65),
                "fileUrl": "https://files.example.com/alpha/insurance.pdf",
                "remarks": "Renewed online",
            },
            headers=api_headers,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["busId"] == fleet["alpha"]["id"]
        assert body["bus"]["registrationNo"] == "KA01AA0001"
        assert body["docType"]["name"] == "Insurance"
        assert body["documentNumber"] == "POL-778812"
        assert body["fileUrl"] == "https://files.example.com/alpha/insurance.pdf"
        assert "uploadedAt" in body

    @pytest.mark.asyncio
    async def test_unknown_bus(self, client, api_headers, fleet):
        response = await client.post(
            "/api/buses/no-such-bus/documents",
            json={"docTypeId": fleet["insurance"]["id"], "fileUrl": "https://x.example.com/a.pdf"},
            headers=api_headers,
        )

        assert response.status_code == 404
        assert response.json()["message"] == "Bus not found"

    @pytest.mark.asyncio
    async def test_unknown_document_type(self, client, api_headers, fleet):
        response = await client.post(
            f"/api/buses/{fleet['alpha']['id']}/documents",
            json={"docTypeId": "no-such-type", "fileUrl": "https://x.example.com/a.pdf"},
            headers=api_headers,
        )

        assert response.status_code == 404
        assert response.json()["message"] == "Document type not found"

    @pytest.mark.asyncio
    async def test_invalid_url_and_date(self, client, api_headers, fleet):
        response = await client.post(
            f"/api/buses/{fleet['alpha']['id']}/documents",
            json={
                "docTypeId": fleet["insurance"]["id"],
                "fileUrl": "not a url",
                "expiryDate": "next tuesday",
            },
            headers=api_headers,
        )

        assert response.status_code == 400
        details = {d["field"]: d["message"] for d in response.json()["details"]}
        assert set(details) == {"fileUrl", "expiryDate"}
        assert "File URL must be a valid URL" in details["fileUrl"]

    @pytest.mark.asyncio
    async def test_required_fields(self, client, api_headers, fleet):
        response = await client.post(
            f"/api/buses/{fleet['alpha']['id']}/documents", json={}, headers=api_headers
        )

        assert response.status_code == 400
        fields = {d["field"] for d in response.json()["details"]}
        assert fields == {"docTypeId", "fileUrl"}


class TestReadUpdateDeleteDocument:
    @pytest.mark.asyncio
    async def test_list_bus_documents_newest_first(self, client, api_headers, fleet, make_document):
        first = await make_document(fleet["alpha"]["id"], fleet["insurance"]["id"])
        second = await make_document(fleet["alpha"]["id"], fleet["permit"]["id"])
        await make_document(fleet["beta"]["id"], fleet["permit"]["id"])

        response = await client.get(f"/api/buses/{fleet['alpha']['id']}/documents", headers=api_headers)

        assert response.status_code == 200
        body = response.json()
        assert [doc["id"] for doc in body] == [second["id"], first["id"]]
        assert body[0]["docType"]["name"] == "Permit"

    @pytest.mark.asyncio
    async def test_list_for_unknown_bus(self, client, api_headers):
        response = await client.get("/api/buses/no-such-bus/documents", headers=api_headers)

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_get_document(self, client, api_headers, fleet, make_document):
        created = await make_document(fleet["alpha"]["id"], fleet["insurance"]["id"])

        response = await client.get(f"/api/documents/{created['id']}", headers=api_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["bus"]["id"] == fleet["alpha"]["id"]
        assert body["docType"]["id"] == fleet["insurance"]["id"]

    @pytest.mark.asyncio
    async def test_get_missing_document(self, client, api_headers):
        response = await client.get("/api/documents/missing", headers=api_headers)

        assert response.status_code == 404
        assert response.json()["message"] == "Document not found"

    @pytest.mark.asyncio
    async def test_update_changes_only_supplied_fields(self, client, api_headers, fleet, make_document):
        created = await make_document(
            fleet["alpha"]["id"], fleet["insurance"]["id"], documentNumber="OLD-1"
        )

        response = await client.put(
            f"/api/documents/{created['id']}",
            json={"remarks": "Checked at depot", "docTypeId": fleet["permit"]["id"]},
            headers=api_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["remarks"] == "Checked at depot"
        assert body["documentNumber"] == "OLD-1"
        assert body["docType"]["name"] == "Permit"

    @pytest.mark.asyncio
    async def test_update_to_unknown_type(self, client, api_headers, fleet, make_document):
        created = await make_document(fleet["alpha"]["id"], fleet["insurance"]["id"])

        response = await client.put(
            f"/api/documents/{created['id']}", json={"docTypeId": "nope"}, headers=api_headers
        )

        assert response.status_code == 404
        assert response.json()["message"] == "Document type not found"

    @pytest.mark.asyncio
    async def test_update_missing_document(self, client, api_headers):
        response = await client.put("/api/documents/missing", json={"remarks": "x"}, headers=api_headers)

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_document_frees_bus(self, client, api_headers, fleet, make_document):
        created = await make_document(fleet["alpha"]["id"], fleet["insurance"]["id"])

        response = await client.delete(f"/api/documents/{created['id']}", headers=api_headers)

        assert response.status_code == 204
        assert (await client.get(f"/api/documents/{created['id']}", headers=api_headers)).status_code == 404
        bus_delete = await client.delete(f"/api/buses/{fleet['alpha']['id']}", headers=api_headers)
        assert bus_delete.status_code == 204


class TestExpiringDocuments:
    @pytest.mark.asyncio
    async def test_window_includes_expired_and_excludes_undated(
        self, client, api_headers, fleet, make_document, in_days
    ):
        bus, doc_type = fleet["alpha"]["id"], fleet["insurance"]["id"]
        expired = await make_document(bus, doc_type, expiryDate=in_days(-5))
        soon = await make_document(bus, doc_type, expiryDate=in_days(10))
        edge = await make_document(bus, doc_type, expiryDate=in_days(29))
        await make_document(bus, doc_type, expiryDate=in_days(31))
        await make_document(bus, doc_type, expiryDate=in_days(40))
        await make_document(bus, doc_type)  # never expires

        response = await client.get("/api/documents/expiring", headers=api_headers)

        assert response.status_code == 200
        body = response.json()
        assert [doc["id"] for doc in body] == [expired["id"], soon["id"], edge["id"]]
        assert body[0]["bus"]["registrationNo"] == "KA01AA0001"
        assert body[0]["docType"]["name"] == "Insurance"

    @pytest.mark.asyncio
    async def test_custom_window(self, client, api_headers, fleet, make_document, in_days):
        bus, doc_type = fleet["alpha"]["id"], fleet["insurance"]["id"]
        await make_document(bus, doc_type, expiryDate=in_days(-1))
        await make_document(bus, doc_type, expiryDate=in_days(10))
        await make_document(bus, doc_type, expiryDate=in_days(40))

        within_zero = await client.get("/api/documents/expiring?withinDays=0", headers=api_headers)
        within_sixty = await client.get("/api/documents/expiring?withinDays=60", headers=api_headers)

        assert len(within_zero.json()) == 1
        assert len(within_sixty.json()) == 3

    @pytest.mark.asyncio
    async def test_widest_window_is_accepted(self, client, api_headers, fleet, make_document, in_days):
        await make_document(fleet["alpha"]["id"], fleet["insurance"]["id"], expiryDate=in_days(9000))

        response = await client.get("/api/documents/expiring?withinDays=36500", headers=api_headers)

        assert response.status_code == 200
        assert len(response.json()) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", ["-1", "soon", "36501", "3000000", "1000000000"])
    async def test_invalid_window(self, client, api_headers, value):
        response = await client.get(f"/api/documents/expiring?withinDays={value}", headers=api_headers)

        assert response.status_code == 400
        assert response.json()["details"][0]["field"] == "withinDays"


class TestMissingRequired:
    @pytest.mark.asyncio
    async def test_only_unexpired_documents_count(
        self, client, api_headers, fleet, make_bus, make_document, in_days
    ):
        insurance, permit = fleet["insurance"]["id"], fleet["permit"]["id"]
        # alpha: both valid (one never expires)
        await make_document(fleet["alpha"]["id"], insurance)
        await make_document(fleet["alpha"]["id"], permit, expiryDate=in_days(90))
        # beta: permit has lapsed
        await make_document(fleet["beta"]["id"], insurance, expiryDate=in_days(90))
        await make_document(fleet["beta"]["id"], permit, expiryDate=in_days(-1))
        # gamma: nothing at all
        gamma = await make_bus("KA01CC0003")

        response = await client.get(
            "/api/buses/missing-required?types=Insurance,Permit", headers=api_headers
        )

        assert response.status_code == 200
        body = response.json()
        assert body["requiredTypes"] == ["Insurance", "Permit"]
        assert body["total"] == 2
        reported = {bus["id"]: bus for bus in body["buses"]}
        assert set(reported) == {fleet["beta"]["id"], gamma["id"]}
        # Only the still-valid documents are attached
        assert [doc["docType"]["name"] for doc in reported[fleet["beta"]["id"]]["documents"]] == [
            "Insurance"
        ]
        assert reported[gamma["id"]]["documents"] == []

    @pytest.mark.asyncio
    async def test_defaults_to_every_document_type(
        self, client, api_headers, fleet, make_doc_type, make_document
    ):
        await make_doc_type("Tax Receipt")
        for name in ("insurance", "permit"):
            await make_document(fleet["alpha"]["id"], fleet[name]["id"])

        body = (await client.get("/api/buses/missing-required", headers=api_headers)).json()

        assert body["requiredTypes"] == ["Insurance", "Permit", "Tax Receipt"]
        assert {bus["registrationNo"] for bus in body["buses"]} == {"KA01AA0001", "KA01BB0002"}

    @pytest.mark.asyncio
    async def test_type_list_is_trimmed(self, client, api_headers, fleet, make_document):
        await make_document(fleet["alpha"]["id"], fleet["insurance"]["id"])

        body = (
            await client.get(
                "/api/buses/missing-required", params={"types": " Insurance , ,"}, headers=api_headers
            )
        ).json()

        assert body["requiredTypes"] == ["Insurance"]
        assert [bus["registrationNo"] for bus in body["buses"]] == ["KA01BB0002"]
        assert body["total"] == 1

    @pytest.mark.asyncio
    async def test_report_path_is_not_treated_as_bus_id(self, client, api_headers):
        response = await client.get("/api/buses/missing-required", headers=api_headers)

        assert response.status_code == 200
        assert set(response.json()) == {"buses", "requiredTypes", "total"}
