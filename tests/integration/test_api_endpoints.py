"""
HTTP API tests through the FastAPI app.
"""

from uuid import UUID, uuid4

import pytest

from conftest import FAR_LAT, FAR_LNG, NEARBY_LAT, NEARBY_LNG, headers_for

API = "/api/v1"
REASON = "Confirmed on site by the supervisor"


async def post_job(client, seed, price="150.00"):
    response = await client.post(
        f"{API}/jobs",
        json={"property_id": str(seed.property_id), "price": price},
        headers=headers_for(seed.manager),
    )
    assert response.status_code == 201
    return response.json()


async def job_in_progress(client, seed):
    job = await post_job(client, seed)
    cleaner = headers_for(seed.cleaner)
    await client.post(f"{API}/jobs/{job['id']}/accept", headers=cleaner)
    await client.post(
        f"{API}/jobs/{job['id']}/start",
        json={"latitude": NEARBY_LAT, "longitude": NEARBY_LNG},
        headers=cleaner,
    )
    return job


class TestIdentityAndErrors:
    @pytest.mark.asyncio
    async def test_missing_identity_headers(self, client):
        response = await client.get(f"{API}/jobs")

        assert response.status_code == 401
        assert response.json()["type"] == "http_error"

    @pytest.mark.asyncio
    async def test_invalid_role_header(self, client, seed):
        headers = headers_for(seed.manager)
        headers["X-Actor-Role"] = "janitor"

        response = await client.get(f"{API}/jobs", headers=headers)

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_unknown_job_is_not_found(self, client, seed):
        response = await client.get(
            f"{API}/jobs/{uuid4()}", headers=headers_for(seed.manager)
        )

        assert response.status_code == 404
        body = response.json()
        assert set(body) == {"error", "message", "type"}
        assert body["type"] == "not_found"

    @pytest.mark.asyncio
    async def test_cleaner_cannot_post_jobs(self, client, seed):
        response = await client.post(
            f"{API}/jobs",
            json={"property_id": str(seed.property_id), "price": "100.00"},
            headers=headers_for(seed.cleaner),
        )

        assert response.status_code == 403
        assert response.json()["type"] == "forbidden"

    @pytest.mark.asyncio
    async def test_negative_price_rejected(self, client, seed):
        response = await client.post(
            f"{API}/jobs",
            json={"property_id": str(seed.property_id), "price": "-5.00"},
            headers=headers_for(seed.manager),
        )

        assert response.status_code == 422
        assert response.json()["type"] == "validation_error"


class TestJobEndpoints:
    @pytest.mark.asyncio
    async def test_create_job(self, client, seed):
        job = await post_job(client, seed)

        assert job["status"] == "available"
        assert job["price"] == "150.00"
        assert job["assigned_cleaner_id"] is None

    @pytest.mark.asyncio
    async def test_second_accept_conflicts(self, client, seed):
        job = await post_job(client, seed)

        first = await client.post(
            f"{API}/jobs/{job['id']}/accept", headers=headers_for(seed.cleaner)
        )
        second = await client.post(
            f"{API}/jobs/{job['id']}/accept", headers=headers_for(seed.other_cleaner)
        )

        assert first.status_code == 200
        assert first.json()["assigned_cleaner_id"] == str(seed.cleaner.id)
        assert second.status_code == 409
        assert second.json()["type"] == "conflict"

    @pytest.mark.asyncio
    async def test_cleaner_listing_hides_other_cleaners_jobs(self, client, seed):
        taken = await post_job(client, seed)
        open_job = await post_job(client, seed)
        await client.post(
            f"{API}/jobs/{taken['id']}/accept", headers=headers_for(seed.cleaner)
        )

        response = await client.get(f"{API}/jobs", headers=headers_for(seed.other_cleaner))

        assert response.status_code == 200
        ids = {job["id"] for job in response.json()}
        assert open_job["id"] in ids
        assert taken["id"] not in ids

    @pytest.mark.asyncio
    async def test_complete_near_property(self, client, workflow, seed):
        job = await job_in_progress(client, seed)
        await workflow.add_photo(UUID(job["id"]), seed.cleaner)

        response = await client.post(
            f"{API}/jobs/{job['id']}/complete",
            json={"latitude": NEARBY_LAT, "longitude": NEARBY_LNG},
            headers=headers_for(seed.cleaner),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["needs_review"] is False
        assert body["job"]["status"] == "completed"
        assert body["line_item"]["amount"] == "150.00"

    @pytest.mark.asyncio
    async def test_complete_far_goes_to_review(self, client, workflow, seed):
        job = await job_in_progress(client, seed)
        await workflow.add_photo(UUID(job["id"]), seed.cleaner)

        response = await client.post(
            f"{API}/jobs/{job['id']}/complete",
            json={"latitude": FAR_LAT, "longitude": FAR_LNG},
            headers=headers_for(seed.cleaner),
        )

        body = response.json()
        assert response.status_code == 200
        assert body["needs_review"] is True
        assert body["line_item"] is None
        assert [c["type"] for c in body["conflicts"]] == ["gps_mismatch"]

    @pytest.mark.asyncio
    async def test_out_of_range_coordinates(self, client, seed):
        job = await post_job(client, seed)
        await client.post(
            f"{API}/jobs/{job['id']}/accept", headers=headers_for(seed.cleaner)
        )

        response = await client.post(
            f"{API}/jobs/{job['id']}/start",
            json={"latitude": 123.0, "longitude": 10.0},
            headers=headers_for(seed.cleaner),
        )

        assert response.status_code == 422


class TestOverrideEndpoints:
    @pytest.mark.asyncio
    async def test_short_reason_rejected(self, client, seed):
        response = await client.post(
            f"{API}/jobs/{uuid4()}/override",
            json={"reason": "ok"},
            headers=headers_for(seed.manager),
        )

        assert response.status_code == 422
        assert response.json()["type"] == "validation_error"

    @pytest.mark.asyncio
    async def test_override_job_in_review(self, client, seed):
        job = await job_in_progress(client, seed)
        await client.post(
            f"{API}/jobs/{job['id']}/complete",
            json={"latitude": NEARBY_LAT, "longitude": NEARBY_LNG},
            headers=headers_for(seed.cleaner),
        )

        conflicts = await client.post(
            f"{API}/jobs/{job['id']}/conflicts", headers=headers_for(seed.manager)
        )
        assert conflicts.json()["has_conflicts"] is True

        response = await client.post(
            f"{API}/jobs/{job['id']}/override",
            json={"reason": REASON},
            headers=headers_for(seed.manager),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["job"]["status"] == "completed"
        assert body["override"]["previous_status"] == "needs_review"
        assert body["override"]["conflicts_resolved"] == ["missing_photos"]
        assert body["line_item"]["amount"] == "150.00"

    @pytest.mark.asyncio
    async def test_override_requires_review_status(self, client, seed):
        job = await post_job(client, seed)

        response = await client.post(
            f"{API}/jobs/{job['id']}/override",
            json={"reason": REASON},
            headers=headers_for(seed.manager),
        )

        assert response.status_code == 400
        assert response.json()["type"] == "invalid_transition"


class TestInvoiceEndpoints:
    @pytest.mark.asyncio
    async def test_current_invoice_without_work(self, client, seed):
        response = await client.get(
            f"{API}/invoices/current", headers=headers_for(seed.cleaner)
        )

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "no_invoice"
        assert body["id"] is None
        assert body["total_amount"] == "0.00"

    @pytest.mark.asyncio
    async def test_submit_then_void_is_locked(self, client, workflow, seed):
        job = await job_in_progress(client, seed)
        await workflow.add_photo(UUID(job["id"]), seed.cleaner)
        completed = await client.post(
            f"{API}/jobs/{job['id']}/complete",
            json={"latitude": NEARBY_LAT, "longitude": NEARBY_LNG},
            headers=headers_for(seed.cleaner),
        )
        line_item = completed.json()["line_item"]

        submitted = await client.post(
            f"{API}/invoices/{line_item['invoice_id']}/submit",
            headers=headers_for(seed.cleaner),
        )
        assert submitted.json()["status"] == "submitted"
        assert submitted.json()["submitted_at"] is not None

        voided = await client.post(
            f"{API}/invoices/line-items/{line_item['id']}/void",
            json={"reason": "Cancelled"},
            headers=headers_for(seed.manager),
        )
        assert voided.status_code == 400
        assert voided.json()["type"] == "invoice_locked"

        history = await client.get(
            f"{API}/invoices/history", headers=headers_for(seed.cleaner)
        )
        assert [invoice["id"] for invoice in history.json()] == [line_item["invoice_id"]]


class TestHealthEndpoints:
    @pytest.mark.asyncio
    async def test_liveness(self, client):
        response = await client.get(f"{API}/health/live")

        assert response.status_code == 200
        assert response.json()["status"] == "alive"
