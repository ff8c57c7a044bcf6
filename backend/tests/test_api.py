"""End-to-end tests for the HTTP workflow."""

from decimal import Decimal

import pytest
from httpx import AsyncClient

from conftest import register, task_payload


def auth(key: str) -> dict:
    return {"X-API-Key": key}


async def post_task(client: AsyncClient, company_key: str, **overrides) -> dict:
    response = await client.post(
        "/api/company/tasks", headers=auth(company_key), json=task_payload(**overrides)
    )
    assert response.status_code == 201, response.text
    return response.json()


async def publish_task(client: AsyncClient, company_key: str, admin_key: str, **overrides) -> dict:
    task = await post_task(client, company_key, **overrides)
    response = await client.put(f"/api/admin/tasks/{task['id']}/approve", headers=auth(admin_key))
    assert response.status_code == 200, response.text
    return response.json()


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_register_returns_api_key_once(client: AsyncClient):
    data, key = await register(client, "worker", "Nora")

    assert key.startswith("tmk_sk_")
    assert len(key) == len("tmk_sk_") + 64
    me = await client.get("/api/users/me", headers=auth(key))
    assert me.status_code == 200
    assert me.json()["id"] == data["user_id"]
    assert "api_key" not in me.json()


@pytest.mark.asyncio
async def test_admin_signup_disabled_by_default(client: AsyncClient):
    response = await client.post(
        "/api/users", json={"name": "Eve", "email": "eve@example.com", "role": "admin"}
    )

    assert response.status_code == 403
    assert response.json()["detail"]["code"] == "FORBIDDEN"


@pytest.mark.asyncio
async def test_duplicate_email_rejected(client: AsyncClient):
    await register(client, "worker", "Sam")

    response = await client.post(
        "/api/users", json={"name": "Sam", "email": "SAM@example.com", "role": "company"}
    )

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "EMAIL_TAKEN"


@pytest.mark.asyncio
async def test_missing_or_invalid_key(client: AsyncClient):
    missing = await client.get("/api/users/me")
    invalid = await client.get("/api/users/me", headers=auth("tmk_sk_nope"))

    assert missing.status_code == 401
    assert invalid.status_code == 401
    assert invalid.json()["detail"]["code"] == "INVALID_API_KEY"


@pytest.mark.asyncio
async def test_blocked_user_refused(client: AsyncClient, admin_user, worker_user):
    _, admin_key = admin_user
    worker_data, worker_key = worker_user

    response = await client.put(
        f"/api/admin/users/{worker_data['user_id']}/status",
        headers=auth(admin_key),
        json={"status": "blocked"}
    )
    assert response.status_code == 200

    response = await client.get("/api/worker/tasks", headers=auth(worker_key))
    assert response.status_code == 403
    assert response.json()["detail"]["code"] == "USER_BLOCKED"


@pytest.mark.asyncio
async def test_wrong_role_gets_forbidden(client: AsyncClient, worker_user):
    _, worker_key = worker_user

    response = await client.post(
        "/api/company/tasks", headers=auth(worker_key), json=task_payload()
    )

    assert response.status_code == 403
    assert response.json()["detail"]["field"] == "role"


@pytest.mark.asyncio
async def test_task_body_validation(client: AsyncClient, company_user):
    _, company_key = company_user

    response = await client.post(
        "/api/company/tasks", headers=auth(company_key), json=task_payload(duration=5)
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_full_workflow_with_commission(
    client: AsyncClient, company_user, worker_user, admin_user, commission_10
):
    """Post, approve, apply, accept, submit and accept work with a 10% commission."""
    _, company_key = company_user
    worker_data, worker_key = worker_user
    _, admin_key = admin_user

    task = await post_task(client, company_key, payment_amount="100", duration=2, status="open")
    assert task["status"] == "pendingApproval"

    response = await client.put(f"/api/admin/tasks/{task['id']}/approve", headers=auth(admin_key))
    assert response.json()["status"] == "open"

    response = await client.post(
        f"/api/worker/tasks/{task['id']}/apply",
        headers=auth(worker_key),
        json={"proposal": "Native speaker", "expected_delivery_time": "2 days"}
    )
    assert response.status_code == 201
    application = response.json()

    response = await client.put(
        f"/api/company/applications/{application['id']}/accept", headers=auth(company_key)
    )
    assert response.status_code == 200
    assert response.json()["status"] == "accepted"

    response = await client.get("/api/worker/tasks/assigned", headers=auth(worker_key))
    assert [t["id"] for t in response.json()] == [task["id"]]

    response = await client.post(
        f"/api/worker/tasks/{task['id']}/submit",
        headers=auth(worker_key),
        json={
            "description": "All done",
            "files": [{"filename": "out.csv", "path": "/uploads/out.csv"}]
        }
    )
    assert response.status_code == 200
    submission = response.json()
    assert submission["review_status"] == "pending"

    response = await client.put(
        f"/api/company/submissions/{submission['id']}/review",
        headers=auth(company_key),
        json={"review_status": "accepted", "review_notes": "Thanks"}
    )
    assert response.status_code == 200
    assert response.json()["review_status"] == "accepted"

    response = await client.get(f"/api/company/tasks/{task['id']}", headers=auth(company_key))
    assert response.json()["status"] == "completed"

    response = await client.get("/api/company/payments", headers=auth(company_key))
    payments = response.json()
    assert len(payments) == 1
    payment = payments[0]
    assert Decimal(payment["amount"]) == Decimal("100")
    assert Decimal(payment["platform_fee"]) == Decimal("10.00")
    assert Decimal(payment["worker_payout"]) == Decimal("90.00")
    assert payment["worker_id"] == worker_data["user_id"]

    response = await client.put(
        f"/api/company/payments/{payment['id']}/confirm",
        headers=auth(company_key),
        json={"transaction_id": "BANK-42"}
    )
    assert response.status_code == 200
    assert response.json()["status"] == "confirmed"

    response = await client.get("/api/worker/earnings", headers=auth(worker_key))
    earnings = response.json()
    assert Decimal(earnings["total_earnings"]) == Decimal("90.00")
    assert Decimal(earnings["total_earned"]) == Decimal("90.00")
    assert earnings["completed_tasks"] == 1


@pytest.mark.asyncio
async def test_apply_to_unpublished_task(client: AsyncClient, company_user, worker_user):
    _, company_key = company_user
    _, worker_key = worker_user
    task = await post_task(client, company_key)

    response = await client.post(
        f"/api/worker/tasks/{task['id']}/apply",
        headers=auth(worker_key),
        json={"proposal": "Let me", "expected_delivery_time": "1 day"}
    )

    assert response.status_code == 409
    assert response.json()["detail"]["code"] == "TASK_NOT_OPEN"
    response = await client.get("/api/worker/applications", headers=auth(worker_key))
    assert response.json() == []


@pytest.mark.asyncio
async def test_reject_then_edit_resubmits(client: AsyncClient, company_user, admin_user):
    _, company_key = company_user
    _, admin_key = admin_user
    task = await post_task(client, company_key)

    response = await client.put(
        f"/api/admin/tasks/{task['id']}/reject",
        headers=auth(admin_key),
        json={"reason": "incomplete spec"}
    )
    assert response.json()["status"] == "rejected"
    assert response.json()["rejection_reason"] == "incomplete spec"

    response = await client.put(
        f"/api/company/tasks/{task['id']}",
        headers=auth(company_key),
        json={"description": "Now with full acceptance criteria"}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "pendingApproval"
    assert data["rejection_reason"] == ""


@pytest.mark.asyncio
async def test_duplicate_application_conflict(
    client: AsyncClient, company_user, worker_user, admin_user
):
    _, company_key = company_user
    _, worker_key = worker_user
    _, admin_key = admin_user
    task = await publish_task(client, company_key, admin_key)
    body = {"proposal": "Pick me", "expected_delivery_time": "1 day"}

    first = await client.post(f"/api/worker/tasks/{task['id']}/apply", headers=auth(worker_key), json=body)
    second = await client.post(f"/api/worker/tasks/{task['id']}/apply", headers=auth(worker_key), json=body)

    assert first.status_code == 201
    assert second.status_code == 409
    assert second.json()["detail"]["code"] == "DUPLICATE_APPLICATION"

    response = await client.get(f"/api/worker/tasks/{task['id']}", headers=auth(worker_key))
    assert response.json()["has_applied"] is True


@pytest.mark.asyncio
async def test_invalid_review_status_is_bad_request(client: AsyncClient, company_user):
    _, company_key = company_user

    response = await client.put(
        "/api/company/submissions/anything/review",
        headers=auth(company_key),
        json={"review_status": "maybe"}
    )

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "INVALID_REVIEW_STATUS"


@pytest.mark.asyncio
async def test_unknown_entity_not_found(client: AsyncClient, admin_user):
    _, admin_key = admin_user

    response = await client.put("/api/admin/tasks/nope/approve", headers=auth(admin_key))

    assert response.status_code == 404
    assert response.json()["detail"] == {
        "code": "TASK_NOT_FOUND",
        "message": "Task nope not found",
        "entity": "task",
        "field": "id",
    }


@pytest.mark.asyncio
async def test_public_browse_and_detail(client: AsyncClient, company_user, admin_user):
    _, company_key = company_user
    _, admin_key = admin_user
    published = await publish_task(client, company_key, admin_key, required_skills=["python"])
    hidden = await post_task(client, company_key, title="Hidden")

    response = await client.get("/api/tasks", params={"skills": "python,go"})
    listing = response.json()
    assert listing["total"] == 1
    assert listing["items"][0]["id"] == published["id"]

    assert (await client.get(f"/api/tasks/{published['id']}")).status_code == 200
    assert (await client.get(f"/api/tasks/{hidden['id']}")).status_code == 403

    response = await client.get("/api/tasks/skills/list")
    assert "python" in response.json()


@pytest.mark.asyncio
async def test_admin_deletes_task(client: AsyncClient, company_user, admin_user):
    _, company_key = company_user
    _, admin_key = admin_user
    task = await post_task(client, company_key)

    response = await client.delete(f"/api/admin/tasks/{task['id']}", headers=auth(admin_key))
    assert response.status_code == 204

    response = await client.get(f"/api/company/tasks/{task['id']}", headers=auth(company_key))
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_profiles(client: AsyncClient, company_user, worker_user):
    _, company_key = company_user
    _, worker_key = worker_user

    response = await client.put(
        "/api/worker/profile", headers=auth(worker_key), json={"skills": ["python"], "bio": "Hi"}
    )
    assert response.status_code == 200
    assert response.json()["skills"] == ["python"]
    assert response.json()["completed_tasks"] == 0

    response = await client.get("/api/company/profile", headers=auth(company_key))
    assert response.status_code == 200
    assert response.json()["company_name"] == "Acme"
    assert response.json()["verification_status"] == "pending"


@pytest.mark.asyncio
async def test_admin_verifies_company(client: AsyncClient, company_user, admin_user):
    company_data, company_key = company_user
    _, admin_key = admin_user

    response = await client.put(
        f"/api/admin/companies/{company_data['user_id']}/verify",
        headers=auth(admin_key),
        json={"verification_status": "approved"}
    )
    assert response.status_code == 200
    assert response.json()["verification_status"] == "approved"

    response = await client.get(
        "/api/admin/companies", headers=auth(admin_key), params={"verification_status": "approved"}
    )
    assert response.json()["total"] == 1
    assert response.json()["items"][0]["user_id"] == company_data["user_id"]

    response = await client.get("/api/company/profile", headers=auth(company_key))
    assert response.json()["verification_status"] == "approved"

    response = await client.put(
        f"/api/admin/companies/{company_data['user_id']}/verify",
        headers=auth(company_key),
        json={"verification_status": "approved"}
    )
    assert response.status_code == 403
