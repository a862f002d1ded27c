import os
from uuid import uuid4

import pytest


ADMIN_API_KEY = os.getenv("ADMIN_API_KEY", "")


def _require_integration(integration_enabled: bool) -> None:
    if not integration_enabled:
        pytest.skip("Set RUN_INTEGRATION=1 to execute integration tests")


def _admin_headers() -> dict[str, str]:
    if not ADMIN_API_KEY:
        pytest.skip("Set ADMIN_API_KEY to run admin integration tests")
    return {"X-Admin-Key": ADMIN_API_KEY}


def _register(client):
    email = f"live_{uuid4().hex[:8]}@example.com"
    resp = client.post(
        "/v1/auth/register",
        json={"name": "Live Tester", "email": email, "password": f"Pwd-{uuid4().hex[:10]}"},
    )
    assert resp.status_code == 201, resp.text
    body = resp.json()
    return body["user"], {"Authorization": f"Bearer {body['access_token']}"}


@pytest.mark.integration
def test_healthz(client, integration_enabled: bool):
    _require_integration(integration_enabled)

    assert client.get("/healthz").json() == {"status": "ok"}


@pytest.mark.integration
def test_assigned_course_progress_and_certificate(client, integration_enabled: bool):
    _require_integration(integration_enabled)
    admin_headers = _admin_headers()
    user, headers = _register(client)

    course_resp = client.post(
        "/v1/courses",
        headers=admin_headers,
        json={
            "title": f"Live Course {uuid4().hex[:6]}",
            "status": "PUBLISHED",
            "modules": [{"id": "m1", "title": "Only", "lessons": [{"id": "l1"}, {"id": "l2"}]}],
        },
    )
    assert course_resp.status_code == 201, course_resp.text
    course_id = course_resp.json()["id"]

    try:
        assign = client.put(f"/v1/users/{user['id']}", headers=admin_headers, json={"assigned_course_ids": [course_id]})
        assert assign.status_code == 200, assign.text

        progress = client.put(
            f"/v1/progress/{user['id']}/{course_id}", headers=headers, json={"completed_lessons": ["l1", "l2"]}
        )
        assert progress.status_code == 200, progress.text
        assert client.get(f"/v1/progress/{user['id']}", headers=headers).json() == {course_id: ["l1", "l2"]}

        claim = {"student_id": user["id"], "course_id": course_id}
        assert client.post("/v1/certificates", headers=headers, json=claim).status_code == 201
        assert client.post("/v1/certificates", headers=headers, json=claim).status_code == 409
    finally:
        client.delete(f"/v1/courses/{course_id}", headers=admin_headers)
        client.delete(f"/v1/users/{user['id']}", headers=admin_headers)
