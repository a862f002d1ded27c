import uuid

from conftest import ADMIN_HEADERS


def _claim(app_client, headers, user, course, **extra):
    return app_client.post(
        "/v1/certificates",
        headers=headers,
        json={"student_id": user["id"], "course_id": course["id"], "course_title": course["title"], **extra},
    )


def test_certificate_issued_once_per_student_and_course(app_client, register, create_course):
    course = create_course("Resume Writing", (1,))
    user, headers = register(name="Ada")

    first = _claim(app_client, headers, user, course)
    assert first.status_code == 201, first.text
    body = first.json()
    assert body["student_name"] == "Ada"
    assert body["course_title"] == "Resume Writing"
    assert body["issue_date"]

    second = _claim(app_client, headers, user, course, student_name="Ada L.")
    assert second.status_code == 409
    assert second.json()["error"]["code"] == "CERTIFICATE_ALREADY_CLAIMED"
    assert len(app_client.get("/v1/certificates", headers=headers).json()) == 1


def test_same_course_for_two_students(app_client, register, create_course):
    course = create_course()
    ada, ada_headers = register(name="Ada")
    grace, grace_headers = register(name="Grace")

    assert _claim(app_client, ada_headers, ada, course).status_code == 201
    assert _claim(app_client, grace_headers, grace, course).status_code == 201

    assert len(app_client.get("/v1/certificates", headers=ada_headers).json()) == 1
    assert len(app_client.get("/v1/certificates", headers=ADMIN_HEADERS).json()) == 2


def test_cannot_claim_for_someone_else(app_client, register, create_course):
    course = create_course()
    ada, _ = register(name="Ada")
    _, grace_headers = register(name="Grace")

    assert _claim(app_client, grace_headers, ada, course).status_code == 403


def test_claim_with_malformed_course_id(app_client, register):
    user, headers = register()

    resp = _claim(app_client, headers, user, {"id": "not-a-uuid", "title": "?"})

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"


def test_ticket_defaults_and_scoping(app_client, register):
    ada, ada_headers = register(name="Ada", email="ada@example.com")
    _, grace_headers = register(name="Grace")

    bug = app_client.post("/v1/tickets", headers=ada_headers, json={"type": "bug", "message": "Player freezes"})
    assert bug.status_code == 201, bug.text
    assert bug.json()["subject"] == "Bug Report"
    assert bug.json()["student_email"] == "ada@example.com"
    assert bug.json()["student_id"] == ada["id"]

    question = app_client.post(
        "/v1/tickets",
        headers=ada_headers,
        json={"type": "question", "message": "Deadline?", "subject": "  ", "priority": "high"},
    )
    assert question.json()["subject"] == "General Inquiry"
    assert question.json()["priority"] == "high"

    app_client.post("/v1/tickets", headers=grace_headers, json={"type": "help_chat", "subject": "Chat", "message": "hi"})

    mine = app_client.get("/v1/tickets", headers=ada_headers).json()
    assert [ticket["id"] for ticket in mine] == [question.json()["id"], bug.json()["id"]]
    assert len(app_client.get("/v1/tickets", headers=ADMIN_HEADERS).json()) == 3


def test_ticket_priority_defaults_by_type(app_client, register):
    _, headers = register()

    bug = app_client.post("/v1/tickets", headers=headers, json={"type": "bug", "message": "Player freezes"})
    question = app_client.post("/v1/tickets", headers=headers, json={"type": "question", "message": "Deadline?"})
    chat = app_client.post(
        "/v1/tickets", headers=headers, json={"type": "help_chat", "message": "hi", "priority": "low"}
    )

    assert bug.json()["priority"] == "high"
    assert question.json()["priority"] == "medium"
    assert chat.json()["priority"] == "low"


def test_ticket_validation(app_client, register):
    _, headers = register()

    assert app_client.post("/v1/tickets", headers=headers, json={"type": "praise", "message": "x"}).status_code == 422
    assert app_client.post("/v1/tickets", headers=headers, json={"type": "bug", "message": ""}).status_code == 422


def test_ticket_status_is_admin_only(app_client, register):
    _, headers = register()
    ticket = app_client.post("/v1/tickets", headers=headers, json={"type": "question", "message": "?"}).json()
    url = f"/v1/tickets/{ticket['id']}/status"

    assert app_client.put(url, headers=headers, json={"status": "resolved"}).status_code == 403
    resolved = app_client.put(url, headers=ADMIN_HEADERS, json={"status": "resolved"})
    assert resolved.json()["status"] == "resolved"

    missing = app_client.put(f"/v1/tickets/{uuid.uuid4()}/status", headers=ADMIN_HEADERS, json={"status": "open"})
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "TICKET_NOT_FOUND"
