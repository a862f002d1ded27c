import uuid

from conftest import ADMIN_HEADERS


def test_progress_upsert_is_last_write_wins(app_client, register, create_course):
    course = create_course()
    user, headers = register()
    url = f"/v1/progress/{user['id']}/{course['id']}"

    first = app_client.put(url, headers=headers, json={"completed_lessons": ["l1", "l2"]})
    assert first.status_code == 200, first.text
    assert first.json()["accepted"] is True
    assert first.json()["server_time"]

    app_client.put(url, headers=headers, json={"completed_lessons": ["l2", "l3", "l2", " "]})

    assert app_client.get(f"/v1/progress/{user['id']}", headers=headers).json() == {course["id"]: ["l2", "l3"]}


def test_clearing_progress_keeps_an_empty_entry(app_client, register, create_course):
    course = create_course()
    user, headers = register()
    url = f"/v1/progress/{user['id']}/{course['id']}"
    app_client.put(url, headers=headers, json={"completed_lessons": ["l1"]})

    app_client.put(url, headers=headers, json={"completed_lessons": []})

    assert app_client.get(f"/v1/progress/{user['id']}", headers=headers).json() == {course["id"]: []}


def test_global_progress_scoped_by_viewer(app_client, register, create_course):
    course = create_course()
    ada, ada_headers = register(name="Ada")
    grace, grace_headers = register(name="Grace")
    app_client.put(f"/v1/progress/{ada['id']}/{course['id']}", headers=ada_headers, json={"completed_lessons": ["l1"]})
    app_client.put(
        f"/v1/progress/{grace['id']}/{course['id']}", headers=grace_headers, json={"completed_lessons": ["l4"]}
    )

    assert app_client.get("/v1/progress", headers=ada_headers).json() == {ada["id"]: {course["id"]: ["l1"]}}
    assert app_client.get("/v1/progress", headers=ADMIN_HEADERS).json() == {
        ada["id"]: {course["id"]: ["l1"]},
        grace["id"]: {course["id"]: ["l4"]},
    }


def test_students_cannot_touch_other_students_progress(app_client, register, create_course):
    course = create_course()
    ada, _ = register(name="Ada")
    _, grace_headers = register(name="Grace")

    write = app_client.put(
        f"/v1/progress/{ada['id']}/{course['id']}", headers=grace_headers, json={"completed_lessons": ["l1"]}
    )
    read = app_client.get(f"/v1/progress/{ada['id']}", headers=grace_headers)

    assert write.status_code == read.status_code == 403


def test_progress_needs_an_existing_course(app_client, register):
    user, headers = register()

    resp = app_client.put(f"/v1/progress/{user['id']}/{uuid.uuid4()}", headers=headers, json={"completed_lessons": []})

    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "COURSE_NOT_FOUND"


def test_progress_rejects_lessons_outside_the_course(app_client, register, create_course):
    course = create_course(lesson_counts=(3, 2))
    user, headers = register()
    url = f"/v1/progress/{user['id']}/{course['id']}"
    app_client.put(url, headers=headers, json={"completed_lessons": ["l1"]})

    resp = app_client.put(url, headers=headers, json={"completed_lessons": ["l1", "bogus-1", "bogus-2"]})

    assert resp.status_code == 422
    assert resp.json()["error"]["code"] == "UNKNOWN_LESSON_ID"
    assert app_client.get(f"/v1/progress/{user['id']}", headers=headers).json() == {course["id"]: ["l1"]}
