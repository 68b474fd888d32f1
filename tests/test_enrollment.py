from routes.auth import create_access_token


def course_ids(response):
    return [c["id"] for c in response.json()]


def test_restricted_course_hidden_until_enrolled(client, course_doc, restricted_course, student, teacher):
    user, headers = student
    _, teacher_headers = teacher

    assert course_ids(client.get("/api/courses/", headers=headers)) == [course_doc["id"]]
    assert client.get(f"/api/courses/{restricted_course['id']}", headers=headers).status_code == 403

    enrolled = client.post(
        f"/api/admin/courses/{restricted_course['id']}/students",
        json={"studentIds": [user["id"]]},
        headers=teacher_headers,
    )

    assert enrolled.status_code == 200
    assert [s["id"] for s in enrolled.json()] == [user["id"]]
    assert course_ids(client.get("/api/courses/", headers=headers)) == [course_doc["id"], restricted_course["id"]]
    assert client.get(f"/api/courses/{restricted_course['id']}", headers=headers).status_code == 200


def test_group_member_sees_group_course(client, restricted_course, student):
    user, headers = student
    user["group"] = "haitech"

    assert client.get(f"/api/courses/{restricted_course['id']}", headers=headers).status_code == 200


def test_anonymous_visitors_only_see_open_courses(client, course_doc, restricted_course):
    assert course_ids(client.get("/api/courses/")) == [course_doc["id"]]
    assert client.get(f"/api/courses/{restricted_course['id']}").status_code == 403


def test_invalid_token_is_treated_as_anonymous(client, course_doc, restricted_course):
    headers = {"Authorization": "Bearer garbage"}

    assert course_ids(client.get("/api/courses/", headers=headers)) == [course_doc["id"]]


def test_unenroll_student(client, restricted_course, student, teacher):
    user, headers = student
    _, teacher_headers = teacher
    restricted_course["enrolledStudents"].append(user["id"])

    response = client.delete(f"/api/admin/courses/{restricted_course['id']}/students/{user['id']}", headers=teacher_headers)

    assert response.json() == []
    assert restricted_course["enrolledStudents"] == []
    assert client.get(f"/api/courses/{restricted_course['id']}", headers=headers).status_code == 403


def test_enrolling_twice_keeps_one_entry(client, restricted_course, student, teacher):
    user, _ = student
    _, teacher_headers = teacher
    url = f"/api/admin/courses/{restricted_course['id']}/students"

    client.post(url, json={"studentIds": [user["id"]]}, headers=teacher_headers)
    client.post(url, json={"studentIds": [user["id"], user["id"]]}, headers=teacher_headers)

    assert restricted_course["enrolledStudents"] == [user["id"]]
    assert [s["id"] for s in client.get(url, headers=teacher_headers).json()] == [user["id"]]


def test_enrolling_unknown_or_inactive_students_fails(client, restricted_course, student, teacher):
    user, _ = student
    _, teacher_headers = teacher
    url = f"/api/admin/courses/{restricted_course['id']}/students"

    assert client.post(url, json={"studentIds": ["nobody"]}, headers=teacher_headers).status_code == 400
    user["isActive"] = False
    assert client.post(url, json={"studentIds": [user["id"]]}, headers=teacher_headers).status_code == 400
    assert client.post(url, json={"studentIds": []}, headers=teacher_headers).status_code == 422
    assert restricted_course["enrolledStudents"] == []


def test_only_instructor_or_admin_manages_enrollment(client, db, restricted_course, student, admin):
    user, headers = student
    _, admin_headers = admin
    url = f"/api/admin/courses/{restricted_course['id']}/students"

    assert client.post(url, json={"studentIds": [user["id"]]}, headers=headers).status_code == 403

    other_teacher = {"id": "t-other", "email": "other@example.com", "role": "teacher", "isActive": True}
    db.users.docs.append(other_teacher)
    other_headers = {"Authorization": f"Bearer {create_access_token('t-other', 'teacher')}"}
    assert client.get(url, headers=other_headers).status_code == 403

    assert client.post(url, json={"studentIds": [user["id"]]}, headers=admin_headers).status_code == 200


def test_teacher_lists_own_courses(client, course_doc, restricted_course, teacher):
    _, headers = teacher

    assert course_ids(client.get("/api/admin/courses/my", headers=headers)) == [restricted_course["id"]]


def test_course_groups_are_validated(client, teacher):
    _, headers = teacher
    payload = {"title": "Bio lab", "description": "Sequencing", "category": "network", "level": "beginner", "groups": ["chess"]}

    assert client.post("/api/courses/", json=payload, headers=headers).status_code == 400
