def submission_payload(lesson, index=0):
    return {
        "lesson": lesson["id"],
        "exerciseIndex": index,
        "fileUrl": "/uploads/unit.zip",
        "fileName": "unit.zip",
        "fileSize": 2048,
    }


def test_student_submits_exercise(client, db, lesson_doc, student):
    user, headers = student

    response = client.post("/api/submissions/", json=submission_payload(lesson_doc), headers=headers)

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "pending"
    assert body["user"] == user["id"]
    assert body["course"] == lesson_doc["course"]
    assert len(db.submissions.docs) == 1


def test_submission_for_missing_exercise_is_rejected(client, lesson_doc, student):
    _, headers = student

    response = client.post("/api/submissions/", json=submission_payload(lesson_doc, index=3), headers=headers)

    assert response.status_code == 400


def test_submission_then_lesson_completion(client, lesson_doc, student):
    _, headers = student
    client.post("/api/submissions/", json=submission_payload(lesson_doc, 0), headers=headers)
    client.post("/api/submissions/", json=submission_payload(lesson_doc, 2), headers=headers)

    response = client.post(f"/api/lessons/{lesson_doc['id']}/complete", headers=headers)

    assert response.status_code == 200


def test_teacher_reviews_submission(client, db, lesson_doc, student, teacher):
    _, student_headers = student
    reviewer, teacher_headers = teacher
    submission_id = client.post("/api/submissions/", json=submission_payload(lesson_doc), headers=student_headers).json()["id"]

    response = client.put(
        f"/api/submissions/{submission_id}/review",
        json={"grade": 5, "feedback": "  Clean unit file  ", "status": "approved"},
        headers=teacher_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "approved"
    assert body["grade"] == 5
    assert body["feedback"] == "Clean unit file"
    assert body["reviewedBy"] == reviewer["id"]


def test_review_grade_out_of_range(client, teacher):
    _, headers = teacher

    assert client.put("/api/submissions/x/review", json={"grade": 6}, headers=headers).status_code == 422


def test_review_unknown_submission(client, teacher):
    _, headers = teacher

    assert client.put("/api/submissions/x/review", json={"grade": 4}, headers=headers).status_code == 404


def test_student_cannot_list_review_queue(client, student):
    _, headers = student

    assert client.get("/api/submissions/review", headers=headers).status_code == 403


def test_review_queue_filters_by_status(client, db, lesson_doc, student, teacher):
    _, student_headers = student
    _, teacher_headers = teacher
    first = client.post("/api/submissions/", json=submission_payload(lesson_doc, 0), headers=student_headers).json()
    client.post("/api/submissions/", json=submission_payload(lesson_doc, 2), headers=student_headers)
    client.put(f"/api/submissions/{first['id']}/review", json={"status": "approved"}, headers=teacher_headers)

    pending = client.get("/api/submissions/review", params={"status": "pending"}, headers=teacher_headers).json()

    assert [s["exerciseIndex"] for s in pending] == [2]
    assert client.get("/api/submissions/review", params={"status": "lost"}, headers=teacher_headers).status_code == 400
