from fastapi.testclient import TestClient

from main import app

client = TestClient(app)


def _issue(difficulty="easy", option_count=4, length=5):
    r = client.post(
        "/quiz/questions",
        json={"difficulty": difficulty, "optionCount": option_count, "quizLength": length},
    )
    assert r.status_code == 200
    return r.json()["questions"]


def _wrong(q):
    return next(o for o in q["options"] if o != q["correctAnswer"])


def test_mark_correct():
    q = _issue()[0]
    r = client.post("/mark", json={"id": q["id"], "answer": q["correctAnswer"]})
    assert r.status_code == 200
    body = r.json()
    assert body["ok"] is True and body["correct"] is True and body["score"] == 1
    assert body["expected"] == q["correctAnswer"]


def test_mark_incorrect():
    q = _issue()[0]
    r = client.post("/mark", json={"id": q["id"], "answer": _wrong(q)})
    body = r.json()
    assert body["ok"] is True and body["correct"] is False and body["score"] == 0


def test_mark_equivalent_expression():
    q = _issue("hard")[0]
    r = client.post("/mark", json={"id": q["id"], "answer": f"({q['correctAnswer']}) * 1"})
    body = r.json()
    assert body["ok"] and body["correct"]
    assert body["feedback"].startswith("Correct")


def test_mark_invalid_chars():
    q = _issue()[0]
    r = client.post("/mark", json={"id": q["id"], "answer": "abc"})
    body = r.json()
    assert body["ok"] is False
    assert "allowed" in body["feedback"].lower()


def test_mark_division_by_zero():
    q = _issue()[0]
    r = client.post("/mark", json={"id": q["id"], "answer": "1/0"})
    body = r.json()
    assert body["ok"] is False
    assert "finite" in body["feedback"]


def test_mark_unknown_id():
    r = client.post("/mark", json={"id": "nope", "answer": "1"})
    body = r.json()
    assert body["ok"] is False and body["score"] == 0


def test_submit_quiz_scores_and_persists():
    qs = _issue("normal", 4, 5)
    items = [
        {"id": qs[0]["id"], "answer": qs[0]["correctAnswer"]},
        {"id": qs[1]["id"], "answer": qs[1]["correctAnswer"]},
        {"id": qs[2]["id"], "answer": _wrong(qs[2])},
        {"id": qs[3]["id"], "answer": None},
        {"id": qs[4]["id"], "answer": qs[4]["correctAnswer"]},
    ]
    r = client.post(
        "/quiz/submit", json={"difficulty": "normal", "items": items, "durationMs": 42000}
    )
    assert r.status_code == 200
    b = r.json()
    assert b["ok"] is True
    assert (b["total"], b["correct"], b["wrong"], b["skipped"]) == (5, 3, 1, 1)
    assert b["accuracy"] == 60
    assert b["pointsEarned"] == 3
    assert b["streak"] == 2
    assert b["durationMs"] == 42000
    assert len(b["results"]) == 5
    assert b["results"][3]["response"]["feedback"] == "skipped"
    first = b["results"][0]
    assert first["questionText"] == qs[0]["questionText"]
    assert first["correctAnswer"] == qs[0]["correctAnswer"]
    assert first["userAnswer"] == qs[0]["correctAnswer"]
    assert b["results"][3]["userAnswer"] is None
    assert isinstance(b["resultId"], int)

    r2 = client.get(f"/results/{b['resultId']}")
    assert r2.status_code == 200
    stored = r2.json()
    assert stored["id"] == b["resultId"]
    assert stored["difficulty"] == "normal"
    assert stored["pointsEarned"] == 3
    assert len(stored["items"]) == 5
    assert stored["items"][2]["questionText"] == qs[2]["questionText"]
    assert stored["items"][2]["correctAnswer"] == qs[2]["correctAnswer"]
    assert stored["items"][2]["userAnswer"] == _wrong(qs[2])
    assert "createdAt" in stored


def test_submit_measures_duration_when_missing():
    q = _issue()[0]
    r = client.post(
        "/quiz/submit",
        json={"difficulty": "easy", "items": [{"id": q["id"], "answer": q["correctAnswer"]}]},
    )
    b = r.json()
    assert isinstance(b["durationMs"], int) and b["durationMs"] >= 0
    assert b["pointsEarned"] == 1


def test_submit_unknown_question_not_counted():
    r = client.post(
        "/quiz/submit", json={"difficulty": "easy", "items": [{"id": "nope", "answer": "3"}]}
    )
    b = r.json()
    assert b["correct"] == 0 and b["total"] == 1
    assert b["results"][0]["response"]["ok"] is False


def test_submit_invalid_difficulty():
    r = client.post("/quiz/submit", json={"difficulty": "impossible", "items": []})
    assert r.status_code == 400


def test_submit_rejects_duplicate_ids():
    q = _issue()[0]
    item = {"id": q["id"], "answer": q["correctAnswer"]}
    r = client.post("/quiz/submit", json={"difficulty": "easy", "items": [item, item]})
    assert r.status_code == 400
    assert r.json()["detail"] == "Duplicate question id"


def test_submit_rejects_too_many_items():
    items = [{"id": f"q{i}", "answer": "1"} for i in range(16)]
    r = client.post("/quiz/submit", json={"difficulty": "easy", "items": items})
    assert r.status_code == 400
    assert r.json()["detail"] == "Too many answers"


def test_submit_rejects_difficulty_other_than_issued():
    qs = _issue("easy")
    items = [{"id": q["id"], "answer": q["correctAnswer"]} for q in qs]
    r = client.post("/quiz/submit", json={"difficulty": "genius", "items": items})
    assert r.status_code == 400
    assert r.json()["detail"] == "Difficulty does not match issued questions"
