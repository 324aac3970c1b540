from fastapi.testclient import TestClient
from app.main import app
import uuid

def uniq(): return f"e_{uuid.uuid4().hex[:10]}"

def logged_in():
    c = TestClient(app)
    r = c.post("/auth/register", json={"username": uniq(), "password": "secret1", "name": "Ex"})
    assert r.status_code == 200
    return c

def log_workout(c, date, *exercises, title="Session"):
    r = c.post("/workouts", json={"title": title, "date": date, "exercises": list(exercises)})
    assert r.status_code == 201, r.text
    return r.json()

def ex(name, *sets):
    return {"name": name, "sets": [{"reps": r, "weight": w} for r, w in sets]}

def test_add_exercise_appends_after_last_slot():
    c = logged_in()
    w = log_workout(c, "2025-03-10", ex("Squats", (5, 140)))
    r = c.post("/exercises", json={"workout_id": w["id"], **ex("Leg Press", (12, 200))})
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["workout_id"] == w["id"]
    assert body["order_index"] == 1

    listed = c.get(f"/exercises?workout_id={w['id']}").json()
    assert [e["name"] for e in listed] == ["Squats", "Leg Press"]

def test_add_exercise_order_conflict_and_ownership():
    c = logged_in()
    w = log_workout(c, "2025-03-10", ex("Squats", (5, 140)))
    r = c.post("/exercises", json={"workout_id": w["id"], "order_index": 0, **ex("Lunges", (10, 40))})
    assert r.status_code == 409
    assert r.json() == {"error": "order_index already used in this workout"}

    other = logged_in()
    r = other.post("/exercises", json={"workout_id": w["id"], **ex("Lunges", (10, 40))})
    assert r.status_code == 404
    assert r.json() == {"error": "Workout not found"}

    r = c.post("/exercises", json={"workout_id": w["id"], "name": "Lunges", "sets": []})
    assert r.status_code == 400

def test_list_only_returns_own_exercises():
    mine = logged_in()
    log_workout(mine, "2025-03-10", ex("Deadlifts", (5, 180)))
    theirs = logged_in()
    log_workout(theirs, "2025-03-10", ex("Curls", (12, 15)))

    assert [e["name"] for e in mine.get("/exercises").json()] == ["Deadlifts"]
    assert [e["name"] for e in theirs.get("/exercises").json()] == ["Curls"]

def test_history_is_case_insensitive_and_newest_first():
    c = logged_in()
    log_workout(c, "2025-03-01", ex("Bench Press", (10, 100), (8, 105)), title="Week 1")
    log_workout(c, "2025-03-08", ex("bench press", (10, 102.5)), title="Week 2")
    log_workout(c, "2025-03-09", ex("Rows", (10, 80)))

    r = c.get("/exercises/history/BENCH PRESS")
    assert r.status_code == 200
    history = r.json()
    assert [h["date"] for h in history] == ["2025-03-08", "2025-03-01"]
    assert history[0]["workout_title"] == "Week 2"
    older = history[1]
    assert older["total_sets"] == 2
    assert older["total_reps"] == 18
    assert older["max_weight"] == 105
    assert older["total_volume"] == 1840

    assert c.get("/exercises/history/Overhead Press").json() == []
    assert c.get("/exercises/history/%20").status_code == 400

def test_history_records():
    c = logged_in()
    assert c.get("/exercises/history/Squats/records").json()["has_data"] is False

    log_workout(c, "2025-03-01", ex("Squats", (5, 140), (3, 150)))
    log_workout(c, "2025-03-08", ex("Squats", (5, 145), (10, 100)))

    r = c.get("/exercises/history/squats/records")
    assert r.status_code == 200
    rec = r.json()
    assert rec["has_data"] is True
    # 145 x 5 -> 169.2
    assert rec["e1rm"]["value"] == 169.2
    assert rec["e1rm"]["date"] == "2025-03-08"
    assert rec["rep_maxes"]["5"]["weight"] == 145
    assert rec["rep_maxes"]["3"]["weight"] == 150
    assert rec["rep_maxes"]["10"]["weight"] == 100
    assert rec["volume"]["value"] == 1000
