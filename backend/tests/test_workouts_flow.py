from fastapi.testclient import TestClient
from app.db import SessionLocal
from app.main import app
from app.models import WorkoutStatus
from app.repositories import workout_repo
from app.repositories.workout_repo import WorkoutRepository
from app.schemas.workout import ExerciseCreate
import uuid, pytest

PWD = "secret1"

def uniq(): return f"w_{uuid.uuid4().hex[:10]}"

def logged_in(username=None, name="Lifter"):
    c = TestClient(app)
    r = c.post("/auth/register", json={"username": username or uniq(), "password": PWD, "name": name})
    assert r.status_code == 200, r.text
    return c

def bench(*sets, name="Bench Press", **extra):
    return {"name": name, "sets": [{"reps": r, "weight": w} for r, w in sets], **extra}

def workout(title="Push Day", date="2025-03-10", exercises=None, **extra):
    return {"title": title, "date": date, "exercises": exercises or [], **extra}

def test_end_to_end_log_fetch_delete():
    c = logged_in("alice", name="Alice")
    me = c.get("/auth/me").json()["user"]
    assert me["username"] == "alice"

    r = c.post("/workouts", json=workout(exercises=[bench((10, 100), (8, 105), (6, 110))]))
    assert r.status_code == 201, r.text
    created = r.json()
    wid = created["id"]
    assert created["user_id"] == me["id"]
    assert created["status"] == "COMPLETED"
    assert created["date"].startswith("2025-03-10")

    r = c.get(f"/workouts/{wid}")
    assert r.status_code == 200
    ex = r.json()["exercises"]
    assert len(ex) == 1
    assert ex[0]["name"] == "Bench Press"
    assert ex[0]["order_index"] == 0
    assert [s["reps"] for s in ex[0]["sets"]] == [10, 8, 6]
    assert [s["weight"] for s in ex[0]["sets"]] == [100, 105, 110]

    assert [w["id"] for w in c.get("/workouts").json()] == [wid]

    r = c.delete(f"/workouts/{wid}")
    assert r.status_code == 200
    assert r.json() == {"success": True}
    assert c.get(f"/workouts/{wid}").status_code == 404
    assert c.get("/workouts").json() == []

def test_workouts_require_login():
    c = TestClient(app)
    assert c.get("/workouts").status_code == 401
    assert c.post("/workouts", json=workout()).status_code == 401

def test_other_users_workout_is_not_found():
    owner = logged_in()
    wid = owner.post("/workouts", json=workout(exercises=[bench((5, 80))])).json()["id"]

    intruder = logged_in()
    for call in (
        lambda: intruder.get(f"/workouts/{wid}"),
        lambda: intruder.put(f"/workouts/{wid}", json=workout(title="Mine now")),
        lambda: intruder.delete(f"/workouts/{wid}"),
        lambda: intruder.get(f"/workouts/{wid}/records"),
    ):
        r = call()
        assert r.status_code == 404
        assert r.json() == {"error": "Workout not found"}

    assert intruder.get("/workouts").json() == []
    assert owner.get(f"/workouts/{wid}").json()["title"] == "Push Day"

def test_create_validation_errors():
    c = logged_in()
    cases = [
        workout(title=""),
        {"date": "2025-03-10"},
        workout(date="not-a-date"),
        workout(exercises=[{"name": "Bench", "sets": []}]),
        workout(exercises=[{"name": "", "sets": [{"reps": 5, "weight": 50}]}]),
        workout(exercises=[{"name": "Bench", "sets": [{"reps": 0, "weight": 50}]}]),
        workout(exercises=[{"name": "Bench", "sets": [{"reps": 5, "weight": -1}]}]),
        workout(exercises=[{"name": "Bench", "sets": [{"reps": 5, "weight": 50, "rpe": 11}]}]),
        workout(exercises=[bench((5, 50), order_index=1), bench((5, 50), name="Row", order_index=1)]),
        workout(duration_minutes=0),
    ]
    for payload in cases:
        r = c.post("/workouts", json=payload)
        assert r.status_code == 400, payload
        body = r.json()
        assert body["error"] == "Validation failed"
        assert body["details"]

    assert c.get("/workouts").json() == []

def test_unweighted_sets_and_explicit_order():
    c = logged_in()
    payload = workout(exercises=[
        {"name": "Pull-ups", "sets": [{"reps": 8}, {"reps": 6, "rpe": 9}], "order_index": 1},
        bench((5, 100)),
    ])
    r = c.post("/workouts", json=payload)
    assert r.status_code == 201
    ex = r.json()["exercises"]
    assert [(e["name"], e["order_index"]) for e in ex] == [("Bench Press", 0), ("Pull-ups", 1)]
    assert ex[1]["sets"][0]["weight"] is None
    assert ex[1]["sets"][1]["rpe"] == 9

def test_put_replaces_all_exercises():
    c = logged_in()
    wid = c.post("/workouts", json=workout(exercises=[
        bench((10, 100)),
        bench((10, 60), name="Overhead Press"),
    ])).json()["id"]

    r = c.put(f"/workouts/{wid}", json=workout(
        title="Push Day (edited)",
        date="2025-03-11",
        notes="felt strong",
        exercises=[bench((5, 120), name="Incline Press")],
    ))
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["title"] == "Push Day (edited)"
    assert body["notes"] == "felt strong"
    assert body["date"].startswith("2025-03-11")
    assert [e["name"] for e in body["exercises"]] == ["Incline Press"]
    assert body["exercises"][0]["order_index"] == 0

    fetched = c.get(f"/workouts/{wid}").json()
    assert [e["name"] for e in fetched["exercises"]] == ["Incline Press"]
    assert c.get(f"/exercises?workout_id={wid}").json()[0]["name"] == "Incline Press"

def test_put_without_exercises_keeps_them():
    c = logged_in()
    wid = c.post("/workouts", json=workout(exercises=[bench((10, 100))])).json()["id"]
    payload = {"title": "Renamed", "date": "2025-03-10"}
    r = c.put(f"/workouts/{wid}", json=payload)
    assert r.status_code == 200
    assert r.json()["title"] == "Renamed"
    assert [e["name"] for e in r.json()["exercises"]] == ["Bench Press"]

    r = c.put(f"/workouts/{wid}", json={**payload, "exercises": []})
    assert r.status_code == 200
    assert r.json()["exercises"] == []

def test_put_validation_leaves_workout_untouched():
    c = logged_in()
    wid = c.post("/workouts", json=workout(exercises=[bench((10, 100))])).json()["id"]
    r = c.put(f"/workouts/{wid}", json=workout(title="", exercises=[bench((5, 1))]))
    assert r.status_code == 400
    body = c.get(f"/workouts/{wid}").json()
    assert body["title"] == "Push Day"
    assert body["exercises"][0]["sets"] == [{"reps": 10, "weight": 100.0, "rpe": None}]

def test_list_is_newest_first_and_status_is_kept():
    c = logged_in()
    c.post("/workouts", json=workout(title="Old", date="2025-01-01"))
    c.post("/workouts", json=workout(title="New", date="2025-02-01", status="DRAFT"))
    listed = c.get("/workouts").json()
    assert [w["title"] for w in listed] == ["New", "Old"]
    assert listed[0]["status"] == "DRAFT"

def test_calendar_groups_by_day():
    c = logged_in()
    c.post("/workouts", json=workout(title="A", date="2025-03-03", notes="n1"))
    c.post("/workouts", json=workout(title="B", date="2025-03-03T18:30:00Z"))
    c.post("/workouts", json=workout(title="C", date="2025-03-31"))
    c.post("/workouts", json=workout(title="April", date="2025-04-01"))

    r = c.get("/workouts/calendar?year=2025&month=3")
    assert r.status_code == 200
    body = r.json()
    assert body["year"] == 2025 and body["month"] == 3
    assert set(body["workouts"]) == {"2025-03-03", "2025-03-31"}
    assert [w["title"] for w in body["workouts"]["2025-03-03"]] == ["A", "B"]
    assert body["workouts"]["2025-03-03"][0]["notes"] == "n1"

    december = c.get("/workouts/calendar?year=2025&month=12").json()
    assert december["workouts"] == {}

    assert c.get("/workouts/calendar?year=2025&month=13").status_code == 400

def test_from_template():
    c = logged_in()
    r = c.post("/workouts/from-template", json={**workout(), "template_id": 999999})
    assert r.status_code == 404
    assert r.json() == {"error": "Template not found"}

    tid = c.post("/templates", json={
        "name": f"Tpl {uniq()}",
        "exercises": [{"name": "Bench Press", "target_rep_range": "8-12"}],
    }).json()["id"]
    r = c.post("/workouts/from-template", json={
        **workout(exercises=[bench((10, 100), (10, 100))]),
        "template_id": tid,
    })
    assert r.status_code == 201, r.text
    assert r.json()["template_id"] == tid
    assert len(r.json()["exercises"][0]["sets"]) == 2

def test_records_for_a_workout():
    c = logged_in()
    first = c.post("/workouts", json=workout(date="2025-03-01", exercises=[bench((5, 100))])).json()
    r = c.get(f"/workouts/{first['id']}/records")
    assert r.status_code == 200
    assert [(rec["record_type"], rec["value"]) for rec in r.json()] == [("first", 116.7)]

    second = c.post("/workouts", json=workout(date="2025-03-08", exercises=[bench((5, 110))])).json()
    records = {rec["record_type"]: rec for rec in c.get(f"/workouts/{second['id']}/records").json()}
    assert set(records) == {"e1rm", "5rm", "volume"}
    assert records["5rm"]["value"] == 110
    assert records["5rm"]["previous_value"] == 100
    assert records["e1rm"]["previous_value"] == 116.7

    # a weaker session afterwards sets nothing
    third = c.post("/workouts", json=workout(date="2025-03-15", exercises=[bench((5, 90))])).json()
    assert c.get(f"/workouts/{third['id']}/records").json() == []

    # the earlier workout is judged only against what came before it
    assert [rec["record_type"] for rec in c.get(f"/workouts/{first['id']}/records").json()] == ["first"]

def test_calendar_accepts_december_of_the_last_year():
    c = logged_in()
    r = c.get("/workouts/calendar?year=9998&month=12")
    assert r.status_code == 200
    assert r.json() == {"year": 9998, "month": 12, "workouts": {}}

    r = c.get("/workouts/calendar?year=9999&month=12")
    assert r.status_code == 400
    assert r.json()["error"] == "Validation failed"

def test_failed_replace_keeps_previous_exercises(monkeypatch):
    c = logged_in()
    created = c.post("/workouts", json=workout(title="Before", exercises=[bench((10, 100))])).json()

    def broken(exercises):
        raise RuntimeError("mid-update failure")

    monkeypatch.setattr(workout_repo, "build_exercises", broken)
    with SessionLocal() as db:
        repo = WorkoutRepository(db)
        w = repo.get_for_user(created["id"], created["user_id"])
        with pytest.raises(RuntimeError):
            repo.update(
                w,
                title="After",
                date=w.date,
                duration_minutes=None,
                notes=None,
                status=WorkoutStatus.COMPLETED,
                exercises=[ExerciseCreate(name="Squats", sets=[{"reps": 5, "weight": 140}])],
            )

    with SessionLocal() as db:
        w = WorkoutRepository(db).get_for_user(created["id"], created["user_id"])
        assert w.title == "Before"
        assert [e.name for e in w.exercises] == ["Bench Press"]
    assert c.get(f"/workouts/{created['id']}").json()["exercises"][0]["sets"][0]["weight"] == 100
