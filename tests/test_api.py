from __future__ import annotations

import pytest

WORKOUT = {"name": "Evening run", "type": "cardio", "start_time": "2025-06-01T11:15:00Z"}
MEAL = {
    "type": "breakfast",
    "meal_time": "2025-06-01T08:00:00Z",
    "foods": [
        {"name": "Oats", "quantity_value": 80, "quantity_unit": "g", "calories": 300, "protein_g": 10, "carbs_g": 54, "fat_g": 5},
        {"name": "Milk", "quantity_value": 200, "quantity_unit": "ml", "calories": 100, "protein_g": 7, "carbs_g": 10, "fat_g": 4},
    ],
}
GOAL = {
    "title": "Run 100 minutes",
    "description": "Time on feet this quarter",
    "category": "endurance",
    "status": "active",
    "target_value": 100,
    "unit": "minutes",
    "start_date": "2025-05-01T00:00:00Z",
    "target_date": "2025-07-01T00:00:00Z",
    "milestones": [{"title": "Halfway", "target_value": 50, "unit": "minutes"}],
}


@pytest.mark.asyncio
async def test_health(client) -> None:
    r = await client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_missing_user_header(client) -> None:
    r = await client.get("/users/me", headers={"X-User-Id": ""})
    assert r.status_code == 401
    assert r.json() == {"success": False, "message": "Missing X-User-Id header"}


@pytest.mark.asyncio
async def test_validation_envelope(client) -> None:
    r = await client.post("/weight/", json={"weight_value": 80, "body_fat_pct": 80})
    assert r.status_code == 400
    body = r.json()
    assert body["success"] is False
    assert body["message"] == "Validation errors"
    assert [e["field"] for e in body["errors"]] == ["body_fat_pct"]


@pytest.mark.asyncio
async def test_not_found_envelope(client) -> None:
    r = await client.get("/goals/999")
    assert r.status_code == 404
    assert r.json() == {"success": False, "message": "Goal not found"}


@pytest.mark.asyncio
async def test_profile_then_weight_has_bmi(client) -> None:
    r = await client.put(
        "/users/me",
        json={"height_value": 180, "sex": "female", "date_of_birth": "1995-03-10", "activity_level": "light"},
    )
    assert r.status_code == 200
    assert r.json()["profile_completion"] > 0

    r = await client.post("/weight/", json={"weight_value": 90, "measured_at": "2025-06-01T07:00:00Z"})
    assert r.status_code == 201
    body = r.json()
    assert body["bmi"] == 27.8
    assert body["bmi_category"] == "overweight"

    r = await client.get("/weight/entry/latest")
    assert r.json()["comparison"] is None

    r = await client.get("/users/me/stats")
    assert r.json()["weight_entries"] == 1


@pytest.mark.asyncio
async def test_weight_pagination(client) -> None:
    entries = [{"weight_value": 80 - i, "measured_at": f"2025-05-{10 + i:02d}T07:00:00Z"} for i in range(5)]
    r = await client.post("/weight/bulk-import", json={"entries": entries})
    assert r.status_code == 201
    assert len(r.json()) == 5

    r = await client.get("/weight/", params={"page": 2, "limit": 2})
    body = r.json()
    assert body["pagination"] == {"page": 2, "limit": 2, "total": 5, "pages": 3}
    assert [e["weight_value"] for e in body["items"]] == [78, 79]


@pytest.mark.asyncio
async def test_workout_start_complete(client) -> None:
    r = await client.post("/workouts/", json=WORKOUT)
    assert r.status_code == 201
    wid = r.json()["id"]

    r = await client.patch(f"/workouts/{wid}/start")
    assert r.json()["completion_status"] == "in-progress"
    assert r.json()["start_time"].startswith("2025-06-01T12:00:00")

    r = await client.patch(f"/workouts/{wid}/complete", json={"mood_after": 9})
    body = r.json()
    assert body["completion_status"] == "completed"
    assert body["mood_after"] == 9
    # started and completed at the same instant
    assert body["calories_burned"] == 0

    r = await client.patch(f"/workouts/{wid}/start")
    assert r.status_code == 409
    assert r.json()["success"] is False


@pytest.mark.asyncio
async def test_workout_exercise_routes(client) -> None:
    r = await client.post(
        "/workouts/",
        json={**WORKOUT, "type": "strength", "exercises": [{"name": "Squat", "sets": [{"set_number": 1, "weight_value": 100, "reps": 5}]}]},
    )
    wid = r.json()["id"]
    assert r.json()["total_volume"] == 500

    r = await client.post(f"/workouts/{wid}/exercises", json={"name": "Lunge", "sets": [{"set_number": 1, "weight_value": 20, "reps": 10}]})
    assert r.status_code == 201
    body = r.json()
    assert body["total_exercises"] == 2
    assert body["total_volume"] == 700

    ex_id = body["exercises"][0]["id"]
    r = await client.delete(f"/workouts/{wid}/exercises/{ex_id}")
    assert [e["name"] for e in r.json()["exercises"]] == ["Lunge"]

    r = await client.delete(f"/workouts/{wid}/exercises/999")
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_meal_daily_and_water(client) -> None:
    r = await client.post("/nutrition/meals", json=MEAL)
    assert r.status_code == 201
    meal = r.json()
    assert meal["total_calories"] == 400
    assert meal["macro_ratio"] == {"protein": 17, "carbohydrates": 64, "fat": 20}

    r = await client.put("/nutrition/daily/2025-06-01/goals", json={"goals": {"calories": 2000, "protein": 85}, "water_goal_ml": 2000})
    assert r.status_code == 200
    assert r.json()["goal_progress"]["calories"] == 20
    assert r.json()["goal_progress"]["protein"] == 20

    r = await client.post("/nutrition/daily/2025-06-01/water", json={"amount": 500})
    assert r.json() == {"total_water": 500, "unit": "ml"}

    r = await client.get("/nutrition/daily/2025-06-01")
    body = r.json()
    assert [m["id"] for m in body["meals"]] == [meal["id"]]
    assert body["goal_progress"]["water"] == 25

    r = await client.get("/nutrition/meals", params={"search": "oats"})
    assert r.json()["pagination"]["total"] == 1

    r = await client.delete(f"/nutrition/meals/{meal['id']}")
    assert r.json() == {"success": True, "message": "Meal deleted"}


@pytest.mark.asyncio
async def test_goal_progress_and_insights(client) -> None:
    r = await client.post("/goals/", json=GOAL)
    assert r.status_code == 201
    gid = r.json()["id"]
    assert r.json()["next_milestone"]["title"] == "Halfway"

    r = await client.patch(f"/goals/{gid}/progress", json={"current_value": 55, "notes": "long weekend"})
    body = r.json()
    assert body["progress_percentage"] == 55
    assert body["milestones"][0]["is_achieved"] is True
    assert body["next_milestone"] is None
    assert body["recent_progress"][0]["source"] == "manual"

    r = await client.get(f"/goals/{gid}/insights")
    body = r.json()
    # day 32 of 61
    assert body["time_progress_percentage"] == pytest.approx(32 / 61 * 100)
    assert body["health_status"] == "on-track"

    r = await client.patch(f"/goals/{gid}/status", json={"status": "draft"})
    assert r.status_code == 409

    r = await client.get("/goals/", params={"status": "active"})
    assert r.json()["pagination"]["total"] == 1

    r = await client.delete(f"/goals/{gid}")
    assert r.json()["success"] is True
    assert (await client.get(f"/goals/{gid}")).status_code == 404


@pytest.mark.asyncio
async def test_goal_put_without_status(client) -> None:
    gid = (await client.post("/goals/", json={**GOAL, "priority": "high"})).json()["id"]
    edit = {k: v for k, v in GOAL.items() if k not in ("status", "milestones")}

    r = await client.put(f"/goals/{gid}", json={**edit, "title": "Run 120 minutes", "target_value": 120})
    assert r.status_code == 200
    body = r.json()
    assert body["title"] == "Run 120 minutes"
    assert body["status"] == "active"
    assert body["priority"] == "high"
    assert [m["title"] for m in body["milestones"]] == ["Halfway"]


@pytest.mark.asyncio
async def test_completed_workout_calories_on_create(client) -> None:
    await client.post("/weight/", json={"weight_value": 80, "measured_at": "2025-05-31T07:00:00Z"})
    r = await client.post(
        "/workouts/", json={"name": "Run", "type": "cardio", "actual_duration_min": 45, "completion_status": "completed"}
    )
    assert r.status_code == 201
    assert r.json()["calories_burned"] == 411
