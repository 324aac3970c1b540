"""
Unit tests for app/services/volume.py.
Workouts are plain namespaces, the functions only read attributes.
"""
import unittest
from datetime import date, datetime
from types import SimpleNamespace as NS

from app.services.volume import (
    UNCATEGORIZED,
    aggregate_volume_by_week,
    build_muscle_group_map,
    calculate_training_balance,
    calculate_volume_analytics,
    exercise_volume,
    get_balance_status,
    iso_week_key,
    muscles_for,
    volume_by_muscle,
    week_label,
    workout_volume,
)

TODAY = date(2025, 3, 12)  # Wednesday of ISO week 11

def ex(name, *sets):
    return NS(name=name, sets=[{"reps": r, "weight": w} for r, w in sets])

def wk(when, *exercises):
    return NS(date=when, exercises=list(exercises))

MUSCLES = build_muscle_group_map([
    NS(exercise_name="Bench Press", muscle_groups="Chest, Triceps"),
    NS(exercise_name="Rows", muscle_groups="Back"),
    NS(exercise_name="Squats", muscle_groups="Quads,Glutes"),
    NS(exercise_name="Plank", muscle_groups=None),
])


class TestExerciseVolume(unittest.TestCase):
    def test_weight_times_reps(self):
        self.assertEqual(exercise_volume([{"reps": 10, "weight": 100}, {"reps": 8, "weight": 105}]), 1840)

    def test_unweighted_sets_count_zero(self):
        self.assertEqual(exercise_volume([{"reps": 20}]), 0)
        self.assertEqual(exercise_volume([]), 0)
        self.assertEqual(exercise_volume("corrupted"), 0)

    def test_workout_volume_groups_by_exercise(self):
        v = workout_volume(wk(TODAY, ex("Bench Press", (10, 100)), ex("Bench Press", (5, 100)), ex("Rows", (10, 50))))
        self.assertEqual(v.total, 2000)
        self.assertEqual(v.by_exercise, {"Bench Press": 1500, "Rows": 500})


class TestMuscleMap(unittest.TestCase):
    def test_tags_are_split_and_names_lowercased(self):
        self.assertEqual(MUSCLES["bench press"], ["Chest", "Triceps"])
        self.assertEqual(MUSCLES["squats"], ["Quads", "Glutes"])
        self.assertNotIn("plank", MUSCLES)

    def test_lookup(self):
        self.assertEqual(muscles_for("  BENCH press ", MUSCLES), ["Chest", "Triceps"])
        self.assertEqual(muscles_for("Curls", MUSCLES), [UNCATEGORIZED])
        self.assertEqual(muscles_for("Rows", None), [UNCATEGORIZED])

    def test_volume_is_split_between_tagged_muscles(self):
        totals = volume_by_muscle([wk(TODAY, ex("Bench Press", (10, 100)), ex("Curls", (10, 20)))], MUSCLES)
        self.assertEqual(totals, {"Chest": 500, "Triceps": 500, UNCATEGORIZED: 200})


class TestWeeklyTrend(unittest.TestCase):
    def test_week_keys(self):
        self.assertEqual(iso_week_key(TODAY), "2025-W11")
        self.assertEqual(iso_week_key(datetime(2024, 12, 30, 9, 0)), "2025-W01")
        self.assertEqual(iso_week_key("2025-03-12T10:00:00"), "2025-W11")
        self.assertEqual(week_label("2025-W03"), "W03")

    def test_trailing_weeks_are_zero_filled(self):
        workouts = [
            wk(date(2025, 3, 10), ex("Bench Press", (10, 100))),
            wk(date(2025, 3, 11), ex("Rows", (10, 50))),
            wk(date(2025, 2, 20), ex("Squats", (5, 100))),
            wk(date(2024, 12, 1), ex("Squats", (5, 200))),  # outside the window
        ]
        trend = aggregate_volume_by_week(workouts, MUSCLES, today=TODAY)
        self.assertEqual(len(trend), 8)
        self.assertEqual(trend[0].week, "2025-W04")
        self.assertEqual([w.week for w in trend][-1], "2025-W11")
        self.assertEqual(trend[-1].label, "W11")
        self.assertEqual(trend[-1].total, 1500)
        self.assertEqual(trend[-1].by_muscle, {"Chest": 500, "Triceps": 500, "Back": 500})
        self.assertEqual(trend[4].week, "2025-W08")
        self.assertEqual(trend[4].by_muscle, {"Quads": 250, "Glutes": 250})
        self.assertEqual(sum(w.total for w in trend), 2000)
        self.assertEqual(trend[1].total, 0)
        self.assertEqual(trend[1].by_muscle, {})

    def test_custom_window(self):
        self.assertEqual(len(aggregate_volume_by_week([], weeks=4, today=TODAY)), 4)


class TestBalance(unittest.TestCase):
    def test_status_thresholds(self):
        self.assertEqual(get_balance_status(50), "balanced")
        self.assertEqual(get_balance_status(45), "balanced")
        self.assertEqual(get_balance_status(55), "balanced")
        self.assertEqual(get_balance_status(40), "slight")
        self.assertEqual(get_balance_status(65), "slight")
        self.assertEqual(get_balance_status(30), "imbalanced")
        self.assertEqual(get_balance_status(70), "imbalanced")

    def test_percentages_add_up_to_100(self):
        balance = calculate_training_balance({"Chest": 1, "Back": 2, "Quads": 0})
        pp = balance.push_pull
        self.assertEqual((pp.left, pp.right), ("push", "pull"))
        self.assertEqual((pp.left_pct, pp.right_pct), (33, 67))
        self.assertEqual(pp.left_pct + pp.right_pct, 100)
        self.assertEqual(pp.status, "imbalanced")

        half = calculate_training_balance({"chest": 1, "back": 1}).push_pull
        self.assertEqual((half.left_pct, half.right_pct), (50, 50))

    def test_upper_lower(self):
        ul = calculate_training_balance({"Chest": 300, "Biceps": 100, "Quads": 350, "Glutes": 250}).upper_lower
        self.assertEqual((ul.left_pct, ul.right_pct), (40, 60))
        self.assertEqual(ul.left_volume, 400)
        self.assertEqual(ul.right_volume, 600)
        self.assertEqual(ul.status, "slight")

    def test_nothing_logged(self):
        balance = calculate_training_balance({UNCATEGORIZED: 500, "Core": 100})
        self.assertIsNone(balance.push_pull)
        self.assertIsNone(balance.upper_lower)


class TestVolumeAnalytics(unittest.TestCase):
    def test_this_week_only_counts_current_iso_week(self):
        workouts = [
            wk(datetime(2025, 3, 10, 7, 30), ex("Bench Press", (10, 100.25))),
            wk(datetime(2025, 3, 12, 18, 0), ex("Rows", (10, 50))),
            wk(datetime(2025, 3, 9, 12, 0), ex("Squats", (5, 100))),  # previous Sunday
        ]
        result = calculate_volume_analytics(workouts, MUSCLES, today=TODAY)
        self.assertEqual(result.this_week.workout_count, 2)
        self.assertEqual(result.this_week.total, 1503)
        self.assertEqual(result.this_week.by_muscle, {"Chest": 501, "Triceps": 501, "Back": 500})
        self.assertEqual(len(result.weekly_trend), 8)
        self.assertEqual(result.weekly_trend[-2].total, 500)
        self.assertEqual(result.balance.push_pull.left_pct, 67)


if __name__ == "__main__":
    unittest.main()
