"""
Seed the built-in session templates (Push / Pull / Legs / Upper / Lower).

Idempotent: templates that already exist by name are left untouched.
Run from backend/:  python seed_templates.py
"""
from app.db import SessionLocal
from app.repositories.template_repo import TemplateRepository
from app.schemas.template import TemplateExerciseIn

# (name, sets, reps, rep range, rest seconds, muscle groups)
DEFAULT_TEMPLATES = [
    {
        "name": "Push",
        "description": "Pushing movements targeting chest, shoulders, and triceps",
        "exercises": [
            ("Bench Press", 4, 8, "6-10", 120, "Chest, Triceps"),
            ("Overhead Press", 4, 8, "6-10", 90, "Shoulders, Triceps"),
            ("Incline Dumbbell Press", 3, 10, "8-12", 90, "Chest, Shoulders"),
            ("Lateral Raises", 3, 12, "10-15", 60, "Shoulders"),
            ("Tricep Dips", 3, 12, "8-12", 60, "Triceps, Chest"),
            ("Tricep Pushdowns", 3, 12, "10-15", 60, "Triceps"),
            ("Push-ups", 3, 15, "12-20", 45, "Chest"),
        ],
    },
    {
        "name": "Pull",
        "description": "Pulling movements targeting back, biceps, and rear delts",
        "exercises": [
            ("Pull-ups", 4, 8, "6-10", 90, "Back, Biceps"),
            ("Lat Pulldown", 4, 10, "8-12", 90, "Back"),
            ("Barbell Rows", 4, 10, "8-12", 90, "Back"),
            ("Cable Rows", 3, 12, "10-15", 60, "Back"),
            ("Bicep Curls", 3, 12, "10-15", 60, "Biceps"),
            ("Hammer Curls", 3, 12, "10-15", 60, "Biceps"),
            ("Face Pulls", 3, 15, "12-20", 45, "Shoulders, Back"),
        ],
    },
    {
        "name": "Legs",
        "description": "Lower body movements targeting quads, hamstrings, glutes, and calves",
        "exercises": [
            ("Squats", 4, 8, "6-10", 120, "Quads, Glutes"),
            ("Romanian Deadlifts", 4, 10, "8-12", 90, "Hamstrings, Glutes"),
            ("Bulgarian Split Squats", 3, 12, "10-15", 90, "Quads, Glutes"),
            ("Leg Press", 3, 15, "12-20", 90, "Quads"),
            ("Leg Curls", 3, 12, "10-15", 60, "Hamstrings"),
            ("Calf Raises", 4, 15, "12-20", 45, "Calves"),
            ("Walking Lunges", 3, 20, "16-24", 60, "Quads, Glutes"),
        ],
    },
    {
        "name": "Upper",
        "description": "Upper body focused workout combining push and pull movements",
        "exercises": [
            ("Bench Press", 4, 8, "6-10", 120, "Chest, Triceps"),
            ("Pull-ups", 4, 8, "6-10", 90, "Back, Biceps"),
            ("Overhead Press", 3, 10, "8-12", 90, "Shoulders, Triceps"),
            ("Barbell Rows", 3, 10, "8-12", 90, "Back"),
            ("Dumbbell Flyes", 3, 12, "10-15", 60, "Chest"),
            ("Bicep Curls", 3, 12, "10-15", 60, "Biceps"),
            ("Tricep Extensions", 3, 12, "10-15", 60, "Triceps"),
        ],
    },
    {
        "name": "Lower",
        "description": "Lower body and core focused workout",
        "exercises": [
            ("Deadlifts", 4, 6, "4-8", 150, "Hamstrings, Glutes, Back"),
            ("Front Squats", 4, 8, "6-10", 120, "Quads"),
            ("Hip Thrusts", 3, 12, "10-15", 90, "Glutes"),
            ("Single Leg Deadlifts", 3, 10, "8-12", 60, "Hamstrings, Glutes"),
            ("Leg Extensions", 3, 15, "12-20", 60, "Quads"),
            ("Plank", 3, 60, None, 60, "Core"),
            ("Russian Twists", 3, 20, "15-25", 45, "Core"),
        ],
    },
]

def template_exercises(rows):
    "Turn the compact tuples above into validated template exercise payloads."
    return [
        TemplateExerciseIn(
            name=name,
            default_sets=sets,
            default_reps=reps,
            target_rep_range=rep_range,
            rest_seconds=rest,
            muscle_groups=muscles,
            order_index=i,
            notes="Hold for 60 seconds" if name == "Plank" else None,
        )
        for i, (name, sets, reps, rep_range, rest, muscles) in enumerate(rows)
    ]

def seed(db) -> list[str]:
    """Create the missing default templates; returns the names created."""
    repo = TemplateRepository(db)
    created = []
    for tpl in DEFAULT_TEMPLATES:
        if repo.get_by_name(tpl["name"]) is not None:
            print(f"[seed] template {tpl['name']!r} already exists, skipping")
            continue
        repo.create(
            name=tpl["name"],
            description=tpl["description"],
            is_default=True,
            exercises=template_exercises(tpl["exercises"]),
        )
        print(f"[seed] created template {tpl['name']!r} with {len(tpl['exercises'])} exercises")
        created.append(tpl["name"])
    return created

def main():
    with SessionLocal() as db:
        created = seed(db)
    print(f"Seeded {len(created)} default templates")

if __name__ == "__main__":
    main()
