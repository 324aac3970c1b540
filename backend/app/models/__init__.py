from app.models.user import User
from app.models.auth_session import AuthSession
from app.models.workout import Workout, WorkoutStatus
from app.models.exercise import Exercise
from app.models.template import SessionTemplate, TemplateExercise
from app.models.weight import WeightEntry, WeightGoal, GoalType

__all__ = [
    "User",
    "AuthSession",
    "Workout",
    "WorkoutStatus",
    "Exercise",
    "SessionTemplate",
    "TemplateExercise",
    "WeightEntry",
    "WeightGoal",
    "GoalType",
]
