"""initial schema

Revision ID: 0001_initial
Revises: 
Create Date: 2026-10-17
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        *_timestamps(),
        sa.Column("external_id", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=True),
        sa.Column("height_value", sa.Float(), nullable=True),
        sa.Column("height_unit", sa.String(length=8), nullable=False, server_default="cm"),
        sa.Column("weight_kg", sa.Float(), nullable=True),
        sa.Column("sex", sa.String(length=16), nullable=True),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        sa.Column("activity_level", sa.String(length=16), nullable=True),
        sa.Column("fitness_goals_json", sa.Text(), nullable=True),
        sa.Column("preferred_weight_unit", sa.String(length=8), nullable=False, server_default="kg"),
    )
    op.create_index("ix_users_external_id", "users", ["external_id"], unique=True)

    op.create_table(
        "weight_entries",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        *_timestamps(),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("weight_value", sa.Float(), nullable=False),
        sa.Column("weight_unit", sa.String(length=8), nullable=False, server_default="kg"),
        sa.Column("weight_kg", sa.Float(), nullable=False),
        sa.Column("body_fat_pct", sa.Float(), nullable=True),
        sa.Column("body_fat_method", sa.String(length=32), nullable=True),
        sa.Column("muscle_mass_value", sa.Float(), nullable=True),
        sa.Column("muscle_mass_unit", sa.String(length=8), nullable=False, server_default="kg"),
        sa.Column("muscle_mass_kg", sa.Float(), nullable=True),
        sa.Column("bone_mass_value", sa.Float(), nullable=True),
        sa.Column("bone_mass_unit", sa.String(length=8), nullable=False, server_default="kg"),
        sa.Column("water_pct", sa.Float(), nullable=True),
        sa.Column("visceral_fat_rating", sa.Integer(), nullable=True),
        sa.Column("metabolic_age", sa.Integer(), nullable=True),
        sa.Column("measurements_json", sa.Text(), nullable=True),
        sa.Column("measured_at", sa.DateTime(), nullable=False),
        sa.Column("time_of_day", sa.String(length=32), nullable=False, server_default="morning"),
        sa.Column("mood", sa.Integer(), nullable=True),
        sa.Column("energy_level", sa.Integer(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("tags_json", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
    )
    op.create_index("ix_weight_entries_user_id", "weight_entries", ["user_id"], unique=False)
    op.create_index("ix_weight_entries_measured_at", "weight_entries", ["measured_at"], unique=False)
    op.create_index("ix_weight_entries_user_measured", "weight_entries", ["user_id", "measured_at"], unique=False)

    op.create_table(
        "workouts",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        *_timestamps(),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=True),
        sa.Column("type", sa.String(length=32), nullable=False, server_default="other"),
        sa.Column("intensity", sa.String(length=16), nullable=False, server_default="moderate"),
        sa.Column("planned_duration_min", sa.Integer(), nullable=True),
        sa.Column("actual_duration_min", sa.Integer(), nullable=True),
        sa.Column("start_time", sa.DateTime(), nullable=True),
        sa.Column("end_time", sa.DateTime(), nullable=True),
        sa.Column("calories_burned", sa.Integer(), nullable=True),
        sa.Column("location", sa.String(length=16), nullable=False, server_default="gym"),
        sa.Column("equipment_json", sa.Text(), nullable=True),
        sa.Column("mood_before", sa.Integer(), nullable=True),
        sa.Column("mood_after", sa.Integer(), nullable=True),
        sa.Column("energy_before", sa.Integer(), nullable=True),
        sa.Column("energy_after", sa.Integer(), nullable=True),
        sa.Column("body_weight_value", sa.Float(), nullable=True),
        sa.Column("body_weight_unit", sa.String(length=8), nullable=False, server_default="kg"),
        sa.Column("tags_json", sa.Text(), nullable=True),
        sa.Column("is_template", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("template_name", sa.String(length=100), nullable=True),
        sa.Column("completion_status", sa.String(length=16), nullable=False, server_default="planned"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
    )
    op.create_index("ix_workouts_user_id", "workouts", ["user_id"], unique=False)
    op.create_index("ix_workouts_user_created", "workouts", ["user_id", "created_at"], unique=False)
    op.create_index("ix_workouts_user_type", "workouts", ["user_id", "type"], unique=False)
    op.create_index("ix_workouts_user_status", "workouts", ["user_id", "completion_status"], unique=False)

    op.create_table(
        "exercises",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("workout_id", sa.Integer(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("category", sa.String(length=32), nullable=False, server_default="other"),
        sa.Column("muscle_groups_json", sa.Text(), nullable=True),
        sa.Column("total_volume", sa.Float(), nullable=False, server_default="0"),
        sa.Column("personal_record", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("difficulty", sa.Integer(), nullable=False, server_default="5"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["workout_id"], ["workouts.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_exercises_workout_id", "exercises", ["workout_id"], unique=False)

    op.create_table(
        "workout_sets",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("exercise_id", sa.Integer(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("set_number", sa.Integer(), nullable=False),
        sa.Column("reps", sa.Integer(), nullable=True),
        sa.Column("weight_value", sa.Float(), nullable=True),
        sa.Column("weight_unit", sa.String(length=16), nullable=False, server_default="kg"),
        sa.Column("duration_value", sa.Float(), nullable=True),
        sa.Column("duration_unit", sa.String(length=16), nullable=False, server_default="seconds"),
        sa.Column("distance_value", sa.Float(), nullable=True),
        sa.Column("distance_unit", sa.String(length=16), nullable=False, server_default="km"),
        sa.Column("rest_seconds", sa.Integer(), nullable=False, server_default="60"),
        sa.Column("completed", sa.Boolean(), nullable=False, server_default=sa.text("1")),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["exercise_id"], ["exercises.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_workout_sets_exercise_id", "workout_sets", ["exercise_id"], unique=False)

    op.create_table(
        "daily_nutrition",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        *_timestamps(),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("water_total_ml", sa.Float(), nullable=False, server_default="0"),
        sa.Column("water_goal_ml", sa.Float(), nullable=True),
        sa.Column("calories_goal", sa.Float(), nullable=True),
        sa.Column("protein_goal", sa.Float(), nullable=True),
        sa.Column("carbs_goal", sa.Float(), nullable=True),
        sa.Column("fat_goal", sa.Float(), nullable=True),
        sa.Column("fiber_goal", sa.Float(), nullable=True),
        sa.Column("supplements_json", sa.Text(), nullable=True),
        sa.Column("body_weight_value", sa.Float(), nullable=True),
        sa.Column("body_weight_unit", sa.String(length=8), nullable=False, server_default="kg"),
        sa.Column("symptoms_json", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.UniqueConstraint("user_id", "date", name="uq_daily_nutrition_user_date"),
    )
    op.create_index("ix_daily_nutrition_user_id", "daily_nutrition", ["user_id"], unique=False)
    op.create_index("ix_daily_nutrition_date", "daily_nutrition", ["date"], unique=False)

    op.create_table(
        "meals",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        *_timestamps(),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("daily_id", sa.Integer(), nullable=True),
        sa.Column("type", sa.String(length=16), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=True),
        sa.Column("meal_time", sa.DateTime(), nullable=False),
        sa.Column("location", sa.String(length=16), nullable=False, server_default="home"),
        sa.Column("mood_before", sa.Integer(), nullable=True),
        sa.Column("mood_after", sa.Integer(), nullable=True),
        sa.Column("hunger_before", sa.Integer(), nullable=True),
        sa.Column("hunger_after", sa.Integer(), nullable=True),
        sa.Column("satisfaction", sa.Integer(), nullable=True),
        sa.Column("water_value", sa.Float(), nullable=False, server_default="0"),
        sa.Column("water_unit", sa.String(length=8), nullable=False, server_default="ml"),
        sa.Column("tags_json", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("total_calories", sa.Float(), nullable=False, server_default="0"),
        sa.Column("total_protein", sa.Float(), nullable=False, server_default="0"),
        sa.Column("total_carbohydrates", sa.Float(), nullable=False, server_default="0"),
        sa.Column("total_fiber", sa.Float(), nullable=False, server_default="0"),
        sa.Column("total_sugar", sa.Float(), nullable=False, server_default="0"),
        sa.Column("total_fat", sa.Float(), nullable=False, server_default="0"),
        sa.Column("total_sodium", sa.Float(), nullable=False, server_default="0"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["daily_id"], ["daily_nutrition.id"]),
    )
    op.create_index("ix_meals_user_id", "meals", ["user_id"], unique=False)
    op.create_index("ix_meals_daily_id", "meals", ["daily_id"], unique=False)
    op.create_index("ix_meals_meal_time", "meals", ["meal_time"], unique=False)
    op.create_index("ix_meals_user_time", "meals", ["user_id", "meal_time"], unique=False)
    op.create_index("ix_meals_user_type", "meals", ["user_id", "type"], unique=False)

    op.create_table(
        "food_items",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("meal_id", sa.Integer(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("brand", sa.String(length=100), nullable=True),
        sa.Column("category", sa.String(length=32), nullable=False, server_default="other"),
        sa.Column("quantity_value", sa.Float(), nullable=False),
        sa.Column("quantity_unit", sa.String(length=16), nullable=False),
        sa.Column("calories", sa.Float(), nullable=False),
        sa.Column("calories_per_100g", sa.Float(), nullable=True),
        sa.Column("protein_g", sa.Float(), nullable=False),
        sa.Column("carbs_g", sa.Float(), nullable=False),
        sa.Column("fiber_g", sa.Float(), nullable=False, server_default="0"),
        sa.Column("sugar_g", sa.Float(), nullable=False, server_default="0"),
        sa.Column("fat_g", sa.Float(), nullable=False),
        sa.Column("saturated_fat_g", sa.Float(), nullable=False, server_default="0"),
        sa.Column("unsaturated_fat_g", sa.Float(), nullable=False, server_default="0"),
        sa.Column("trans_fat_g", sa.Float(), nullable=False, server_default="0"),
        sa.Column("sodium_mg", sa.Float(), nullable=False, server_default="0"),
        sa.Column("cholesterol_mg", sa.Float(), nullable=False, server_default="0"),
        sa.Column("vitamins_json", sa.Text(), nullable=True),
        sa.Column("minerals_json", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["meal_id"], ["meals.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_food_items_meal_id", "food_items", ["meal_id"], unique=False)

    op.create_table(
        "goals",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        *_timestamps(),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=100), nullable=False),
        sa.Column("description", sa.String(length=1000), nullable=False),
        sa.Column("category", sa.String(length=32), nullable=False),
        sa.Column("type", sa.String(length=16), nullable=False, server_default="target"),
        sa.Column("priority", sa.String(length=16), nullable=False, server_default="medium"),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="draft"),
        sa.Column("target_value", sa.Float(), nullable=False),
        sa.Column("current_value", sa.Float(), nullable=False, server_default="0"),
        sa.Column("starting_value", sa.Float(), nullable=True),
        sa.Column("unit", sa.String(length=16), nullable=False),
        sa.Column("start_date", sa.DateTime(), nullable=False),
        sa.Column("target_date", sa.DateTime(), nullable=False),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        sa.Column("last_progress_at", sa.DateTime(), nullable=True),
        sa.Column("timeframe", sa.String(length=16), nullable=False, server_default="monthly"),
        sa.Column("difficulty", sa.String(length=16), nullable=False, server_default="intermediate"),
        sa.Column("tracking_frequency", sa.String(length=16), nullable=False, server_default="weekly"),
        sa.Column("auto_tracking_enabled", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("auto_tracking_source", sa.String(length=16), nullable=True),
        sa.Column("auto_tracking_metric", sa.String(length=64), nullable=True),
        sa.Column("tags_json", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
    )
    op.create_index("ix_goals_user_id", "goals", ["user_id"], unique=False)
    op.create_index("ix_goals_status", "goals", ["status"], unique=False)
    op.create_index("ix_goals_target_date", "goals", ["target_date"], unique=False)
    op.create_index("ix_goals_user_status", "goals", ["user_id", "status"], unique=False)
    op.create_index("ix_goals_user_category", "goals", ["user_id", "category"], unique=False)
    op.create_index("ix_goals_user_target", "goals", ["user_id", "target_date"], unique=False)

    op.create_table(
        "milestones",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("goal_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("title", sa.String(length=100), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=True),
        sa.Column("target_value", sa.Float(), nullable=False),
        sa.Column("current_value", sa.Float(), nullable=False, server_default="0"),
        sa.Column("unit", sa.String(length=16), nullable=False),
        sa.Column("target_date", sa.DateTime(), nullable=True),
        sa.Column("is_achieved", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("achieved_at", sa.DateTime(), nullable=True),
        sa.Column("reward", sa.String(length=200), nullable=True),
        sa.Column("notes", sa.String(length=500), nullable=True),
        sa.ForeignKeyConstraint(["goal_id"], ["goals.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_milestones_goal_id", "milestones", ["goal_id"], unique=False)

    op.create_table(
        "progress_updates",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("goal_id", sa.Integer(), nullable=False),
        sa.Column("value", sa.Float(), nullable=False),
        sa.Column("unit", sa.String(length=16), nullable=False),
        sa.Column("recorded_at", sa.DateTime(), nullable=False),
        sa.Column("notes", sa.String(length=500), nullable=True),
        sa.Column("mood", sa.Integer(), nullable=True),
        sa.Column("confidence", sa.Integer(), nullable=True),
        sa.Column("source", sa.String(length=16), nullable=False, server_default="manual"),
        sa.Column("related_id", sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(["goal_id"], ["goals.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_progress_updates_goal_id", "progress_updates", ["goal_id"], unique=False)


def downgrade() -> None:
    op.drop_table("progress_updates")
    op.drop_table("milestones")
    op.drop_table("goals")
    op.drop_table("food_items")
    op.drop_table("meals")
    op.drop_table("daily_nutrition")
    op.drop_table("workout_sets")
    op.drop_table("exercises")
    op.drop_table("workouts")
    op.drop_table("weight_entries")
    op.drop_table("users")
