from __future__ import annotations

import datetime as dt
from typing import Any

from sqlalchemy import Boolean, Date, DateTime, Float, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from fittrack.clock import utcnow
from fittrack.jsonutil import dumps, loads_dict, loads_list


class Base(DeclarativeBase):
    pass


class TimestampMixin:
    created_at: Mapped[dt.datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[dt.datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)


def _json_list(attr: str) -> property:
    def get(self: Any) -> list[Any]:
        return loads_list(getattr(self, attr))

    def set_(self: Any, value: list[Any] | None) -> None:
        setattr(self, attr, dumps(list(value)) if value else None)

    return property(get, set_)


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # caller identity handed over by the auth layer
    external_id: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    name: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # profile inputs for BMI / BMR
    height_value: Mapped[float | None] = mapped_column(Float, nullable=True)
    height_unit: Mapped[str] = mapped_column(String(8), default="cm")  # cm/ft/in
    weight_kg: Mapped[float | None] = mapped_column(Float, nullable=True)
    sex: Mapped[str | None] = mapped_column(String(16), nullable=True)  # male/female
    date_of_birth: Mapped[dt.date | None] = mapped_column(Date, nullable=True)
    activity_level: Mapped[str | None] = mapped_column(String(16), nullable=True)
    fitness_goals_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    preferred_weight_unit: Mapped[str] = mapped_column(String(8), default="kg")

    fitness_goals = _json_list("fitness_goals_json")


class WeightEntry(TimestampMixin, Base):
    __tablename__ = "weight_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), index=True)

    weight_value: Mapped[float] = mapped_column(Float)
    weight_unit: Mapped[str] = mapped_column(String(8), default="kg")  # kg/lbs
    # weight_value converted to kg on every write
    weight_kg: Mapped[float] = mapped_column(Float)

    body_fat_pct: Mapped[float | None] = mapped_column(Float, nullable=True)
    body_fat_method: Mapped[str | None] = mapped_column(String(32), nullable=True)
    muscle_mass_value: Mapped[float | None] = mapped_column(Float, nullable=True)
    muscle_mass_unit: Mapped[str] = mapped_column(String(8), default="kg")
    muscle_mass_kg: Mapped[float | None] = mapped_column(Float, nullable=True)
    bone_mass_value: Mapped[float | None] = mapped_column(Float, nullable=True)
    bone_mass_unit: Mapped[str] = mapped_column(String(8), default="kg")
    water_pct: Mapped[float | None] = mapped_column(Float, nullable=True)
    visceral_fat_rating: Mapped[int | None] = mapped_column(Integer, nullable=True)
    metabolic_age: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # chest/waist/hips/neck: {"value","unit"}; thigh/bicep/forearm/calf: {"left": {...}, "right": {...}}
    measurements_json: Mapped[str | None] = mapped_column(Text, nullable=True)

    measured_at: Mapped[dt.datetime] = mapped_column(DateTime, default=utcnow, index=True)
    time_of_day: Mapped[str] = mapped_column(String(32), default="morning")
    mood: Mapped[int | None] = mapped_column(Integer, nullable=True)
    energy_level: Mapped[int | None] = mapped_column(Integer, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    tags_json: Mapped[str | None] = mapped_column(Text, nullable=True)

    tags = _json_list("tags_json")

    @property
    def measurements(self) -> dict[str, Any]:
        return loads_dict(self.measurements_json)

    @measurements.setter
    def measurements(self, value: dict[str, Any] | None) -> None:
        self.measurements_json = dumps(value) if value else None


class Workout(TimestampMixin, Base):
    __tablename__ = "workouts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), index=True)

    name: Mapped[str] = mapped_column(String(100))
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    type: Mapped[str] = mapped_column(String(32), default="other")
    intensity: Mapped[str] = mapped_column(String(16), default="moderate")

    planned_duration_min: Mapped[int | None] = mapped_column(Integer, nullable=True)
    actual_duration_min: Mapped[int | None] = mapped_column(Integer, nullable=True)
    start_time: Mapped[dt.datetime | None] = mapped_column(DateTime, default=utcnow, nullable=True)
    end_time: Mapped[dt.datetime | None] = mapped_column(DateTime, nullable=True)
    calories_burned: Mapped[int | None] = mapped_column(Integer, nullable=True)

    location: Mapped[str] = mapped_column(String(16), default="gym")
    equipment_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    mood_before: Mapped[int | None] = mapped_column(Integer, nullable=True)
    mood_after: Mapped[int | None] = mapped_column(Integer, nullable=True)
    energy_before: Mapped[int | None] = mapped_column(Integer, nullable=True)
    energy_after: Mapped[int | None] = mapped_column(Integer, nullable=True)
    body_weight_value: Mapped[float | None] = mapped_column(Float, nullable=True)
    body_weight_unit: Mapped[str] = mapped_column(String(8), default="kg")
    tags_json: Mapped[str | None] = mapped_column(Text, nullable=True)

    is_template: Mapped[bool] = mapped_column(Boolean, default=False)
    template_name: Mapped[str | None] = mapped_column(String(100), nullable=True)

    completion_status: Mapped[str] = mapped_column(String(16), default="planned")
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    exercises: Mapped[list["Exercise"]] = relationship(
        back_populates="workout",
        cascade="all, delete-orphan",
        order_by="Exercise.position",
        lazy="selectin",
    )

    equipment = _json_list("equipment_json")
    tags = _json_list("tags_json")


class Exercise(Base):
    __tablename__ = "exercises"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    workout_id: Mapped[int] = mapped_column(Integer, ForeignKey("workouts.id", ondelete="CASCADE"), index=True)
    position: Mapped[int] = mapped_column(Integer, default=0)

    created_at: Mapped[dt.datetime] = mapped_column(DateTime, default=utcnow)

    name: Mapped[str] = mapped_column(String(100))
    category: Mapped[str] = mapped_column(String(32), default="other")
    muscle_groups_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    # sum of weight x reps over sets, recomputed on every write
    total_volume: Mapped[float] = mapped_column(Float, default=0.0)
    personal_record: Mapped[bool] = mapped_column(Boolean, default=False)
    difficulty: Mapped[int] = mapped_column(Integer, default=5)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    workout: Mapped[Workout] = relationship(back_populates="exercises")
    sets: Mapped[list["WorkoutSet"]] = relationship(
        back_populates="exercise",
        cascade="all, delete-orphan",
        order_by="WorkoutSet.position",
        lazy="selectin",
    )

    muscle_groups = _json_list("muscle_groups_json")


class WorkoutSet(Base):
    __tablename__ = "workout_sets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    exercise_id: Mapped[int] = mapped_column(Integer, ForeignKey("exercises.id", ondelete="CASCADE"), index=True)
    position: Mapped[int] = mapped_column(Integer, default=0)

    set_number: Mapped[int] = mapped_column(Integer)
    reps: Mapped[int | None] = mapped_column(Integer, nullable=True)
    weight_value: Mapped[float | None] = mapped_column(Float, nullable=True)
    weight_unit: Mapped[str] = mapped_column(String(16), default="kg")  # kg/lbs/bodyweight
    duration_value: Mapped[float | None] = mapped_column(Float, nullable=True)
    duration_unit: Mapped[str] = mapped_column(String(16), default="seconds")
    distance_value: Mapped[float | None] = mapped_column(Float, nullable=True)
    distance_unit: Mapped[str] = mapped_column(String(16), default="km")
    rest_seconds: Mapped[int] = mapped_column(Integer, default=60)
    completed: Mapped[bool] = mapped_column(Boolean, default=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    exercise: Mapped[Exercise] = relationship(back_populates="sets")


class DailyNutrition(TimestampMixin, Base):
    __tablename__ = "daily_nutrition"
    __table_args__ = (UniqueConstraint("user_id", "date", name="uq_daily_nutrition_user_date"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), index=True)
    date: Mapped[dt.date] = mapped_column(Date, index=True)

    water_total_ml: Mapped[float] = mapped_column(Float, default=0.0)
    water_goal_ml: Mapped[float | None] = mapped_column(Float, nullable=True)

    calories_goal: Mapped[float | None] = mapped_column(Float, nullable=True)
    protein_goal: Mapped[float | None] = mapped_column(Float, nullable=True)
    carbs_goal: Mapped[float | None] = mapped_column(Float, nullable=True)
    fat_goal: Mapped[float | None] = mapped_column(Float, nullable=True)
    fiber_goal: Mapped[float | None] = mapped_column(Float, nullable=True)

    supplements_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    body_weight_value: Mapped[float | None] = mapped_column(Float, nullable=True)
    body_weight_unit: Mapped[str] = mapped_column(String(8), default="kg")
    symptoms_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    supplements = _json_list("supplements_json")
    symptoms = _json_list("symptoms_json")


class Meal(TimestampMixin, Base):
    __tablename__ = "meals"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), index=True)
    daily_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("daily_nutrition.id"), nullable=True, index=True)

    type: Mapped[str] = mapped_column(String(16))
    name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    meal_time: Mapped[dt.datetime] = mapped_column(DateTime, default=utcnow, index=True)
    location: Mapped[str] = mapped_column(String(16), default="home")

    mood_before: Mapped[int | None] = mapped_column(Integer, nullable=True)
    mood_after: Mapped[int | None] = mapped_column(Integer, nullable=True)
    hunger_before: Mapped[int | None] = mapped_column(Integer, nullable=True)
    hunger_after: Mapped[int | None] = mapped_column(Integer, nullable=True)
    satisfaction: Mapped[int | None] = mapped_column(Integer, nullable=True)
    water_value: Mapped[float] = mapped_column(Float, default=0.0)
    water_unit: Mapped[str] = mapped_column(String(8), default="ml")
    tags_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # sums over foods, recomputed on every write
    total_calories: Mapped[float] = mapped_column(Float, default=0.0)
    total_protein: Mapped[float] = mapped_column(Float, default=0.0)
    total_carbohydrates: Mapped[float] = mapped_column(Float, default=0.0)
    total_fiber: Mapped[float] = mapped_column(Float, default=0.0)
    total_sugar: Mapped[float] = mapped_column(Float, default=0.0)
    total_fat: Mapped[float] = mapped_column(Float, default=0.0)
    total_sodium: Mapped[float] = mapped_column(Float, default=0.0)

    foods: Mapped[list["FoodItem"]] = relationship(
        back_populates="meal",
        cascade="all, delete-orphan",
        order_by="FoodItem.position",
        lazy="selectin",
    )
    tags = _json_list("tags_json")


class FoodItem(Base):
    __tablename__ = "food_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    meal_id: Mapped[int] = mapped_column(Integer, ForeignKey("meals.id", ondelete="CASCADE"), index=True)
    position: Mapped[int] = mapped_column(Integer, default=0)

    name: Mapped[str] = mapped_column(String(100))
    brand: Mapped[str | None] = mapped_column(String(100), nullable=True)
    category: Mapped[str] = mapped_column(String(32), default="other")
    quantity_value: Mapped[float] = mapped_column(Float)
    quantity_unit: Mapped[str] = mapped_column(String(16))

    calories: Mapped[float] = mapped_column(Float)
    calories_per_100g: Mapped[float | None] = mapped_column(Float, nullable=True)
    protein_g: Mapped[float] = mapped_column(Float)
    carbs_g: Mapped[float] = mapped_column(Float)
    fiber_g: Mapped[float] = mapped_column(Float, default=0.0)
    sugar_g: Mapped[float] = mapped_column(Float, default=0.0)
    fat_g: Mapped[float] = mapped_column(Float)
    saturated_fat_g: Mapped[float] = mapped_column(Float, default=0.0)
    unsaturated_fat_g: Mapped[float] = mapped_column(Float, default=0.0)
    trans_fat_g: Mapped[float] = mapped_column(Float, default=0.0)
    sodium_mg: Mapped[float] = mapped_column(Float, default=0.0)
    cholesterol_mg: Mapped[float] = mapped_column(Float, default=0.0)
    vitamins_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    minerals_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    meal: Mapped[Meal] = relationship(back_populates="foods")

    vitamins = _json_list("vitamins_json")
    minerals = _json_list("minerals_json")


class Goal(TimestampMixin, Base):
    __tablename__ = "goals"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), index=True)

    title: Mapped[str] = mapped_column(String(100))
    description: Mapped[str] = mapped_column(String(1000))
    category: Mapped[str] = mapped_column(String(32))
    type: Mapped[str] = mapped_column(String(16), default="target")
    priority: Mapped[str] = mapped_column(String(16), default="medium")
    status: Mapped[str] = mapped_column(String(16), default="draft", index=True)

    target_value: Mapped[float] = mapped_column(Float)
    current_value: Mapped[float] = mapped_column(Float, default=0.0)
    # reference point for synced weight goals
    starting_value: Mapped[float | None] = mapped_column(Float, nullable=True)
    unit: Mapped[str] = mapped_column(String(16))

    start_date: Mapped[dt.datetime] = mapped_column(DateTime, default=utcnow)
    target_date: Mapped[dt.datetime] = mapped_column(DateTime, index=True)
    completed_at: Mapped[dt.datetime | None] = mapped_column(DateTime, nullable=True)
    last_progress_at: Mapped[dt.datetime | None] = mapped_column(DateTime, nullable=True)

    timeframe: Mapped[str] = mapped_column(String(16), default="monthly")
    difficulty: Mapped[str] = mapped_column(String(16), default="intermediate")
    tracking_frequency: Mapped[str] = mapped_column(String(16), default="weekly")
    auto_tracking_enabled: Mapped[bool] = mapped_column(Boolean, default=False)
    auto_tracking_source: Mapped[str | None] = mapped_column(String(16), nullable=True)
    auto_tracking_metric: Mapped[str | None] = mapped_column(String(64), nullable=True)
    tags_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    milestones: Mapped[list["Milestone"]] = relationship(
        back_populates="goal",
        cascade="all, delete-orphan",
        order_by="Milestone.target_value",
        lazy="selectin",
    )
    progress_updates: Mapped[list["ProgressUpdate"]] = relationship(
        back_populates="goal",
        cascade="all, delete-orphan",
        order_by="ProgressUpdate.recorded_at.desc()",
        lazy="selectin",
    )

    tags = _json_list("tags_json")


class Milestone(Base):
    __tablename__ = "milestones"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    goal_id: Mapped[int] = mapped_column(Integer, ForeignKey("goals.id", ondelete="CASCADE"), index=True)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime, default=utcnow)

    title: Mapped[str] = mapped_column(String(100))
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    target_value: Mapped[float] = mapped_column(Float)
    current_value: Mapped[float] = mapped_column(Float, default=0.0)
    unit: Mapped[str] = mapped_column(String(16))
    target_date: Mapped[dt.datetime | None] = mapped_column(DateTime, nullable=True)
    is_achieved: Mapped[bool] = mapped_column(Boolean, default=False)
    achieved_at: Mapped[dt.datetime | None] = mapped_column(DateTime, nullable=True)
    reward: Mapped[str | None] = mapped_column(String(200), nullable=True)
    notes: Mapped[str | None] = mapped_column(String(500), nullable=True)

    goal: Mapped[Goal] = relationship(back_populates="milestones")


class ProgressUpdate(Base):
    __tablename__ = "progress_updates"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    goal_id: Mapped[int] = mapped_column(Integer, ForeignKey("goals.id", ondelete="CASCADE"), index=True)

    value: Mapped[float] = mapped_column(Float)
    unit: Mapped[str] = mapped_column(String(16))
    recorded_at: Mapped[dt.datetime] = mapped_column(DateTime, default=utcnow)
    notes: Mapped[str | None] = mapped_column(String(500), nullable=True)
    mood: Mapped[int | None] = mapped_column(Integer, nullable=True)
    confidence: Mapped[int | None] = mapped_column(Integer, nullable=True)
    source: Mapped[str] = mapped_column(String(16), default="manual")
    related_id: Mapped[int | None] = mapped_column(Integer, nullable=True)

    goal: Mapped[Goal] = relationship(back_populates="progress_updates")


Index("ix_weight_entries_user_measured", WeightEntry.user_id, WeightEntry.measured_at)
Index("ix_workouts_user_created", Workout.user_id, Workout.created_at)
Index("ix_workouts_user_type", Workout.user_id, Workout.type)
Index("ix_workouts_user_status", Workout.user_id, Workout.completion_status)
Index("ix_meals_user_time", Meal.user_id, Meal.meal_time)
Index("ix_meals_user_type", Meal.user_id, Meal.type)
Index("ix_goals_user_status", Goal.user_id, Goal.status)
Index("ix_goals_user_category", Goal.user_id, Goal.category)
Index("ix_goals_user_target", Goal.user_id, Goal.target_date)
