from __future__ import annotations

import datetime as dt
from typing import Annotated, Any, Generic, Literal, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, model_validator

from fittrack.clock import as_naive_utc
from fittrack.units import to_kg

T = TypeVar("T")

# stored columns are naive UTC
UtcDatetime = Annotated[dt.datetime, AfterValidator(as_naive_utc)]

MassUnit = Literal["kg", "lbs"]
TimeOfDay = Literal["morning", "afternoon", "evening", "before-workout", "after-workout", "before-meal", "after-meal"]
Score = Annotated[int, Field(ge=1, le=10)]


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class Page(BaseModel, Generic[T]):
    items: list[T]
    pagination: Pagination


class Message(BaseModel):
    success: bool = True
    message: str


class Quantity(BaseModel):
    value: float
    unit: str


class OrmModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# --- users ---------------------------------------------------------------


class ProfileIn(BaseModel):
    name: str | None = Field(default=None, max_length=100)
    height_value: float | None = Field(default=None, gt=0)
    height_unit: Literal["cm", "ft", "in"] = "cm"
    weight_kg: float | None = Field(default=None, ge=20, le=500)
    sex: Literal["male", "female"] | None = None
    date_of_birth: dt.date | None = None
    activity_level: Literal["sedentary", "light", "moderate", "active", "very-active"] | None = None
    fitness_goals: list[str] = Field(default_factory=list)
    preferred_weight_unit: MassUnit = "kg"


class ProfileOut(ProfileIn, OrmModel):
    id: int
    external_id: str
    created_at: UtcDatetime
    profile_completion: int = 0


class UserStatsOut(BaseModel):
    profile_completion: int
    member_since: UtcDatetime
    weight_entries: int
    workouts: int
    meals: int
    goals: int


# --- weight --------------------------------------------------------------


class WeightEntryIn(BaseModel):
    weight_value: float = Field(gt=0)
    weight_unit: MassUnit = "kg"
    body_fat_pct: float | None = Field(default=None, ge=3, le=60)
    body_fat_method: Literal[
        "dexa", "bod-pod", "hydrostatic", "bioelectrical", "calipers", "visual-estimate", "other"
    ] | None = None
    muscle_mass_value: float | None = Field(default=None, ge=10)
    muscle_mass_unit: MassUnit = "kg"
    bone_mass_value: float | None = Field(default=None, ge=1)
    bone_mass_unit: MassUnit = "kg"
    water_pct: float | None = Field(default=None, ge=30, le=85)
    visceral_fat_rating: int | None = Field(default=None, ge=1, le=30)
    metabolic_age: int | None = Field(default=None, ge=10, le=100)
    measurements: dict[str, Any] | None = None
    measured_at: UtcDatetime | None = None
    time_of_day: TimeOfDay = "morning"
    mood: Score | None = None
    energy_level: Score | None = None
    notes: str | None = Field(default=None, max_length=1000)
    tags: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _weight_in_range(self) -> WeightEntryIn:
        kg = to_kg(self.weight_value, self.weight_unit)
        if not 20 <= kg <= 500:
            raise ValueError("Weight must be between 20 and 500 kg")
        return self


class BulkWeightEntryIn(WeightEntryIn):
    measured_at: UtcDatetime


class BulkImportIn(BaseModel):
    entries: list[BulkWeightEntryIn] = Field(min_length=1)


class WeightEntryOut(OrmModel):
    id: int
    weight_value: float
    weight_unit: str
    weight_kg: float
    body_fat_pct: float | None
    body_fat_method: str | None
    muscle_mass_value: float | None
    muscle_mass_unit: str
    bone_mass_value: float | None
    bone_mass_unit: str
    water_pct: float | None
    visceral_fat_rating: int | None
    metabolic_age: int | None
    measurements: dict[str, Any]
    measured_at: UtcDatetime
    time_of_day: str
    mood: int | None
    energy_level: int | None
    notes: str | None
    tags: list[str]
    created_at: UtcDatetime

    bmi: float | None = None
    bmi_category: str | None = None
    lean_body_mass: Quantity | None = None
    body_fat_mass: Quantity | None = None
    weight_in_preferred_unit: Quantity | None = None


class ProgressMetricsOut(OrmModel):
    weight_change: float
    body_fat_change: float
    muscle_mass_change: float
    weekly_weight_change: float
    days_between: int
    weight_trend: str
    body_fat_trend: str
    muscle_mass_trend: str


class LatestWeightOut(BaseModel):
    entry: WeightEntryOut
    comparison: ProgressMetricsOut | None


class WeightComparisonOut(BaseModel):
    entry1: WeightEntryOut
    entry2: WeightEntryOut
    comparison: ProgressMetricsOut


class DailyTrendOut(OrmModel):
    day: dt.date
    avg_weight: float
    min_weight: float
    max_weight: float
    avg_body_fat: float | None
    avg_muscle_mass: float | None
    count: int


class TrendStatisticsOut(OrmModel):
    total_change: float
    avg_change_per_week: float
    time_span_days: float
    current_weight: float
    starting_weight: float


class WeightTrendsOut(BaseModel):
    trends: list[DailyTrendOut]
    statistics: TrendStatisticsOut | None


class BmiPoint(BaseModel):
    date: UtcDatetime
    bmi: float | None
    category: str | None


class WeightStatsOut(OrmModel):
    total_entries: int
    avg_weight: float
    min_weight: float
    max_weight: float
    avg_body_fat: float
    avg_muscle_mass: float
    avg_water_percentage: float
    first_entry: UtcDatetime | None
    last_entry: UtcDatetime | None
    current_weight: Quantity | None = None
    weight_change_last_week: float | None = None
    weight_change_last_month: float | None = None
    bmi_trend: list[BmiPoint] | None = None
    start: UtcDatetime
    end: UtcDatetime


class ConsistencyOut(OrmModel):
    this_week: float
    this_month: float
    overall: float


class WeightSummaryOut(BaseModel):
    total_entries: int
    latest_weight: Quantity | None
    weight_change_30_days: float | None
    current_bmi: float | None
    bmi_category: str | None
    last_logged_days: int | None
    consistency: ConsistencyOut


# --- workouts ------------------------------------------------------------

WorkoutType = Literal[
    "strength", "cardio", "hiit", "yoga", "pilates", "crossfit", "powerlifting",
    "bodybuilding", "endurance", "flexibility", "sports", "functional", "circuit", "other",
]
ExerciseCategory = Literal[
    "strength", "cardio", "flexibility", "balance", "sports",
    "functional", "plyometrics", "bodyweight", "weightlifting", "other",
]
MuscleGroup = Literal[
    "chest", "back", "shoulders", "biceps", "triceps", "forearms", "core", "abs", "obliques",
    "lower-back", "quadriceps", "hamstrings", "calves", "glutes", "full-body", "cardio", "other",
]
CompletionStatus = Literal["planned", "in-progress", "completed", "skipped"]


class SetIn(BaseModel):
    set_number: int = Field(ge=1)
    reps: int | None = Field(default=None, ge=0)
    weight_value: float | None = Field(default=None, ge=0)
    weight_unit: Literal["kg", "lbs", "bodyweight"] = "kg"
    duration_value: float | None = Field(default=None, ge=0)
    duration_unit: Literal["seconds", "minutes", "hours"] = "seconds"
    distance_value: float | None = Field(default=None, ge=0)
    distance_unit: Literal["m", "km", "ft", "mi", "yards"] = "km"
    rest_seconds: int = Field(default=60, ge=0)
    completed: bool = True
    notes: str | None = Field(default=None, max_length=500)


class SetOut(SetIn, OrmModel):
    id: int


class ExerciseIn(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    category: ExerciseCategory = "other"
    muscle_groups: list[MuscleGroup] = Field(default_factory=list)
    sets: list[SetIn] = Field(default_factory=list)
    personal_record: bool = False
    difficulty: int = Field(default=5, ge=1, le=10)
    notes: str | None = Field(default=None, max_length=1000)


class ExerciseOut(OrmModel):
    id: int
    name: str
    category: str
    muscle_groups: list[str]
    sets: list[SetOut]
    total_volume: float
    personal_record: bool
    difficulty: int
    notes: str | None


class WorkoutIn(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    type: WorkoutType = "other"
    intensity: Literal["low", "moderate", "high", "extreme"] = "moderate"
    planned_duration_min: int | None = Field(default=None, ge=0)
    actual_duration_min: int | None = Field(default=None, ge=0)
    start_time: UtcDatetime | None = None
    end_time: UtcDatetime | None = None
    calories_burned: int | None = Field(default=None, ge=0)
    location: Literal["gym", "home", "outdoor", "studio", "pool", "track", "other"] = "gym"
    equipment: list[str] = Field(default_factory=list)
    mood_before: Score | None = None
    mood_after: Score | None = None
    energy_before: Score | None = None
    energy_after: Score | None = None
    body_weight_value: float | None = Field(default=None, ge=0)
    body_weight_unit: MassUnit = "kg"
    tags: list[str] = Field(default_factory=list)
    is_template: bool = False
    template_name: str | None = Field(default=None, max_length=100)
    completion_status: CompletionStatus = "planned"
    notes: str | None = Field(default=None, max_length=1000)
    exercises: list[ExerciseIn] = Field(default_factory=list)


class WorkoutOut(OrmModel):
    id: int
    name: str
    description: str | None
    type: str
    intensity: str
    planned_duration_min: int | None
    actual_duration_min: int | None
    start_time: UtcDatetime | None
    end_time: UtcDatetime | None
    calories_burned: int | None
    location: str
    equipment: list[str]
    body_weight_value: float | None
    body_weight_unit: str
    tags: list[str]
    is_template: bool
    template_name: str | None
    completion_status: str
    notes: str | None
    exercises: list[ExerciseOut]
    created_at: UtcDatetime

    total_duration: int = 0
    total_exercises: int = 0
    total_sets: int = 0
    total_volume: float = 0.0
    primary_muscle_groups: list[str] = Field(default_factory=list)


class CompleteWorkoutIn(BaseModel):
    mood_after: Score | None = None
    energy_after: Score | None = None
    notes: str | None = Field(default=None, max_length=1000)


class RecentWorkoutOut(OrmModel):
    id: int
    name: str
    type: str
    actual_duration_min: int | None
    calories_burned: int | None
    created_at: UtcDatetime


class PersonalRecordOut(BaseModel):
    workout_id: int
    exercise_name: str
    max_weight: float | None
    max_reps: int | None
    total_volume: float
    date: UtcDatetime


class WorkoutStatsOut(BaseModel):
    total_workouts: int
    total_duration: int
    total_calories: int
    average_intensity: float
    workout_types: list[str]
    recent_workouts: list[RecentWorkoutOut]
    personal_records: list[PersonalRecordOut]
    start: UtcDatetime
    end: UtcDatetime


# --- nutrition -----------------------------------------------------------

MealType = Literal["breakfast", "lunch", "dinner", "snack", "pre-workout", "post-workout", "other"]
WaterUnit = Literal["ml", "l", "fl oz", "cup"]


class NutrientAmount(BaseModel):
    name: str
    amount: float = Field(ge=0)
    unit: str = "mg"


class FoodItemIn(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    brand: str | None = Field(default=None, max_length=100)
    category: str = "other"
    quantity_value: float = Field(ge=0)
    quantity_unit: Literal[
        "g", "kg", "oz", "lb", "ml", "l", "fl oz", "cup", "tbsp", "tsp",
        "piece", "slice", "serving", "small", "medium", "large", "whole",
    ]
    calories: float = Field(ge=0)
    calories_per_100g: float | None = Field(default=None, ge=0)
    protein_g: float = Field(ge=0)
    carbs_g: float = Field(ge=0)
    fiber_g: float = Field(default=0.0, ge=0)
    sugar_g: float = Field(default=0.0, ge=0)
    fat_g: float = Field(ge=0)
    saturated_fat_g: float = Field(default=0.0, ge=0)
    unsaturated_fat_g: float = Field(default=0.0, ge=0)
    trans_fat_g: float = Field(default=0.0, ge=0)
    sodium_mg: float = Field(default=0.0, ge=0)
    cholesterol_mg: float = Field(default=0.0, ge=0)
    vitamins: list[NutrientAmount] = Field(default_factory=list)
    minerals: list[NutrientAmount] = Field(default_factory=list)
    notes: str | None = Field(default=None, max_length=500)


class FoodItemOut(FoodItemIn, OrmModel):
    id: int
    quantity_unit: str
    vitamins: list[dict[str, Any]]
    minerals: list[dict[str, Any]]


class MealIn(BaseModel):
    type: MealType
    name: str | None = Field(default=None, max_length=100)
    foods: list[FoodItemIn] = Field(min_length=1)
    meal_time: UtcDatetime | None = None
    location: Literal["home", "restaurant", "work", "school", "gym", "other"] = "home"
    mood_before: Score | None = None
    mood_after: Score | None = None
    hunger_before: Score | None = None
    hunger_after: Score | None = None
    satisfaction: Score | None = None
    water_value: float = Field(default=0.0, ge=0)
    water_unit: WaterUnit = "ml"
    tags: list[str] = Field(default_factory=list)
    notes: str | None = Field(default=None, max_length=1000)


class MacroRatioOut(OrmModel):
    protein: int
    carbohydrates: int
    fat: int


class MealOut(OrmModel):
    id: int
    type: str
    name: str | None
    foods: list[FoodItemOut]
    meal_time: UtcDatetime
    location: str
    water_value: float
    water_unit: str
    tags: list[str]
    notes: str | None
    total_calories: float
    total_protein: float
    total_carbohydrates: float
    total_fiber: float
    total_sugar: float
    total_fat: float
    total_sodium: float
    created_at: UtcDatetime
    macro_ratio: MacroRatioOut | None = None


class SupplementIn(BaseModel):
    name: str = Field(min_length=1)
    dosage_value: float = Field(ge=0)
    dosage_unit: Literal["mg", "g", "ml", "capsule", "tablet", "scoop"]
    time_of_day: TimeOfDay = "morning"
    taken: bool = False
    notes: str | None = None


class NutrientGoalsIn(BaseModel):
    calories: float | None = Field(default=None, ge=0)
    protein: float | None = Field(default=None, ge=0)
    carbohydrates: float | None = Field(default=None, ge=0)
    fat: float | None = Field(default=None, ge=0)
    fiber: float | None = Field(default=None, ge=0)


class DailyNutritionIn(BaseModel):
    goals: NutrientGoalsIn = Field(default_factory=NutrientGoalsIn)
    water_goal_ml: float | None = Field(default=None, ge=0)
    supplements: list[SupplementIn] = Field(default_factory=list)
    body_weight_value: float | None = Field(default=None, ge=0)
    body_weight_unit: MassUnit = "kg"
    symptoms: list[str] = Field(default_factory=list)
    notes: str | None = Field(default=None, max_length=1000)


class WaterIn(BaseModel):
    amount: float = Field(ge=0)
    unit: WaterUnit = "ml"


class WaterOut(BaseModel):
    total_water: float
    unit: str = "ml"


class GoalProgressOut(OrmModel):
    calories: int
    protein: int
    carbohydrates: int
    fat: int
    fiber: int
    water: int


class MealTotalsOut(OrmModel):
    calories: float
    protein: float
    carbohydrates: float
    fiber: float
    sugar: float
    fat: float
    sodium: float


class DailyNutritionOut(BaseModel):
    date: dt.date
    meals: list[MealOut]
    water_total_ml: float
    water_goal_ml: float | None
    goals: NutrientGoalsIn
    supplements: list[dict[str, Any]]
    body_weight_value: float | None
    body_weight_unit: str
    symptoms: list[str]
    notes: str | None
    totals: MealTotalsOut
    goal_progress: GoalProgressOut


class FavoriteFoodOut(BaseModel):
    name: str
    count: int
    avg_calories: float
    category: str | None


class DailyAveragesOut(BaseModel):
    avg_calories: float
    avg_protein: float
    avg_carbs: float
    avg_fat: float
    avg_water: float


class NutritionStatsOut(BaseModel):
    total_meals: int
    average_calories: float
    average_protein: float
    average_carbs: float
    average_fat: float
    meal_types: list[str]
    recent_meals: list[MealOut]
    favorite_foods: list[FavoriteFoodOut]
    daily_averages: DailyAveragesOut
    start: UtcDatetime
    end: UtcDatetime


class RecommendationOut(OrmModel):
    calories: int
    protein: int
    carbohydrates: int
    fat: int
    fiber: int
    water: int
    ratios: MacroRatioOut
    bmr: int
    tdee: int


# --- goals ---------------------------------------------------------------

GoalCategory = Literal[
    "weight-loss", "weight-gain", "muscle-gain", "strength", "endurance", "flexibility",
    "body-composition", "nutrition", "habit", "performance", "health", "wellness",
    "sport-specific", "other",
]
GoalTypeLit = Literal["target", "habit", "reduction", "maintenance", "challenge"]
GoalStatusLit = Literal["draft", "active", "paused", "completed", "abandoned", "expired"]
GoalUnit = Literal[
    "kg", "lbs", "cm", "in", "%", "reps", "sets", "minutes", "hours", "days",
    "weeks", "calories", "grams", "liters", "ml", "times", "points", "level",
]


class MilestoneIn(BaseModel):
    title: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    target_value: float
    unit: str
    target_date: UtcDatetime | None = None
    reward: str | None = Field(default=None, max_length=200)
    notes: str | None = Field(default=None, max_length=500)


class MilestoneOut(MilestoneIn, OrmModel):
    id: int
    current_value: float
    is_achieved: bool
    achieved_at: UtcDatetime | None


class ProgressUpdateOut(OrmModel):
    id: int
    value: float
    unit: str
    recorded_at: UtcDatetime
    notes: str | None
    mood: int | None
    confidence: int | None
    source: str
    related_id: int | None


class GoalIn(BaseModel):
    title: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1, max_length=1000)
    category: GoalCategory
    type: GoalTypeLit = "target"
    priority: Literal["low", "medium", "high", "critical"] = "medium"
    status: GoalStatusLit = "draft"
    target_value: float
    current_value: float = 0.0
    starting_value: float | None = None
    unit: GoalUnit
    start_date: UtcDatetime | None = None
    target_date: UtcDatetime
    timeframe: Literal["weekly", "monthly", "quarterly", "yearly", "custom"] = "monthly"
    difficulty: Literal["beginner", "intermediate", "advanced", "expert"] = "intermediate"
    tracking_frequency: Literal["daily", "weekly", "bi-weekly", "monthly", "as-needed"] = "weekly"
    auto_tracking_enabled: bool = False
    auto_tracking_source: Literal["workouts", "nutrition", "weight", "measurements"] | None = None
    auto_tracking_metric: str | None = None
    tags: list[str] = Field(default_factory=list)
    notes: str | None = Field(default=None, max_length=2000)
    milestones: list[MilestoneIn] = Field(default_factory=list)


class ProgressIn(BaseModel):
    current_value: float | None = None
    notes: str | None = Field(default=None, max_length=500)
    mood: Score | None = None
    confidence: Score | None = None
    completed_at: UtcDatetime | None = None


class StatusIn(BaseModel):
    status: GoalStatusLit
    reason: str | None = Field(default=None, max_length=200)


class GoalOut(OrmModel):
    id: int
    title: str
    description: str
    category: str
    type: str
    priority: str
    status: str
    target_value: float
    current_value: float
    starting_value: float | None
    unit: str
    start_date: UtcDatetime
    target_date: UtcDatetime
    completed_at: UtcDatetime | None
    last_progress_at: UtcDatetime | None
    timeframe: str
    difficulty: str
    tracking_frequency: str
    auto_tracking_enabled: bool
    auto_tracking_source: str | None
    auto_tracking_metric: str | None
    tags: list[str]
    notes: str | None
    milestones: list[MilestoneOut]
    created_at: UtcDatetime

    progress_percentage: float = 0.0
    days_remaining: int | None = None
    days_since_start: int = 0
    total_duration: int = 0
    time_progress_percentage: float = 0.0
    health_status: str = "on-track"
    next_milestone: MilestoneOut | None = None
    recent_progress: list[ProgressUpdateOut] = Field(default_factory=list)


class AdviceOut(OrmModel):
    type: str
    title: str
    message: str
    action: str


class ExpectedProgressOut(OrmModel):
    expected: float
    actual: float
    difference: float
    is_ahead: bool
    percentage_difference: float


class GoalInsightsOut(BaseModel):
    goal_id: int
    progress_percentage: float
    time_progress_percentage: float
    health_status: str
    days_remaining: int | None
    recommendations: list[AdviceOut]
    expected_progress: ExpectedProgressOut


class GoalSyncOut(BaseModel):
    goal: GoalOut
    updated_fields: list[str]


class TypeSuccessOut(BaseModel):
    type: str
    total: int
    completed: int
    success_rate: float


class MonthCountOut(BaseModel):
    year: int
    month: int
    completed: int


class GoalAnalyticsOut(BaseModel):
    status_counts: dict[str, int]
    type_counts: dict[str, int]
    completion_trend: list[MonthCountOut]
    upcoming_deadlines: list[GoalOut]
    average_completion_days: int
    success_rate_by_type: list[TypeSuccessOut]
    total_goals: int


class GoalStatsOut(BaseModel):
    total_goals: int
    active_goals: int
    completed_goals: int
    abandoned_goals: int
    avg_progress_percentage: float
    completion_rate: float
    categories: list[str]


class CategoryStatsOut(BaseModel):
    category: str
    count: int
    completed: int
    active: int
    avg_progress: float


class GoalDashboardStatsOut(BaseModel):
    total: int
    active: int
    completed: int
    overdue: int
    overall_progress: int


class GoalDashboardOut(BaseModel):
    active_goals: list[GoalOut]
    recently_completed: list[GoalOut]
    overdue_goals: list[GoalOut]
    needs_update_goals: list[GoalOut]
    stats: GoalDashboardStatsOut
