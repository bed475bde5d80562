"""SQLite database schema definitions."""

SCHEMA_SQL = """
-- 17-week challenge configuration and derived targets
CREATE TABLE IF NOT EXISTS challenges (
    challenge_id INTEGER PRIMARY KEY AUTOINCREMENT,
    start_date DATE NOT NULL,
    start_weight REAL NOT NULL,
    goal_weight REAL,
    unit TEXT NOT NULL DEFAULT 'lbs',
    step_goal INTEGER DEFAULT 10000,
    sleep_goal REAL DEFAULT 8,
    activity_level TEXT,
    tdee_estimate INTEGER,
    target_calories INTEGER,
    target_weekly_loss REAL,
    deficit_level TEXT,
    workouts_per_week INTEGER DEFAULT 4,
    fasting_type TEXT,
    eating_start_time TEXT,
    eating_end_time TEXT,
    target_protein_grams INTEGER,
    target_carbs_grams INTEGER,
    target_fat_grams INTEGER,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

-- Daily nutrition totals
CREATE TABLE IF NOT EXISTS day_logs (
    log_id INTEGER PRIMARY KEY AUTOINCREMENT,
    challenge_id INTEGER NOT NULL,
    date DATE NOT NULL,
    calories INTEGER,
    protein INTEGER,
    carbs INTEGER,
    fat INTEGER,
    notes TEXT,
    skipped BOOLEAN DEFAULT FALSE,
    skipped_reason TEXT,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    UNIQUE (challenge_id, date),
    FOREIGN KEY (challenge_id) REFERENCES challenges(challenge_id)
);

CREATE INDEX IF NOT EXISTS idx_day_logs_date ON day_logs(date);

-- Workouts (one per day; "Rest" marks a rest day)
CREATE TABLE IF NOT EXISTS workout_logs (
    log_id INTEGER PRIMARY KEY AUTOINCREMENT,
    challenge_id INTEGER NOT NULL,
    date DATE NOT NULL,
    workout_type TEXT NOT NULL,
    duration_min INTEGER,
    notes TEXT,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    UNIQUE (challenge_id, date),
    FOREIGN KEY (challenge_id) REFERENCES challenges(challenge_id)
);

CREATE INDEX IF NOT EXISTS idx_workout_logs_date ON workout_logs(date);

-- Daily habits
CREATE TABLE IF NOT EXISTS habit_logs (
    log_id INTEGER PRIMARY KEY AUTOINCREMENT,
    challenge_id INTEGER NOT NULL,
    date DATE NOT NULL,
    water_done BOOLEAN DEFAULT FALSE,
    steps INTEGER,
    steps_done BOOLEAN DEFAULT FALSE,
    sleep_hours REAL,
    sleep_done BOOLEAN DEFAULT FALSE,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    UNIQUE (challenge_id, date),
    FOREIGN KEY (challenge_id) REFERENCES challenges(challenge_id)
);

-- Weekly weigh-in and measurements
CREATE TABLE IF NOT EXISTS weekly_check_ins (
    check_in_id INTEGER PRIMARY KEY AUTOINCREMENT,
    challenge_id INTEGER NOT NULL,
    week_number INTEGER NOT NULL,
    weight REAL,
    waist REAL,
    hips REAL,
    chest REAL,
    body_fat REAL,
    notes TEXT,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    UNIQUE (challenge_id, week_number),
    FOREIGN KEY (challenge_id) REFERENCES challenges(challenge_id)
);

-- Individual foods eaten; nutrition is stored per serving
CREATE TABLE IF NOT EXISTS food_entries (
    entry_id INTEGER PRIMARY KEY AUTOINCREMENT,
    challenge_id INTEGER NOT NULL,
    date DATE NOT NULL,
    time TEXT,
    meal_type TEXT NOT NULL,
    food_name TEXT NOT NULL,
    brand TEXT,
    barcode TEXT,
    calories_per_serving INTEGER NOT NULL,
    protein_per_serving REAL DEFAULT 0,
    carbs_per_serving REAL DEFAULT 0,
    fat_per_serving REAL DEFAULT 0,
    fiber_per_serving REAL DEFAULT 0,
    sugar_per_serving REAL DEFAULT 0,
    sodium_per_serving REAL DEFAULT 0,
    cholesterol_per_serving REAL DEFAULT 0,
    serving_label TEXT,
    serving_grams REAL,
    servings_count REAL NOT NULL DEFAULT 1,
    source TEXT NOT NULL DEFAULT 'manual',
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (challenge_id) REFERENCES challenges(challenge_id)
);

CREATE INDEX IF NOT EXISTS idx_food_entries_date ON food_entries(challenge_id, date);

-- End-of-week reflection (one per week)
CREATE TABLE IF NOT EXISTS weekly_reflections (
    reflection_id INTEGER PRIMARY KEY AUTOINCREMENT,
    challenge_id INTEGER NOT NULL,
    week_number INTEGER NOT NULL,
    went_well TEXT,
    was_hard TEXT,
    improve_next_week TEXT,
    learned TEXT,
    next_week_focus TEXT,
    mood_rating INTEGER,
    energy_rating INTEGER,
    overall_rating INTEGER,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    UNIQUE (challenge_id, week_number),
    FOREIGN KEY (challenge_id) REFERENCES challenges(challenge_id)
);
"""


def get_schema_sql() -> str:
    """Return the complete schema SQL."""
    return SCHEMA_SQL
