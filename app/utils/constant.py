WEEKDAY_LABELS = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

# Mon, Wed, Fri, Sun, Tue, Thu, Sat
DEFAULT_DAYS_SEQUENCE = [1, 3, 5, 0, 2, 4, 6]

REPEAT_PATTERNS = ["daily", "weekly", "yearly"]

CARDIO_TEMPLATE_KEYWORDS = ["cardio", "hiit", "endurance"]
CARDIO_NAME_KEYWORDS = ["cardio", "interval", "run", "cycle"]
CARDIO_EXERCISE_KEYWORDS = ["cardio", "sprint", "run", "bike", "row"]
CARDIO_MUSCLE_KEYWORDS = ["cardio", "aerobic", "endurance"]
CARDIO_FOCUS_KEYWORDS = ["cardio", "endurance", "conditioning"]

# Equipment names that never restrict a template
UNRESTRICTED_EQUIPMENT = ["bodyweight", "none"]


ERROR_MESSAGES = {
    "USER_INACTIVE": "Inactive user",
    "INVALID_CREDENTIALS": "Could not validate credentials",
    "SCHEDULE_NOT_FOUND": "Schedule not found",
    "TEMPLATE_NOT_FOUND": "Schedule template not found",
    "WORKOUT_TEMPLATE_NOT_FOUND": "Workout template not found",
    "PREFERENCES_NOT_FOUND": "Preferences not found",
    "INVALID_DATE_RANGE": "End date must be on or after start date",
    "DATE_RANGE_TOO_LONG": "Date range cannot exceed {max_days} days",
    "GENERATION_FAILED": "Failed to generate templates",
    "RECOMMENDATION_FAILED": "Failed to load recommended templates",
}
