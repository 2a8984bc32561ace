"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

from .enums import MealType

# Half-open local-time windows: [start, end)
DEFAULT_MEAL_WINDOWS = (
    (MealType.BREAKFAST, time(7, 0), time(10, 0)),
    (MealType.LUNCH, time(12, 0), time(15, 0)),
    (MealType.DINNER, time(19, 0), time(22, 0)),
)

DEFAULT_EMAIL_DOMAIN = "nitw.ac.in"
MIN_PASSWORD_LENGTH = 6
PHONE_DIGITS = 10

DEFAULT_REPORT_DAYS = 7
DEFAULT_HISTORY_LIMIT = 30

DAYS_OF_WEEK = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

BRANCH_OPTIONS = {
    "CSE": "Computer Science Engineering",
    "ECE": "Electronics & Communication Engineering",
    "EEE": "Electrical & Electronics Engineering",
    "MECH": "Mechanical Engineering",
    "MNC": "Mathematics & Computing",
    "CIVIL": "Civil Engineering",
    "MME": "Metallurgical & Materials Engineering",
    "CHEM": "Chemical Engineering",
    "BIO": "Biotechnology",
}

HOSTEL_OPTIONS = {
    "UMH": "1.8K Hostel",
    "LH": "Ladies Hostel",
    "MegaH": "1K Mega Hostel",
    "IH": "International Hostel",
    "BLOCK_A": "Block A",
    "BLOCK_B": "Block B",
    "BLOCK_C": "Block C",
    "BLOCK_D": "Block D",
}

MESS_OPTIONS = {
    "veg": "IFC - A",
    "non-veg": "IFC - B",
    "special": "IFC - C",
    "ifc_d": "IFC - D",
    "krishna": "Krishna Mess",
}

FEEDBACK_CATEGORIES = {
    "food-quality": "Food Quality",
    "hygiene": "Hygiene & Cleanliness",
    "service": "Service",
    "menu-variety": "Menu Variety",
    "suggestion": "Suggestion",
    "complaint": "Complaint",
}
