"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DIVISIONS = ("5", "6")
BATCHES_BY_DIVISION = {
    "5": ("K5", "L5", "M5", "N5"),
    "6": ("K6", "L6", "M6", "N6"),
}

YEARS = ("FE", "SE", "TE", "BE")
SEMESTERS = ("1", "2")
DEFAULT_DEPARTMENT = "Computer Engineering"
DEFAULT_DESIGNATION = "Professor"

MINIMUM_ATTENDANCE = 75

# Reports default to roughly one semester back from today.
DEFAULT_REPORT_DAYS = 4 * 30

WEEKLY_TREND_BUCKETS = 12
MONTHLY_TREND_BUCKETS = 6
ADMIN_MONTHLY_BUCKETS = 6

STUDENT_REQUIRED_COLUMNS = (
    "studentName",
    "studyingYear",
    "rollNo",
    "division",
    "batch",
    "electiveSubject",
    "sId",
    "sPassword",
)
FACULTY_REQUIRED_COLUMNS = ("name", "designation", "emailID", "subject", "E_ID", "E_password")

STUDENT_EMAIL_DOMAIN = "student.pict.edu"
FACULTY_EMAIL_DOMAIN = "faculty.pict.edu"

DEFAULT_IMPORT_ROW_DELAY_SECONDS = 2.0
DEFAULT_IMPORT_MAX_RETRIES = 5
DEFAULT_IMPORT_BASE_DELAY_SECONDS = 3.0
