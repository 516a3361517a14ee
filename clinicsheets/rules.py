"""
Static normalization and display rules.

Kept in one place so the tolerated upstream artifacts are explicit.
"""

# Canonical sheet header -> record key
HEADER_RENAMES = {
    "name": "name",
    "age": "age",
    "gender": "gender",
    "dateofbirth": "dateofbirth",
    "contact": "contact",
    "systolicbp": "systolic",
    "diastolicbp": "diastolic",
    "spo2": "spo2",
    "heartrate": "heartrate",
    "temperature": "temperature",
    "results": "results",
    "doctor": "doctor",
}

# Rows with fewer cells than this share of the header are dropped
MIN_ROW_FILL_RATIO = 0.7

LINE_SEPARATOR = "\n"
FIELD_SEPARATOR = ","

DOCTOR_FIELDS = ("name", "contact", "schedule", "availability")

PATIENT_FIELDS = (
    "name",
    "age",
    "gender",
    "dateofbirth",
    "contact",
    "systolic",
    "diastolic",
    "spo2",
    "heartrate",
    "temperature",
    "results",
    "doctor",
)

EMPTY_MESSAGES = {
    "doctors": "No doctor data found.",
    "patients": "No patient records found.",
}

LOADING_MESSAGES = {
    "doctors": "Loading doctor data...",
    "patients": "Loading patient data...",
}

POLLING_INTERVAL_SECONDS = 15.0
REQUEST_TIMEOUT_SECONDS = 10.0
CACHE_BUSTER_PARAM = "timestamp"
