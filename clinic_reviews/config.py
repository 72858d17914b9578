"""Configuration for the clinic reviews service.

All business rules centralized here - modify as needed without touching code.
Values marked (env) can be overridden from the environment or a .env file.
"""
import os

from dotenv import load_dotenv

load_dotenv()

# Review rules
REVIEW_EDIT_WINDOW_HOURS = 24
MIN_RATING = 1
MAX_RATING = 5
RECENT_REVIEWS_LIMIT = 5

# API Configuration (env)
REVIEWS_API_HOST = os.getenv("REVIEWS_API_HOST", "0.0.0.0")
REVIEWS_API_PORT = int(os.getenv("REVIEWS_API_PORT", "5000"))
REVIEWS_API_BASE_URL = os.getenv("REVIEWS_API_BASE_URL", f"http://localhost:{REVIEWS_API_PORT}")
REQUEST_TIMEOUT_SECONDS = int(os.getenv("REQUEST_TIMEOUT_SECONDS", "15"))

# Logging (env)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Demo data loaded at startup (env)
SEED_DEMO_REVIEWS = os.getenv("SEED_DEMO_REVIEWS", "true").lower() == "true"

SEED_REVIEWS = [
    {
        "id": "1",
        "appointment_id": "apt_001",
        "patient_id": "patient_001",
        "doctor_id": "doctor_001",
        "patient_name": "John Doe",
        "doctor_name": "Dr. Priya Sharma",
        "rating": 5,
        "review_text": "Excellent doctor! Very professional and caring. "
                       "The consultation was thorough and I felt heard.",
        "created_at": "2025-08-10T10:00:00Z",
        "updated_at": "2025-08-10T10:00:00Z",
        "appointment_date": "2025-08-10T09:00:00Z",
    },
    {
        "id": "2",
        "appointment_id": "apt_002",
        "patient_id": "patient_002",
        "doctor_id": "doctor_001",
        "patient_name": "Jane Smith",
        "doctor_name": "Dr. Priya Sharma",
        "rating": 4,
        "review_text": "Great experience overall. Dr. Sharma was very knowledgeable "
                       "and explained everything clearly.",
        "created_at": "2025-08-09T14:30:00Z",
        "updated_at": "2025-08-09T14:30:00Z",
        "appointment_date": "2025-08-09T11:00:00Z",
    },
    {
        "id": "3",
        "appointment_id": "apt_003",
        "patient_id": "patient_003",
        "doctor_id": "doctor_002",
        "patient_name": "Mike Johnson",
        "doctor_name": "Dr. Rajesh Kumar",
        "rating": 5,
        "review_text": "Outstanding cardiologist! Very detailed examination and clear treatment plan.",
        "created_at": "2025-08-08T16:00:00Z",
        "updated_at": "2025-08-08T16:00:00Z",
        "appointment_date": "2025-08-08T15:00:00Z",
    },
]
