"""
Shared constants for HealthVoice.
"""

# Placeholder shown for an audio-only turn until its transcription arrives
AUDIO_PLACEHOLDER_TEXT = "Audio Message..."

# Bot reply appended when the inference call fails
INFERENCE_FAILURE_TEXT = "Sorry, something went wrong. Please try again."

# Bot reply when the model answers without any text
EMPTY_RESPONSE_TEXT = (
    "I apologize, but I am having trouble understanding right now. Please try again."
)

# Booking derivation
NO_SYMPTOMS_SUMMARY = "Patient requested consultation (No specific symptoms logged)."
SYMPTOM_SEPARATOR = ", "
FALLBACK_MESSAGE_SEPARATOR = ". "
FALLBACK_MIN_MESSAGE_LENGTH = 3

# Manual (walk-in) additions
WALK_IN_SYMPTOMS = "Walk-in patient"

# Speech output locales per conversation language
SPEECH_LOCALES = {
    "en": "en-US",
    "hi": "hi-IN",
    "ta": "ta-IN",
}

QUEUE_EMPTY_MESSAGE = "No patients in waiting queue."

# Demo data seeded at startup when SESSION_SEED_DEMO_DATA is on
DEMO_PASSWORD = "123"

DEMO_ACCOUNTS = [
    {"user_id": "u1", "name": "John Doe", "email": "patient@demo.com", "role": "patient"},
    {"user_id": "d1", "name": "Dr. Sarah Smith", "email": "doctor@demo.com", "role": "doctor"},
    {"user_id": "a1", "name": "Admin User", "email": "admin@demo.com", "role": "admin"},
]

DEMO_APPOINTMENTS = [
    {
        "appointment_id": "appt-1",
        "patient_id": "u3",
        "patient_name": "Alice Johnson",
        "doctor_id": "d1",
        "time_slot": "09:00 AM",
        "status": "scheduled",
        "symptoms_summary": "Severe migraine, sensitivity to light, nausea.",
        "notes": None,
    },
    {
        "appointment_id": "appt-2",
        "patient_id": "u4",
        "patient_name": "Bob Williams",
        "doctor_id": "d1",
        "time_slot": "11:30 AM",
        "status": "completed",
        "symptoms_summary": "Skin rash on left arm, itching.",
        "notes": "Prescribed antihistamine and topical cream.",
    },
]
