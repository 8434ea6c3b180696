"""
HealthVoice: voice-first patient triage with a clinic appointment queue

A clean architecture-based service that turns a patient's triage
conversation into a booked appointment and drives the doctor's
Waiting / In-Progress / Completed queue.
"""

__version__ = "0.1.0"
__author__ = "HealthVoice Team"
__description__ = "Voice-first patient triage and clinic queue"
