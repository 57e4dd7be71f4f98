"""
Symptom Tracker service: symptom logging with a remote store and a local cache fallback.
"""
__version__ = "1.0.0"
