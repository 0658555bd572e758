"""
Logging helpers for the form engine.
"""
