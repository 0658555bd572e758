"""
Form state: an explicitly owned store for form data and initial data.
"""

from .form_state import FormStateStore, empty_form_data
from .produce import produce

__all__ = ["FormStateStore", "empty_form_data", "produce"]
