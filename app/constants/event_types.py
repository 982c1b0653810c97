"""
Event type constants for SystemEvent.

Use these instead of string literals to ensure consistency.
"""

# ---- Email ----
EVENT_EMAIL_SEND_FAILURE = "email.send_failure"
