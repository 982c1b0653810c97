"""
Intake submission status and source constants - centralized to avoid circular imports.
"""

# Submission lifecycle
STATUS_SUBMITTED = "submitted"

# Where a submission came from
SOURCE_ELEVATE = "elevate"
