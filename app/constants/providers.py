"""
Outbound provider constants, recorded in email status payloads and system events.
"""

PROVIDER_RESEND = "resend"
