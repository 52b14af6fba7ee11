# Supabase table: scan_limits (or scan_limits_v2, see SCAN_LIMITS_TABLE)
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: text (primary key, uuid generated by the service)
- user_id: text (unique, references users.id, not null)
- scans_used: integer (not null, default: 0)
- max_scans: integer (not null, default: 10)
- reset_date: timestamptz (not null) - start of the next monthly window

One row per user. Rows are created lazily the first time a user's limit
is read. When reset_date has passed, the next read zeroes scans_used and
moves reset_date forward by one calendar month.
"""


from app.config.settings import settings

DEFAULT_SCAN_LIMITS_TABLE = "scan_limits"


def scan_limits_table() -> str:
    return settings.scan_limits_table or DEFAULT_SCAN_LIMITS_TABLE
