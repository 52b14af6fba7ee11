# Supabase tables: users, auth.users
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# Authentication is handled by Supabase Auth (auth.users table)

"""
Expected Supabase table structure:

users:
- id: text (primary key, equals auth.users.id)
- email: text (unique, not null) - synced from auth.users
- password: text (not null) - placeholder only, never used for auth
- name: text (nullable)
- phone: text (nullable)
- emergency_name: text (nullable)
- emergency_relation: text (nullable)
- emergency_phone: text (nullable)
- ai_model: text (nullable) - per-user OpenRouter model for analysis and chat
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

Rows are created lazily the first time an authenticated user reaches a
route that needs one, together with a default scan limit.
"""

USERS_TABLE = "users"
