# Supabase table: dietary_profiles
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: text (primary key, uuid generated by the service)
- user_id: text (references users.id, not null, one profile per user)
- allergies: json string[] (default: [])
- dietary_preferences: json string[] (default: [])
- health_restrictions: json string[] (default: [])
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

Profiles are created with empty lists the first time they are read and
every write replaces the three lists wholesale.
"""

DIETARY_PROFILES_TABLE = "dietary_profiles"
