# Supabase table: food_scans
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: text (primary key, uuid generated by the service)
- user_id: text (references users.id, not null)
- food_name: text (not null)
- image_url: text (not null) - public bucket URL, or s3://bucket/key
- ingredients: json string[] (default: [])
- is_safe: boolean (nullable) - null means caution / not determined
- safety_reason: text
- unsafe_reasons: json string[] (default: [])
- description: text
- scanned_at: timestamptz (default: now())

In async processing mode a row is inserted with placeholder values when
the image is uploaded and overwritten once the background analysis ends.
"""

FOOD_SCANS_TABLE = "food_scans"

PROCESSING_FOOD_NAME = "Processing..."
PROCESSING_SAFETY_REASON = "Your food image is being analyzed."
PROCESSING_DESCRIPTION = "Analysis in progress. Check back in a few seconds."
