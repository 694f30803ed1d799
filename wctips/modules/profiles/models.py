# Supabase table: profiles
# This file documents the expected database schema
# Actual operations are handled via the Store in service.py

"""
Expected Supabase table structure:

profiles:
- id: uuid (primary key, references auth.users.id)
- display_name: text (nullable)
- avatar_url: text (nullable)
- created_at: timestamp (default: now())

Rows are created on first save (upsert on id). RLS lets every signed-in
user read profiles and only the owner insert/update their own row.
"""
