# Supabase table: group_invites
# This file documents the expected database schema
# Actual operations are handled via the Store in service.py

"""
Expected Supabase table structure:

group_invites:
- id: uuid (primary key)
- group_id: uuid (foreign key to groups.id, not null)
- token: text (unique, not null) - URL-safe, 192 random bits
- created_by: uuid (foreign key to auth.users.id, not null)
- expires_at: timestamptz (nullable) - no expiry when null
- max_uses: integer (nullable, > 0) - unlimited when null
- uses: integer (not null, default: 0)
- created_at: timestamp (default: now())
- check constraint: max_uses is null or uses <= max_uses

Rows are never deleted. `uses` only moves up, one compare-and-set update
at a time (see InviteService._claim_use).
"""
