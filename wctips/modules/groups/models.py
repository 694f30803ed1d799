# Supabase tables: groups, group_members
# This file documents the expected database schema
# Actual operations are handled via the Store in service.py

"""
Expected Supabase table structure:

groups:
- id: uuid (primary key)
- name: text (not null, non-empty)
- owner_id: uuid (foreign key to auth.users.id, not null) - creator
- created_at: timestamp (default: now())

group_members:
- id: uuid (primary key)
- group_id: uuid (foreign key to groups.id, not null)
- user_id: uuid (foreign key to auth.users.id, not null)
- role: text (not null, default: 'member') - values: owner, member
- created_at: timestamp (default: now())
- unique constraint on (group_id, user_id)

Invite redemption relies on the unique constraint: a second insert for the
same (group_id, user_id) fails with SQLSTATE 23505 and is treated as
"already a member".
"""
