# Supabase Auth
# This module uses Supabase's built-in authentication system
# No custom tables are required - Supabase Auth handles:
# - Password and OAuth sign-in
# - Session issuance and JWT validation

"""
Supabase Auth calls used here:
- auth.sign_in_with_password() - Authenticate with email + password
- auth.sign_in_with_oauth() - Build the provider authorization URL
- auth.get_user() - Resolve the current user from a JWT
- auth.admin.sign_out() - Revoke the sessions behind a JWT

Display metadata (name, avatar_url) lives in the user's user_metadata;
the editable display name lives in the profiles table (see modules/profiles).
"""
