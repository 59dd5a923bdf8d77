# Supabase Auth
# Users live in Supabase's auth.users table; no custom tables are required.

"""
The CMS only needs:
- auth.get_user(jwt=...) - resolve the bearer token sent by the admin pages

Authorization is "is there a valid user"; there are no roles or permissions.
"""
