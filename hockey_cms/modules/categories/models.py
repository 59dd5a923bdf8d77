# Supabase table: categories
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

categories:
- id: bigint (primary key)
- name: text (unique, not null)
- slug: text (unique, not null)
- description: text (nullable)
- emoji: text (nullable)
- is_active: boolean (default: true)
- display_order: integer (default: 0)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
"""
