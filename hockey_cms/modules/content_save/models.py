# No tables of its own: saved items land in the trivia_* and collection_* tables.
# This file documents the database function the save endpoints rely on.

"""
Expected Supabase function:

append_to_used_for(target_id bigint, usage_type text) returns void
    Appends usage_type to ingested.used_for for the row target_id,
    skipping values already present.

Usage types are the short badge keys: mc, tf, whoami, stats, motivational,
greetings, pbp, wisdom.
"""
