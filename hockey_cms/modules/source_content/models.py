# Supabase table: ingested
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

ingested:
- id: bigint (primary key)
- title: text (nullable) - defaults to the first words of content_text
- content_text: text (not null) - the raw pasted source
- processed_text: text (nullable) - output of the cleanup pipeline
- word_count: integer (nullable)
- char_count: integer (nullable)
- processing_time_ms: integer (nullable)
- processed_at: timestamp (nullable)
- theme: text (nullable)
- category: text (nullable)
- status: text (default: 'ready') - values: ready, processing, completed, failed
- used_for: text[] (default: '{}') - badge keys of content generated from this row
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
"""
