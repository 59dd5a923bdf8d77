# Supabase tables: collection_stats, collection_greetings, collection_motivational, collection_wisdom
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Columns shared by every collection table:

- id: bigint (primary key)
- attribution: text (nullable)
- status: text (default: 'draft') - values: draft, published, archived
- source_content_id: bigint (foreign key to ingested.id, nullable)
- used_in: text[] (nullable)
- display_order: integer (nullable)
- created_at / updated_at / published_at / archived_at: timestamp

collection_stats:
- stat_text: text (not null)
- stat_value: text (nullable)
- stat_category: text (nullable)
- year: integer (nullable)
- theme, category: text (nullable)

collection_greetings:
- greeting_text: text (not null)

collection_motivational:
- quote: text (not null)
- context: text (nullable)
- theme, category: text (nullable)

collection_wisdom:
- title: text (not null)
- musing: text (not null)
- from_the_box: text (not null)
- theme, category: text (nullable)
"""
