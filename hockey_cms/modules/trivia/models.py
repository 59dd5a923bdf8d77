# Supabase tables: trivia_multiple_choice, trivia_true_false, trivia_who_am_i
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure (columns shared by all three tables):

- id: bigint (primary key)
- question_text: text (not null)
- explanation: text (nullable)
- category: text (nullable)
- theme: text (nullable)
- difficulty: text (nullable) - values: Easy, Medium, Hard
- tags: text[] (nullable)
- attribution: text (nullable)
- status: text (default: 'draft') - values: draft, published, archived
- source_content_id: bigint (foreign key to ingested.id, nullable)
- used_in: text[] (nullable)
- display_order: integer (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
- published_at: timestamp (nullable)
- archived_at: timestamp (nullable)

trivia_multiple_choice:
- correct_answer: text (not null)
- wrong_answers: text[] (not null, exactly 3 entries)

trivia_true_false:
- is_true: boolean (not null)

trivia_who_am_i:
- correct_answer: text (not null)
"""
