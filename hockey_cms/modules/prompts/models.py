# Supabase table: prompts
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

prompts:
- id: bigint (primary key)
- name: text (nullable; unique together with category)
- category: text (nullable)
- prompt_content: text (not null)
- content_type: text (nullable) - one of the generation content types
- selections: jsonb (nullable) - prompt builder choices
- is_active: boolean (default: false) - the prompt used by the job processor
- created_by: uuid (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

Prompt template files (outside the database):
<prompts_dir>/<category>/<name>.md with a front-matter header (name, category, created).

Topic files:
<topics_dir>/<content_type>-topics.md with one "### Topic name" section per topic.
"""
