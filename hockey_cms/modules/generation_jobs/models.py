# Supabase table: generation_jobs
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

generation_jobs:
- id: bigint (primary key)
- source_content_id: bigint (foreign key to ingested.id)
- content_type: text (not null) - one of the bulk generation content types
- status: text (default: 'pending') - values: pending, in_progress, completed, failed, cancelled
- attempts: integer (default: 0)
- error_message: text (nullable)
- created_at: timestamp (default: now())
- started_at: timestamp (nullable)
- completed_at: timestamp (nullable)
- updated_at: timestamp (nullable)

Jobs are processed oldest first. A runner claims a job by updating it
from 'pending' to 'in_progress'; only the runner whose update matched
the row goes on to process it.
"""
