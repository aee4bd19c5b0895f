# Supabase table: filter
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

filter:
- id_filter: bigint (primary key, identity)
- name: text (not null) - label shown in the search UI
- type: text (not null) - contract_type, location, industry, experience, ...
- options: jsonb (nullable) - selectable values
- is_active: boolean (default: true)
- created_at: timestamp (default: now())
"""

FILTER_TABLE = "filter"
