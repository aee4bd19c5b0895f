# Supabase table: message
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

message:
- id_message: bigint (primary key, identity)
- id_sender: bigint (foreign key -> user_.id_user)
- id_receiver: bigint (foreign key -> user_.id_user)
- content: text (not null)
- message_type: text (default: 'text')
- is_read: boolean (default: false)
- send_at: timestamp (default: now())
"""

MESSAGE_TABLE = "message"

MESSAGE_MAX_LENGTH = 5000

CORRESPONDENT_COLUMNS = "id_user, firstname, lastname, job_title"
