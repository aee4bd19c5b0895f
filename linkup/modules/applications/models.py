# Supabase table: apply
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

apply:
- id_user: bigint (foreign key -> user_.id_user, on delete cascade)
- id_job_offer: bigint (foreign key -> job_offer.id_job_offer, on delete cascade)
- status: text (default: 'pending') - pending, interview, accepted, rejected, withdrawn, archived
- notes: text (nullable) - company notes or candidate cover message
- application_date: timestamp (default: now())
- primary key: (id_user, id_job_offer)
"""

APPLY_TABLE = "apply"

APPLICATION_STATUSES = ("pending", "interview", "accepted", "rejected", "withdrawn", "archived")

CANDIDATE_SUMMARY_COLUMNS = (
    "id_user, email, firstname, lastname, phone, city, country, job_title, experience_level, skills, "
    "portfolio_link, linkedin_link, bio_pro, availability"
)
