# Supabase table: user_
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

user_:
- id_user: bigint (primary key, identity)
- email: text (unique, not null, stored lower-case)
- password: text (bcrypt hash, never selected for responses)
- firstname: text
- lastname: text
- phone: text
- role: text ('user' | 'admin', default 'user')
- bio_pro: text (nullable)
- city: text (nullable)
- country: text (nullable)
- website: text (nullable)
- description: text (nullable)
- job_title: text (nullable)
- experience_level: text (nullable) - débutant, junior, intermédiaire, senior, expert, lead, manager
- skills: text[] (nullable)
- availability: boolean (nullable)
- portfolio_link: text (nullable)
- linkedin_link: text (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
"""

USER_TABLE = "user_"

# Every column except password
USER_PUBLIC_COLUMNS = (
    "id_user, email, firstname, lastname, phone, bio_pro, city, country, role, created_at, updated_at, "
    "job_title, experience_level, skills, portfolio_link, linkedin_link, availability, description, website"
)

USER_AUTH_COLUMNS = "id_user, email, password, role, firstname, lastname, created_at"

USER_UPDATABLE_FIELDS = (
    "firstname",
    "lastname",
    "phone",
    "bio_pro",
    "website",
    "city",
    "country",
    "description",
    "skills",
    "job_title",
    "experience_level",
    "availability",
    "portfolio_link",
    "linkedin_link",
)
