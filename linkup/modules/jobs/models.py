# Supabase table: job_offer
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

job_offer:
- id_job_offer: bigint (primary key, identity)
- id_company: bigint (foreign key -> company.id_company, on delete cascade)
- title: text (not null)
- description: text (not null)
- location: text (nullable)
- contract_type: text (nullable) - CDI, CDD, Stage, Freelance, Alternance...
- salary_min: int (nullable)
- salary_max: int (nullable, >= salary_min)
- remote: text (nullable) - "yes"/"no"/"hybrid" or a boolean
- experience: text (nullable) - junior, senior, ...
- industry: text (nullable)
- education: text (nullable)
- requirements: text (nullable)
- benefits: text (nullable)
- published_at: timestamp (default: now())
"""

JOB_TABLE = "job_offer"

JOB_COLUMNS = (
    "id_job_offer, id_company, title, description, location, contract_type, salary_min, salary_max, "
    "remote, experience, industry, education, requirements, benefits, published_at"
)

JOB_UPDATABLE_FIELDS = (
    "title",
    "description",
    "location",
    "contract_type",
    "salary_min",
    "salary_max",
    "remote",
    "experience",
    "industry",
    "education",
    "requirements",
    "benefits",
)
