# Supabase table: company
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

company:
- id_company: bigint (primary key, identity)
- name: text (unique case-insensitively, not null)
- description: text (not null)
- password: text (bcrypt hash, never selected for responses)
- recruiter_mail: text (unique, not null, stored lower-case) - login identifier
- recruiter_firstname: text (nullable)
- recruiter_lastname: text (nullable)
- recruiter_phone: text (nullable)
- website: text (nullable)
- industry: text (nullable)
- employees_number: text (nullable)
- city: text (nullable)
- zip_code: text (nullable)
- country: text (nullable)
- founded_year: int (nullable, 1800..current year)
- logo: text (nullable, storage URL)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
"""

COMPANY_TABLE = "company"

COMPANY_PUBLIC_COLUMNS = (
    "id_company, name, description, recruiter_mail, recruiter_firstname, recruiter_lastname, "
    "recruiter_phone, website, industry, employees_number, city, zip_code, country, founded_year, "
    "logo, created_at, updated_at"
)

COMPANY_AUTH_COLUMNS = "id_company, name, recruiter_mail, password, created_at"

COMPANY_UPDATABLE_FIELDS = (
    "name",
    "description",
    "recruiter_firstname",
    "recruiter_lastname",
    "recruiter_phone",
    "website",
    "industry",
    "employees_number",
    "city",
    "zip_code",
    "country",
    "founded_year",
    "logo",
)
