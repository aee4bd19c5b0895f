# Session authentication
# Accounts live in two tables: user_ (candidates and admins) and company (recruiters).
# Both store a bcrypt hash in their `password` column.
# Sessions are stateless HS256 JWTs carried by an httpOnly cookie.

"""
Expected Supabase table structure:

revoked_token:
- jti: text (primary key) - jti claim of the logged-out JWT
- expires_at: timestamptz (not null) - exp claim; rows past it may be purged
- revoked_at: timestamptz (default: now())

JWT claims:
- sub: id_user or id_company (string)
- role: 'user' | 'admin' | 'company'
- email: account e-mail (recruiter_mail for companies)
- jti: uuid4 hex, used for revocation
- iat / exp: issue and expiry timestamps
"""
