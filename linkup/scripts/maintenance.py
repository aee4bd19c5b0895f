"""
Maintenance Script
Purges expired entries of the revoked token table and creates the default
admin account. Can be run manually or as part of a nightly job.
"""

import argparse
import logging

from linkup.database.supabase_client import get_supabase
from linkup.modules.auth.revocation import RevocationStore
from linkup.modules.auth.service import AuthService

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def purge_revoked_tokens() -> int:
    purged = RevocationStore(get_supabase()).purge_expired()
    logger.info("Purged %s expired revoked tokens", purged)
    return purged


def create_default_admin() -> bool:
    created = AuthService(get_supabase()).ensure_default_admin()
    if not created:
        logger.info("No admin created (disabled or already present)")
    return created


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="LinkUp database maintenance")
    parser.add_argument("--skip-purge", action="store_true", help="keep expired revoked tokens")
    parser.add_argument("--skip-admin", action="store_true", help="do not create the default admin")
    args = parser.parse_args(argv)

    if not args.skip_purge:
        purge_revoked_tokens()
    if not args.skip_admin:
        create_default_admin()
    logger.info("Maintenance completed")


if __name__ == "__main__":
    main()
