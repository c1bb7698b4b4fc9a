#!/usr/bin/env python3
"""
Create the first lead (A1) admin.

Admin accounts are normally created from the console by an A1 admin, so the
very first one has to come from here. Refuses to run if an A1 already exists.

Usage:
    python scripts/create_superadmin.py --email lead@example.com \
        --first-name Priya --last-name Kulkarni --phone 9876543210 \
        --username priya --department "Computer Science & Engineering"
"""

import argparse
import getpass

from pydantic import ValidationError

from placement_admin.core.errors import ConsoleError
from placement_admin.core.logging import setup_logging
from placement_admin.schemas.schemas import AdminSignupRequest
from placement_admin.services.identity_service import IdentityService
from placement_admin.services.record_store import RecordStore
from placement_admin.services.signup_service import SignupService


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create the first A1 admin")
    parser.add_argument("--email", required=True)
    parser.add_argument("--first-name", required=True)
    parser.add_argument("--middle-name", default="")
    parser.add_argument("--last-name", required=True)
    parser.add_argument("--phone", required=True)
    parser.add_argument("--username", required=True)
    parser.add_argument("--department", required=True, help="Full department name")
    parser.add_argument("--password", help="Prompted for when omitted")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    setup_logging()
    args = parse_args(argv)

    password = args.password or getpass.getpass("Password: ")
    confirm = args.password or getpass.getpass("Confirm password: ")

    try:
        request = AdminSignupRequest(
            first_name=args.first_name,
            middle_name=args.middle_name,
            last_name=args.last_name,
            email=args.email,
            phone=args.phone,
            username=args.username,
            type="A1",
            department=args.department,
            password=password,
            confirm_password=confirm,
        )
    except ValidationError as exc:
        for error in exc.errors():
            print(f"  {'.'.join(str(p) for p in error['loc'])}: {error['msg']}")
        return 2

    identity = IdentityService()
    identity.init_schema()
    try:
        admin_id = SignupService(RecordStore(), identity).bootstrap_admin(request)
    except ConsoleError as exc:
        print(f"Could not create admin: {exc.message}")
        return 1

    print(f"Created A1 admin {request.email} ({admin_id})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
