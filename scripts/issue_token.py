import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

import argparse
from datetime import timedelta

from app.constants.constants import UserRole
from app.core.security import create_identity_token


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Issue a bearer token for local testing of the leave API."
    )
    parser.add_argument("identity_id", type=int, help="Employee id the token is issued for")
    parser.add_argument(
        "--role",
        default=UserRole.employee.value,
        choices=[role.value for role in UserRole],
    )
    parser.add_argument("--minutes", type=int, default=None, help="Lifetime override")
    return parser


def main(argv=None) -> str:
    args = build_parser().parse_args(argv)
    expires = timedelta(minutes=args.minutes) if args.minutes else None
    token = create_identity_token(args.identity_id, args.role, expires)
    print(token)
    return token


if __name__ == "__main__":
    main()
