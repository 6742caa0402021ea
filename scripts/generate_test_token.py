#!/usr/bin/env python3
"""Print bearer tokens for existing accounts, for poking at the API by hand.

Tokens are checked against the users table on every request, so the ids
must belong to real users (see ``create_admin.py``).
"""

from __future__ import annotations

import argparse

from cat_registry.api.deps import issue_smoke_token
from cat_registry.core.auth import Role


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--user-id", required=True)
    parser.add_argument("--admin-id")
    args = parser.parse_args()

    if args.admin_id:
        admin_token = issue_smoke_token(args.admin_id, role=Role.ADMIN)
        print(f"Admin Token:\n{admin_token}\n")

    user_token = issue_smoke_token(args.user_id, role=Role.USER)
    print(f"User Token:\n{user_token}")


if __name__ == "__main__":
    main()
