"""
Role administration commands.

    cabinshare-roles grant-super-admin <user_id> [--email EMAIL]
    cabinshare-roles set-system-role <user_id> <role>
    cabinshare-roles backfill <houses.json>

The backfill file is a JSON list of legacy houses:
    [{"id": "...", "manager_id": "...", "owner_ids": ["...", "..."]}]
"""

import argparse
import json
import sys
from pathlib import Path

from cabinshare.core.logging_config import logger
from cabinshare.dependencies import role_cache
from cabinshare.models.role import SystemRole
from cabinshare.repositories.user_roles_repository import UserRolesRepository
from cabinshare.services.role_service import LegacyHouse, RoleService


def load_legacy_houses(path: Path) -> list[LegacyHouse]:
    """Read legacy house ownership records from a JSON file"""
    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise ValueError("Backfill file must contain a JSON list of houses")
    return [
        LegacyHouse(
            id=str(item["id"]),
            manager_id=item.get("manager_id") or None,
            owner_ids=[str(owner_id) for owner_id in item.get("owner_ids") or []],
        )
        for item in raw
    ]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cabinshare-roles", description=__doc__.splitlines()[1])
    subparsers = parser.add_subparsers(dest="command", required=True)

    grant = subparsers.add_parser("grant-super-admin", help="Promote a user to super_admin")
    grant.add_argument("user_id")
    grant.add_argument("--email", default=None)

    set_role = subparsers.add_parser("set-system-role", help="Set a user's system role")
    set_role.add_argument("user_id")
    set_role.add_argument("role", choices=[role.value for role in SystemRole])

    backfill = subparsers.add_parser("backfill", help="Create house grants from legacy houses")
    backfill.add_argument("houses_file", type=Path)

    return parser


def run(args: argparse.Namespace, db) -> dict:
    """Execute a parsed command against a database session"""
    service = RoleService(db, UserRolesRepository(db, role_cache))

    if args.command == "grant-super-admin":
        record = service.set_system_role(args.user_id, SystemRole.SUPER_ADMIN, args.email)
        return {"user_id": record.user_id, "system_role": record.system_role}

    if args.command == "set-system-role":
        record = service.set_system_role(args.user_id, SystemRole(args.role))
        return {"user_id": record.user_id, "system_role": record.system_role}

    houses = load_legacy_houses(args.houses_file)
    return service.backfill_from_houses(houses)


def main(argv: list[str] | None = None) -> int:
    from cabinshare.database import SessionLocal

    args = build_parser().parse_args(argv)
    db = SessionLocal()
    try:
        result = run(args, db)
    except Exception as e:
        db.rollback()
        logger.error(f"{args.command} failed: {e}")
        return 1
    finally:
        db.close()

    print(json.dumps(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
