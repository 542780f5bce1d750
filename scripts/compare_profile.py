"""
Compute a profile's total performance locally and compare it with the live value.

Usage:
    python scripts/compare_profile.py <user> [-r RULESET] [--database]
"""

import argparse
import asyncio
import sys
from pathlib import Path

from loguru import logger

# Add project root to path so the package imports without installation
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from ppdiff.core.exceptions import PpdiffError  # noqa: E402
from ppdiff.models.ruleset import Ruleset  # noqa: E402
from ppdiff.services.container import DatabaseNotConfiguredError, ServiceContainer  # noqa: E402
from ppdiff.services.formatting import render_comparison  # noqa: E402


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Computes the total performance (pp) of a profile.")
    parser.add_argument("user", help="User ID is preferred, but username should also work.")
    parser.add_argument(
        "-r",
        "--ruleset",
        type=int,
        choices=[r.value for r in Ruleset],
        default=Ruleset.OSU.value,
        help="0 - osu!, 1 - osu!taiko, 2 - osu!catch, 3 - osu!mania. Defaults to osu!.",
    )
    parser.add_argument(
        "--database",
        action="store_true",
        help="Read top plays from the score database (DATABASE_URL) instead of the API.",
    )
    return parser.parse_args(argv)


async def run(args: argparse.Namespace, container: ServiceContainer | None = None) -> int:
    container = container or ServiceContainer()
    try:
        service = container.profile_service("database" if args.database else "api")
        comparison = await service.compare(args.user, Ruleset(args.ruleset))
    except (PpdiffError, DatabaseNotConfiguredError) as e:
        logger.error(str(e))
        return 1
    finally:
        await container.close()

    print(render_comparison(comparison))
    return 0


def main(argv: list[str] | None = None) -> int:
    return asyncio.run(run(parse_args(argv)))


if __name__ == "__main__":
    sys.exit(main())
