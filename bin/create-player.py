"""Create a player account in the configured persistence backend.

Usage: python bin/create-player.py <username> <password>

The backend is chosen by ACCOUNTS_PERSISTENCE_MODE. In memory mode the
player only lives as long as this process, which is useful for smoke
testing the wiring and little else.
"""

import asyncio
import sys
from pathlib import Path

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "backend"))

from accounts.bootstrap import build_dependencies
from accounts.context import RequestContext
from accounts.dal.errors import PlayerConflictError, RepositoryError
from accounts.logging import setup_logging
from accounts.players import PlayerService
from accounts.settings import AccountsSettings


async def main() -> None:
    if len(sys.argv) != 3:
        print(f"Usage: {sys.argv[0]} <username> <password>")
        sys.exit(1)

    username, password = sys.argv[1], sys.argv[2]
    setup_logging()
    deps = build_dependencies(AccountsSettings())

    try:
        await deps.start()
        service = PlayerService(deps.repository)
        try:
            player = await service.register(RequestContext.with_timeout(10.0), username, password)
        except PlayerConflictError as e:
            print(f"Error: {e}")
            sys.exit(1)
        except RepositoryError as e:
            print(f"Error: could not create player ({e.kind}): {e}")
            sys.exit(2)

        print(f"Player created: {player.username} (id: {player.id})")
    finally:
        await deps.close()


if __name__ == "__main__":
    asyncio.run(main())
