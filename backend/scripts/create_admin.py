#!/usr/bin/env python3
"""Create an approved admin account directly in the document store."""
from __future__ import annotations

import argparse
import asyncio

from msga.core.exceptions import MSGAError
from msga.db.session import async_session_factory, engine
from msga.db.store import DocumentStore, create_schema
from msga.services.users import create_admin


async def _run(username: str, sh_profile_url: str, password: str) -> int:
    await create_schema(engine)
    store = DocumentStore(async_session_factory)
    await store.init()
    try:
        user = await create_admin(store, username, sh_profile_url, password)
    except MSGAError as exc:
        print(f"Could not create admin '{username}': {exc.message}")
        return 1
    finally:
        await engine.dispose()
    print(f"Created admin: {user['username']} (id: {user['id']})")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Create an approved admin account.")
    parser.add_argument("username", help="Username")
    parser.add_argument("sh_profile_url", help="ScribbleHub profile URL")
    parser.add_argument("password", help="Password")
    args = parser.parse_args()
    raise SystemExit(asyncio.run(_run(args.username, args.sh_profile_url, args.password)))


if __name__ == "__main__":
    main()
