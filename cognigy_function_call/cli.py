"""Terminal client for checking credentials and selections outside the host.

Prints the same options the configuration UI would show, as JSON.

Usage:
    cognigy-function-call flows
    cognigy-function-call nodes --flow '{"id":"6570...","referenceId":"a1b2..."}'

Credentials come from COGNIGY_API_ENDPOINT, COGNIGY_API_KEY and
COGNIGY_PROJECT_ID (a .env file in the working directory is loaded first).
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from argparse import ArgumentParser

from dotenv import load_dotenv

from cognigy_function_call.client import Settings
from cognigy_function_call.config import Credentials
from cognigy_function_call.resolvers import FlowResolver, NodeResolver, Option


def credentials_from_env(settings: Settings) -> Credentials:
    return Credentials(
        api_base_url=settings.api_endpoint,
        api_key=settings.api_key,
        project_id=settings.project_id,
    )


async def _list_flows(settings: Settings) -> list[Option]:
    return await FlowResolver(page_size=settings.page_size).resolve(credentials_from_env(settings))


async def _list_nodes(settings: Settings, flow: str) -> list[Option]:
    return await NodeResolver(page_size=settings.page_size).resolve(credentials_from_env(settings), flow)


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    load_dotenv()
    settings = Settings.from_env()
    logging.basicConfig(level=settings.log_level, format="%(levelname)s: %(message)s")

    parser = ArgumentParser(
        prog="cognigy-function-call",
        description="List the flow and entry-node options of the Function Call node",
    )
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    sub.add_parser("flows", help="List the flows of the configured project")

    nodes_p = sub.add_parser("nodes", help="List the entry nodes of a flow")
    nodes_p.add_argument(
        "--flow",
        required=True,
        metavar="SELECTION",
        help="Flow selection value as printed by 'flows' (a bare flow id also works)",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if not credentials_from_env(settings).is_complete:
        print(
            "COGNIGY_API_ENDPOINT, COGNIGY_API_KEY and COGNIGY_PROJECT_ID must all be set",
            file=sys.stderr,
        )
        sys.exit(2)

    if args.command == "flows":
        options = asyncio.run(_list_flows(settings))
    else:
        options = asyncio.run(_list_nodes(settings, args.flow))

    print(json.dumps(options, indent=2))


if __name__ == "__main__":
    main()
