"""Command-line entry point for managing repository deploy keys.

Examples:
    python manage_deploy_keys.py list octocat/hello-world
    python manage_deploy_keys.py create 1296269 --title ci --key-file ~/.ssh/ci.pub --read-only
    python manage_deploy_keys.py delete octocat/hello-world 42
"""
import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional
import aiohttp
from dotenv import load_dotenv
from deploykeys.application.deploy_keys_client import DeployKeysClient
from deploykeys.domain.errors import DeployKeysError
from deploykeys.domain.models import ApiOptions, DeployKey, NewDeployKey, parse_repository
from deploykeys.infrastructure.aiohttp_connection import AiohttpApiConnection
from deploykeys.infrastructure.settings import ClientSettings

# Load environment variables from .env or env file
load_dotenv('.env') or load_dotenv('env')


logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subcommand per operation."""
    parser = argparse.ArgumentParser(description="Manage GitHub repository deploy keys")
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List deploy keys")
    list_parser.add_argument("repository", help="owner/name or repository id")
    list_parser.add_argument("--page-size", type=int)
    list_parser.add_argument("--start-page", type=int)
    list_parser.add_argument("--page-count", type=int)

    get_parser = subparsers.add_parser("get", help="Show one deploy key")
    get_parser.add_argument("repository", help="owner/name or repository id")
    get_parser.add_argument("key_id", type=int)

    create_parser = subparsers.add_parser("create", help="Add a deploy key")
    create_parser.add_argument("repository", help="owner/name or repository id")
    create_parser.add_argument("--title", required=True)
    key_group = create_parser.add_mutually_exclusive_group(required=True)
    key_group.add_argument("--key", help="Public key material")
    key_group.add_argument("--key-file", type=Path, help="File holding the public key")
    create_parser.add_argument("--read-only", action="store_true")

    delete_parser = subparsers.add_parser("delete", help="Remove a deploy key")
    delete_parser.add_argument("repository", help="owner/name or repository id")
    delete_parser.add_argument("key_id", type=int)

    return parser


def format_key(deploy_key: DeployKey) -> str:
    """Format a deploy key as one output line."""
    access = "read-only" if deploy_key.read_only else "read-write"
    created = deploy_key.created_at.isoformat() if deploy_key.created_at else "-"
    return f"{deploy_key.id:<12} {deploy_key.title:<30} {access:<10} {created}"


async def run(args: argparse.Namespace, client: DeployKeysClient) -> None:
    """Execute the selected subcommand."""
    repository = parse_repository(args.repository)

    if args.command == "list":
        options = ApiOptions(
            page_size=args.page_size,
            start_page=args.start_page,
            page_count=args.page_count
        )
        count = 0
        async for deploy_key in client.get_all(repository, options):
            print(format_key(deploy_key))
            count += 1
        logger.info(f"Listed {count} deploy keys")

    elif args.command == "get":
        deploy_key = await client.get(repository, args.key_id)
        print(format_key(deploy_key))
        print(deploy_key.key)

    elif args.command == "create":
        key = args.key if args.key is not None else args.key_file.expanduser().read_text().strip()
        new_key = NewDeployKey(title=args.title, key=key, read_only=args.read_only)
        deploy_key = await client.create(repository, new_key)
        print(format_key(deploy_key))

    elif args.command == "delete":
        await client.delete(repository, args.key_id)
        print(f"Deleted deploy key {args.key_id}")


async def main(argv: Optional[List[str]] = None) -> int:
    """Parse arguments and run the command against the API."""
    args = build_parser().parse_args(argv)

    try:
        settings = ClientSettings.from_env()
    except DeployKeysError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    if not settings.token:
        logger.warning("GITHUB_TOKEN is not set; only public data is reachable")

    client = DeployKeysClient(AiohttpApiConnection(settings))
    try:
        await run(args, client)
    except DeployKeysError as e:
        logger.error(f"{args.command} failed: {e}")
        return 1
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        logger.error(f"Request to {settings.base_url} failed: {e}", exc_info=True)
        return 1
    except OSError as e:
        # unreadable --key-file
        logger.error(f"{args.command} failed: {e}")
        return 1
    finally:
        await client.close()
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
