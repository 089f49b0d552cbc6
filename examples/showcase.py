#!/usr/bin/env python3
"""MI client showcase against a live deployment.

Demonstrates:
  - Signing in with username/password from the environment
  - Submitting a file with a checksum-verified upload
  - Listing tasks and downloading verified models

Requires API_URL, USER_POOL_ID, CLIENT_ID (and IDENTITY_POOL_ID for signed
deployments) plus USERNAME and PASSWORD in the environment or a .env file.

Usage:
  python examples/showcase.py submit report.pdf --company "ACME Holdings"
  python examples/showcase.py list
  python examples/showcase.py model <jobid>
"""

import argparse
import asyncio
import os
from pathlib import Path

from scribe_mi import MIClient, MIFileType, ScribeMIError, UsernamePassword, setup_logging


async def submit(client: MIClient, path: Path, company: str | None) -> None:
    filetype = MIFileType(path.suffix.lstrip(".").lower())
    jobid = await client.submit_task(path.read_bytes(), filetype, filename=path.name, companyname=company)
    print(f"Submitted {path.name} as job {jobid}")


async def list_tasks(client: MIClient, company: str | None) -> None:
    for task in await client.list_tasks(company):
        name = task.original_filename or task.client_filename or "-"
        print(f"{task.jobid}  {task.status:<15} {task.company_name or '-':<25} {name}")


async def show_model(client: MIClient, jobid: str) -> None:
    task = await client.get_task(jobid)
    model = await client.fetch_model(task)
    print(model.model_dump_json(by_alias=True, indent=2))


async def run(args: argparse.Namespace) -> None:
    credentials = UsernamePassword(username=os.environ["USERNAME"], password=os.environ["PASSWORD"])
    async with MIClient() as client:
        await client.authenticate(credentials)
        if args.command == "submit":
            await submit(client, args.file, args.company)
        elif args.command == "list":
            await list_tasks(client, args.company)
        else:
            await show_model(client, args.jobid)


def main() -> None:
    parser = argparse.ArgumentParser(description="MI client showcase")
    parser.add_argument("--log-level", default=None)
    commands = parser.add_subparsers(dest="command", required=True)

    submit_parser = commands.add_parser("submit", help="Upload a document for processing")
    submit_parser.add_argument("file", type=Path)
    submit_parser.add_argument("--company")

    list_parser = commands.add_parser("list", help="List submitted tasks")
    list_parser.add_argument("--company")

    model_parser = commands.add_parser("model", help="Download the model of a finished task")
    model_parser.add_argument("jobid")

    args = parser.parse_args()
    setup_logging(level=args.log_level)
    try:
        asyncio.run(run(args))
    except ScribeMIError as e:
        parser.exit(1, f"error: {e}\n")


if __name__ == "__main__":
    main()
