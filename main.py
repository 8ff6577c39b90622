"""Entry point performing a single request against a host/port service."""

import argparse
import asyncio
import json
import logging
import os
import sys

from request_client import (
    ClientConfig,
    HostPortRequestClient,
    RequestClientError,
    RequestOptions,
)


def _configure_logging() -> None:
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


def _parse_pairs(values: list[str] | None, separator: str, label: str) -> dict[str, str]:
    pairs: dict[str, str] = {}
    for raw in values or []:
        key, found, value = raw.partition(separator)
        if not found or not key.strip():
            raise ValueError(f"{label} must look like 'name{separator}value', got {raw!r}.")
        pairs[key.strip()] = value.strip()
    return pairs


def _json_body(raw: str) -> object:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise argparse.ArgumentTypeError(f"--body must be valid JSON: {exc.msg}") from exc


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Send one resilient HTTP request.")
    parser.add_argument("verb", help="HTTP method, e.g. GET or POST")
    parser.add_argument("host")
    parser.add_argument("port", type=int)
    parser.add_argument("path", nargs="?", default="")
    parser.add_argument("--service-path", default="")
    parser.add_argument("--header", action="append", help="Header as 'Name: value'")
    parser.add_argument("--query", action="append", help="Query parameter as 'key=value'")
    parser.add_argument("--body", type=_json_body, help="JSON request body")
    parser.add_argument("--correlation-id")
    return parser


async def _run(args: argparse.Namespace) -> int:
    logger = logging.getLogger("request-client")
    config = ClientConfig.load()
    client = HostPortRequestClient(args.host, args.port, args.service_path, config)
    options = RequestOptions(
        correlation_id=args.correlation_id,
        headers=_parse_pairs(args.header, ":", "--header"),
        query=_parse_pairs(args.query, "=", "--query"),
    )
    try:
        response = await client.method(args.verb, args.path, options, args.body)
    except RequestClientError:
        logger.exception("Request failed.")
        return 1

    logger.info("Request succeeded", extra={"status_code": response.status_code})
    print(response.text)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, configure logging and run the request."""
    _configure_logging()
    args = _build_parser().parse_args(argv)
    return asyncio.run(_run(args))


if __name__ == "__main__":
    sys.exit(main())
