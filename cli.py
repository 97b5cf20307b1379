#!/usr/bin/env python
"""
Command-line interface for the OSM element fetcher

Usage:
    python cli.py way 34211254
    python cli.py way 34211254 --single --output way.json
    python cli.py node 100
"""

import os
import sys
import json
import asyncio
import argparse
import dataclasses

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import requests
from loguru import logger
from xml.etree.ElementTree import ParseError

from osmfetch import OSMElementCollector, OSMFetchError
from osmfetch.config import get_config, validate_config


DEFAULT_WAY_ID = 34211254


def setup_logging(verbose: bool = False):
    """Configure logging"""
    logger.remove()
    level = "DEBUG" if verbose else "INFO"
    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{message}</cyan>",
        level=level
    )


def build_collector(args) -> OSMElementCollector:
    """Collector over a copy of the global config with CLI overrides applied"""
    base = get_config()
    config = dataclasses.replace(
        base,
        best_effort=base.best_effort or args.best_effort,
        resolve_timeout=base.resolve_timeout if args.timeout is None else args.timeout,
    )
    validate_config(config)
    return OSMElementCollector(config=config)


def emit(payload, output_path=None):
    """Print JSON to stdout or write it to a file"""
    text = json.dumps(payload, indent=2, ensure_ascii=False)
    if output_path:
        os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(text + "\n")
        logger.info(f"Saved to {output_path}")
    else:
        print(text)


def run(args, go) -> int:
    """Build the collector and run go(collector), logging failures"""
    try:
        collector = build_collector(args)
    except ValueError as e:
        logger.error(f"Invalid options: {e}")
        return 1
    
    try:
        return asyncio.run(go(collector))
    except (requests.exceptions.RequestException, ParseError, OSMFetchError, asyncio.TimeoutError) as e:
        logger.error(f"Fetch failed: {type(e).__name__}: {e}")
        return 1


def cmd_way(args):
    """Fetch a way and resolve its nodes"""
    setup_logging(args.verbose)
    
    async def go(collector):
        if args.single:
            way = await collector.fetch_way(args.id)
            emit(way.model_dump(exclude_none=True), args.output)
        else:
            collection = await collector.fetch_way_set(args.id)
            missing = collection.missing_node_refs()
            if missing:
                logger.warning(f"{len(missing)} node refs left unresolved: {missing}")
            emit(collection.model_dump(exclude_none=True), args.output)
        return 0
    
    return run(args, go)


def cmd_node(args):
    """Fetch a single node"""
    setup_logging(args.verbose)
    
    async def go(collector):
        node = await collector.fetch_node(args.id)
        emit(node.model_dump(exclude_none=True), args.output)
        return 0
    
    return run(args, go)


def add_common_arguments(subparser):
    subparser.add_argument("--output", "-o", help="Write JSON to this file instead of stdout")
    subparser.add_argument("--best-effort", action="store_true", help="Drop nodes that fail to fetch instead of failing")
    subparser.add_argument("--timeout", type=float, help="Deadline for node resolution (seconds)")


def main():
    parser = argparse.ArgumentParser(
        description="OSM element fetcher CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Fetch a way with all of its nodes:
    python cli.py way 34211254
  
  Fetch only the way record:
    python cli.py way 34211254 --single
  
  Fetch a node:
    python cli.py node 100 --output node.json
        """
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    
    subparsers = parser.add_subparsers(dest="command", help="Commands")
    
    # Way command
    way_parser = subparsers.add_parser("way", help="Fetch a way and resolve its node refs")
    way_parser.add_argument("id", type=int, nargs="?", default=DEFAULT_WAY_ID, help=f"Way id (default: {DEFAULT_WAY_ID})")
    way_parser.add_argument("--single", action="store_true", help="Print only the way record")
    add_common_arguments(way_parser)
    way_parser.set_defaults(func=cmd_way)
    
    # Node command
    node_parser = subparsers.add_parser("node", help="Fetch a single node")
    node_parser.add_argument("id", type=int, help="Node id")
    add_common_arguments(node_parser)
    node_parser.set_defaults(func=cmd_node)
    
    args = parser.parse_args()
    
    if not args.command:
        parser.print_help()
        return 1
    
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
