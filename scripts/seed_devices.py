#!/usr/bin/env python3
"""
Seed a Neo4j or Memgraph instance with a sample device graph.

Creates one Hub, N Device nodes and M Interface nodes per device in a
single managed write, then optionally lists the Device nodes back.

Usage:
    python scripts/seed_devices.py --devices 50 --interfaces 20
    python scripts/seed_devices.py --mode memgraph --list
    python scripts/seed_devices.py --repeat 10  # write load

Environment Variables:
    GRAPH_MODE: neo4j or memgraph (default: neo4j)
    GRAPH_HOST / GRAPH_PORT: Bolt endpoint (default: localhost:7687)
    GRAPH_USER / GRAPH_PASSWORD: credentials
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.core.config import Settings, get_settings
from src.core.logging import clear_correlation_id, set_correlation_id, setup_structured_logging
from src.dbdriver import (
    DriverConfigurationError,
    DriverConnectionError,
    TransactionError,
    TransactionExecutor,
)
from src.demo.device_graph import create_devices, expected_counts, query_devices


async def seed(settings: Settings, devices: int, interfaces: int, repeat: int, list_devices: bool) -> int:
    """Connect, seed the graph ``repeat`` times and print a summary."""
    logger = setup_structured_logging()
    print(f"\nConnecting to {settings.graph_mode} at {settings.graph_host}:{settings.graph_port}...")

    try:
        executor = await TransactionExecutor.connect(settings, logger=logger)
    except (DriverConfigurationError, DriverConnectionError) as e:
        print(f"\n✗ Failed to connect: {e}")
        return 1
    print("✓ Connected")

    expected = expected_counts(devices, interfaces)
    try:
        for run in range(1, repeat + 1):
            set_correlation_id(f"seed-run-{run}")
            try:
                summary = await create_devices(executor, devices, interfaces)
            except TransactionError as e:
                hint = " (retryable)" if e.retryable else ""
                print(f"✗ Run {run} failed{hint}: {e}")
                return 1
            print(
                f"✓ Run {run}: {summary.nodes_created}/{expected.nodes_created} nodes, "
                f"{summary.relationships_created}/{expected.relationships_created} relationships"
            )

        if list_devices:
            for device in await query_devices(executor):
                print("\n***")
                print("node labels:")
                for label in device["labels"]:
                    print(f"  {label}")
                print("node properties:")
                for key, value in device["properties"].items():
                    print(f"  {key}: {value}")
    finally:
        clear_correlation_id()
        await executor.close()

    print("\n✓ Seeding complete!")
    return 0


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Seed a graph database with a sample device topology",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--mode", choices=["neo4j", "memgraph"], help="Override GRAPH_MODE")
    parser.add_argument("--devices", type=int, default=50, help="Device nodes to create")
    parser.add_argument("--interfaces", type=int, default=20, help="Interfaces per device")
    parser.add_argument("--repeat", type=int, default=1, help="Number of seeding runs")
    parser.add_argument("--list", action="store_true", help="List Device nodes afterwards")

    args = parser.parse_args()

    settings = get_settings()
    if args.mode:
        settings = settings.model_copy(update={"graph_mode": args.mode})

    sys.exit(asyncio.run(seed(settings, args.devices, args.interfaces, args.repeat, args.list)))


if __name__ == "__main__":
    main()
