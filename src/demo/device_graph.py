"""
Sample network-topology graph used to exercise the driver layer.

Builds one large parameterized script: a Hub node and ``device_count``
Device nodes, each with ``interface_count`` Interface nodes wired back to
the hub through InterfaceHub nodes:

    (Device)-[:IF]->(Interface)-[:CONN]->(InterfaceHub)<-[:IFH]-(Hub)

All ids are UUID4 strings passed as parameters, never inlined.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from src.dbdriver.executor import GraphDriverProtocol
from src.dbdriver.models import QueryRequest, WriteSummary

DEVICE_QUERY = "MATCH (n:Device) RETURN n"


@dataclass(frozen=True)
class DeviceGraphCounts:
    """Mutations a device graph script is expected to produce."""

    nodes_created: int
    relationships_created: int


def expected_counts(device_count: int, interface_count: int) -> DeviceGraphCounts:
    """Nodes: hub + devices + (interface, interface hub) per interface.

    Relationships: IF, CONN and IFH per interface.
    """
    interfaces = device_count * interface_count
    return DeviceGraphCounts(
        nodes_created=1 + device_count + 2 * interfaces,
        relationships_created=3 * interfaces,
    )


def build_device_graph_query(
    device_count: int,
    interface_count: int,
    id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
) -> QueryRequest:
    """Build the create script and its parameters.

    Args:
        device_count: Number of Device nodes (at least 1)
        interface_count: Interfaces per device (0 or more)
        id_factory: Source of node ids

    Returns:
        QueryRequest holding the script and one id/name parameter pair per node

    Raises:
        ValueError: If the counts are out of range
    """
    if device_count < 1:
        raise ValueError(f"device_count must be at least 1, got {device_count}")
    if interface_count < 0:
        raise ValueError(f"interface_count must not be negative, got {interface_count}")

    params: dict[str, Any] = {"hub_id": id_factory()}
    lines = ["CREATE (h:Hub {hub_id: $hub_id})", "WITH h"]

    for i in range(device_count):
        lines.append(
            f"CREATE (d{i}:Device {{device_id: $device{i}_id, name: $device{i}_name}})"
        )
        if interface_count:
            lines.append("WITH *")
        params[f"device{i}_id"] = id_factory()
        params[f"device{i}_name"] = f"device{i}"

        for j in range(interface_count):
            key = f"interface{i}_{j}"
            lines.append(
                f"CREATE (d{i})-[:IF]->"
                f"(:Interface {{interface_id: ${key}_id, name: ${key}_name}})"
                "-[:CONN]->(:InterfaceHub)<-[:IFH]-(h)"
            )
            params[f"{key}_id"] = id_factory()
            params[f"{key}_name"] = f"interface{j}"

        if i < device_count - 1:
            lines.append("WITH h")

    return QueryRequest(cypher="\n".join(lines), params=params)


async def create_devices(
    driver: GraphDriverProtocol,
    device_count: int,
    interface_count: int,
) -> WriteSummary:
    """Create a device graph in one managed write and return its counters."""
    request = build_device_graph_query(device_count, interface_count)
    result = await driver.write_commit_tx(request)
    return result.summary or WriteSummary()


async def query_devices(driver: GraphDriverProtocol) -> list[dict[str, Any]]:
    """Return every Device node as {"labels": [...], "properties": {...}}."""
    result = await driver.read_single_tx(QueryRequest(DEVICE_QUERY))
    devices: list[dict[str, Any]] = []
    for record in result.records:
        for node in record.values():
            devices.append(
                {
                    "labels": sorted(node.labels),
                    "properties": dict(node.items()),
                }
            )
    return devices
