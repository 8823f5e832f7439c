"""
Unit tests for the sample device-graph builder and its driver helpers.
"""

from __future__ import annotations

import itertools

import pytest

from src.dbdriver.executor import TransactionExecutor
from src.dbdriver.models import WriteSummary
from src.demo.device_graph import (
    DEVICE_QUERY,
    build_device_graph_query,
    create_devices,
    expected_counts,
    query_devices,
)
from tests.fakes import FakeBackendDriver, FakeCounters, FakeNode, FakeSummary


def _sequential_ids():
    counter = itertools.count()
    return lambda: f"id-{next(counter)}"


class TestBuildDeviceGraphQuery:
    """Tests for the script builder."""

    def test_single_device_with_two_interfaces(self) -> None:
        request = build_device_graph_query(1, 2, id_factory=_sequential_ids())

        assert request.cypher.splitlines() == [
            "CREATE (h:Hub {hub_id: $hub_id})",
            "WITH h",
            "CREATE (d0:Device {device_id: $device0_id, name: $device0_name})",
            "WITH *",
            "CREATE (d0)-[:IF]->(:Interface {interface_id: $interface0_0_id, "
            "name: $interface0_0_name})-[:CONN]->(:InterfaceHub)<-[:IFH]-(h)",
            "CREATE (d0)-[:IF]->(:Interface {interface_id: $interface0_1_id, "
            "name: $interface0_1_name})-[:CONN]->(:InterfaceHub)<-[:IFH]-(h)",
        ]
        assert request.params == {
            "hub_id": "id-0",
            "device0_id": "id-1",
            "device0_name": "device0",
            "interface0_0_id": "id-2",
            "interface0_0_name": "interface0",
            "interface0_1_id": "id-3",
            "interface0_1_name": "interface1",
        }

    def test_devices_are_chained_through_the_hub(self) -> None:
        request = build_device_graph_query(3, 1)
        lines = request.cypher.splitlines()

        assert lines.count("WITH h") == 3
        assert lines[-1].startswith("CREATE (d2)-[:IF]->")

    def test_parameter_names_are_unambiguous(self) -> None:
        request = build_device_graph_query(12, 12)

        assert "interface1_11_id" in request.params
        assert "interface11_1_id" in request.params
        # hub + 12 devices + 144 interfaces, each with id and name (hub has no name)
        assert len(request.params) == 1 + 2 * 12 + 2 * 144

    def test_ids_are_unique_uuids(self) -> None:
        request = build_device_graph_query(5, 4)
        ids = [v for k, v in request.params.items() if k.endswith("_id")]

        assert len(ids) == len(set(ids))
        assert all(len(i) == 36 for i in ids)

    def test_devices_without_interfaces(self) -> None:
        request = build_device_graph_query(2, 0)

        assert "WITH *" not in request.cypher
        assert request.cypher.splitlines()[-1].startswith("CREATE (d1:Device")

    @pytest.mark.parametrize("devices,interfaces", [(0, 1), (-1, 0), (1, -1)])
    def test_rejects_out_of_range_counts(self, devices: int, interfaces: int) -> None:
        with pytest.raises(ValueError):
            build_device_graph_query(devices, interfaces)

    def test_expected_counts(self) -> None:
        counts = expected_counts(50, 20)

        assert counts.nodes_created == 1 + 50 + 2 * 1000
        assert counts.relationships_created == 3000


class TestDeviceHelpers:
    """Tests for create_devices() and query_devices() over the executor."""

    @pytest.mark.asyncio
    async def test_create_devices_returns_write_summary(
        self, executor: TransactionExecutor, backend: FakeBackendDriver
    ) -> None:
        expected = expected_counts(2, 3)
        backend.summary = FakeSummary(
            counters=FakeCounters(
                nodes_created=expected.nodes_created,
                relationships_created=expected.relationships_created,
            )
        )

        summary = await create_devices(executor, 2, 3)

        assert summary == WriteSummary(nodes_created=15, relationships_created=18)
        assert backend.tx_kinds == ["write"]
        assert "hub_id" in backend.runs[0][1]

    @pytest.mark.asyncio
    async def test_query_devices_returns_labels_and_properties(
        self, executor: TransactionExecutor, backend: FakeBackendDriver
    ) -> None:
        backend.records = [
            {"n": FakeNode({"Device"}, {"device_id": "a", "name": "device0"})},
            {"n": FakeNode({"Device"}, {"device_id": "b", "name": "device1"})},
        ]

        devices = await query_devices(executor)

        assert devices == [
            {"labels": ["Device"], "properties": {"device_id": "a", "name": "device0"}},
            {"labels": ["Device"], "properties": {"device_id": "b", "name": "device1"}},
        ]
        assert backend.runs[0][0].text == DEVICE_QUERY
        assert backend.tx_kinds == ["auto"]
