"""Shared pytest fixtures for tests."""

import time
from datetime import UTC, datetime
from unittest.mock import Mock

import pytest
from kubernetes.client import (
    V1ContainerState,
    V1ContainerStateTerminated,
    V1ContainerStateWaiting,
    V1ContainerStatus,
    V1ObjectMeta,
    V1OwnerReference,
    V1Pod,
    V1PodSpec,
    V1PodStatus,
)

from lazy_farm.core.config import FarmConfig

NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=UTC)


def wait_for(predicate, timeout: float = 2.0) -> bool:
    """Poll until predicate() is truthy; background threads need a moment."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return bool(predicate())


@pytest.fixture
def farm_config():
    return FarmConfig(node_name="ws-01")


@pytest.fixture
def mock_gateway():
    gateway = Mock()
    gateway.list_workloads.return_value = []
    gateway.get_node_label.return_value = "true"
    return gateway


@pytest.fixture
def make_pod():
    def _make_pod(
        name: str,
        phase: str = "Running",
        created_at: datetime | None = None,
        started_at: datetime | None = None,
        node: str | None = "farm-node-1",
        owner: str | None = "render-beauty-abc12",
        labels: dict[str, str] | None = None,
        container_states: list[V1ContainerState] | None = None,
    ) -> V1Pod:
        owner_references = None
        if owner:
            owner_references = [
                V1OwnerReference(api_version="batch/v1", kind="Job", name=owner, uid="uid-1", controller=True)
            ]
        container_statuses = None
        if container_states is not None:
            container_statuses = [
                V1ContainerStatus(
                    name=f"c{i}", image="render:latest", image_id="", ready=False, restart_count=0, state=state
                )
                for i, state in enumerate(container_states)
            ]
        return V1Pod(
            metadata=V1ObjectMeta(
                name=name,
                labels=labels if labels is not None else {"artist": "alice"},
                creation_timestamp=created_at,
                owner_references=owner_references,
            ),
            spec=V1PodSpec(containers=[], node_name=node),
            status=V1PodStatus(phase=phase, start_time=started_at, container_statuses=container_statuses),
        )

    return _make_pod


def terminated_at(finished_at: datetime) -> V1ContainerState:
    return V1ContainerState(terminated=V1ContainerStateTerminated(exit_code=0, finished_at=finished_at))


def waiting_for(reason: str) -> V1ContainerState:
    return V1ContainerState(waiting=V1ContainerStateWaiting(reason=reason))
