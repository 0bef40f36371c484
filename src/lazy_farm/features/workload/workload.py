"""Workload snapshots for the farm table."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import TYPE_CHECKING

from ...core.base import BaseClusterService
from ...core.types import UNASSIGNED_NODE, UNKNOWN_OWNER, WorkloadSnapshot

if TYPE_CHECKING:
    from kubernetes.client import V1ContainerStatus, V1OwnerReference, V1Pod


class WorkloadService(BaseClusterService):
    """Service for listing workload snapshots."""

    def list_snapshots(self) -> list[WorkloadSnapshot]:
        """Fetch pods and return them newest first. Gateway errors propagate."""
        pods = self.gateway.list_workloads(self.config.namespace, self.config.label_selector)
        return sort_snapshots(snapshot_from_pod(pod, self.config.owner_label) for pod in pods)


def sort_snapshots(snapshots: Iterable[WorkloadSnapshot]) -> list[WorkloadSnapshot]:
    """Sort by created_at descending; snapshots without one go last, in input order."""
    snapshots = list(snapshots)
    dated = [s for s in snapshots if s.created_at is not None]
    undated = [s for s in snapshots if s.created_at is None]
    dated.sort(key=lambda s: s.created_at, reverse=True)
    return dated + undated


def snapshot_from_pod(pod: V1Pod, owner_label: str) -> WorkloadSnapshot:
    metadata = pod.metadata
    spec = pod.spec
    status = pod.status
    container_statuses = (status.container_statuses if status else None) or []
    labels = (metadata.labels if metadata else None) or {}

    return WorkloadSnapshot(
        name=metadata.name,
        status=_pod_status(pod),
        node=(spec.node_name if spec else None) or UNASSIGNED_NODE,
        owner_tag=labels.get(owner_label) or UNKNOWN_OWNER,
        controller_id=controller_id_from_pod(pod),
        created_at=metadata.creation_timestamp,
        started_at=status.start_time if status else None,
        finished_at=_latest_finish(container_statuses),
    )


def controller_id_from_pod(pod: V1Pod) -> str | None:
    owner_references = (pod.metadata.owner_references if pod.metadata else None) or []
    if not owner_references:
        return None
    return controller_id_from_owner(_select_owner_reference(owner_references).name)


def controller_id_from_owner(owner_name: str | None) -> str | None:
    """Trailing hyphen-delimited token of the owning resource's name."""
    if not owner_name:
        return None
    return owner_name.rsplit("-", 1)[-1] or None


def _select_owner_reference(owner_references: list[V1OwnerReference]) -> V1OwnerReference:
    for ref in owner_references:
        if ref.controller:
            return ref
    return owner_references[0]


def _pod_status(pod: V1Pod) -> str:
    """Phase, unless a container is stuck waiting (e.g. CrashLoopBackOff)."""
    status = pod.status
    if status is None:
        return "Unknown"
    for container_status in status.container_statuses or []:
        waiting = container_status.state.waiting if container_status.state else None
        if waiting and waiting.reason and waiting.reason != "ContainerCreating":
            return waiting.reason
    return status.phase or "Unknown"


def _latest_finish(container_statuses: list[V1ContainerStatus]) -> datetime | None:
    finished = [
        cs.state.terminated.finished_at
        for cs in container_statuses
        if cs.state and cs.state.terminated and cs.state.terminated.finished_at
    ]
    return max(finished) if finished else None
