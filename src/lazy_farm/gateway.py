"""Kubernetes gateway - handles all cluster API interactions."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

from kubernetes.client.exceptions import ApiException
from urllib3.exceptions import HTTPError

from .core.errors import GatewayError
from .features.workload.workload import controller_id_from_pod

if TYPE_CHECKING:
    from kubernetes.client import CoreV1Api, V1Pod
    from urllib3.response import HTTPResponse


def describe_error(exc: BaseException) -> str:
    """Short, operator-readable description of a cluster failure."""
    if isinstance(exc, ApiException):
        return f"{exc.status} {exc.reason}"
    return str(exc) or type(exc).__name__


@contextmanager
def _gateway_call(action: str) -> Iterator[None]:
    try:
        yield
    except (ApiException, HTTPError, OSError) as e:
        raise GatewayError(f"{action}: {describe_error(e)}") from e


class ClusterGateway:
    """Narrow wrapper around the CoreV1 API used by the dashboard."""

    def __init__(self, core_api: CoreV1Api) -> None:
        self.core_api = core_api

    def list_workloads(self, namespace: str, label_selector: str) -> list[V1Pod]:
        with _gateway_call(f"Listing pods in '{namespace}'"):
            response = self.core_api.list_namespaced_pod(namespace, label_selector=label_selector)
        return list(response.items or [])

    def open_log_stream(
        self, namespace: str, pod_name: str, follow: bool = True, tail_lines: int = 150
    ) -> HTTPResponse:
        """Open the raw byte stream of a pod's log. The caller must close it."""
        with _gateway_call(f"Opening logs for '{pod_name}'"):
            return self.core_api.read_namespaced_pod_log(
                name=pod_name,
                namespace=namespace,
                follow=follow,
                tail_lines=tail_lines,
                _preload_content=False,
            )

    def get_node_label(self, node_name: str, key: str) -> str | None:
        with _gateway_call(f"Reading node '{node_name}'"):
            node = self.core_api.read_node(node_name)
        labels = (node.metadata.labels if node.metadata else None) or {}
        return labels.get(key)

    def set_node_label(self, node_name: str, key: str, value: str) -> None:
        body = {"metadata": {"labels": {key: value}}}
        with _gateway_call(f"Labelling node '{node_name}'"):
            self.core_api.patch_node(node_name, body)

    def delete_workloads_by_controller(self, namespace: str, controller_id: str, label_selector: str = "") -> list[str]:
        """Delete every pod whose derived controller id matches.

        All deletions are attempted; failures are collected and raised together.
        Returns the names of the deleted pods.
        """
        pods = self.list_workloads(namespace, label_selector)
        deleted: list[str] = []
        failures: list[str] = []
        for pod in pods:
            if controller_id_from_pod(pod) != controller_id:
                continue
            name = pod.metadata.name
            try:
                self.core_api.delete_namespaced_pod(name, namespace)
            except (ApiException, HTTPError, OSError) as e:
                failures.append(f"{name} ({describe_error(e)})")
            else:
                deleted.append(name)

        if failures:
            raise GatewayError(f"Failed to delete {len(failures)} pod(s) of '{controller_id}': {', '.join(failures)}")
        return deleted
