"""Farm actions: job cancellation and node checkout."""

from __future__ import annotations

import queue
import threading
from typing import TYPE_CHECKING

from ...core.base import BaseClusterService
from ...core.errors import GatewayError

if TYPE_CHECKING:
    from ...core.config import FarmConfig
    from ...gateway import ClusterGateway


class FarmActions(BaseClusterService):
    """Destructive actions an operator can take from the table."""

    def __init__(self, gateway: ClusterGateway, config: FarmConfig) -> None:
        super().__init__(gateway, config)
        self._outcomes: queue.Queue[str] = queue.Queue()

    def cancel_job(self, controller_id: str) -> threading.Thread:
        """Delete every pod of a job family in the background.

        The outcome is queued for drain_outcomes(), never raised.
        """
        thread = threading.Thread(
            target=self._cancel_job,
            args=(controller_id,),
            name=f"cancel-job-{controller_id}",
            daemon=True,
        )
        thread.start()
        return thread

    def _cancel_job(self, controller_id: str) -> None:
        try:
            deleted = self.gateway.delete_workloads_by_controller(
                self.config.namespace, controller_id, self.config.label_selector
            )
        except GatewayError as e:
            self._outcomes.put(f"Failed to cancel job {controller_id}: {e}")
            return
        self._outcomes.put(f"Cancelled job {controller_id} ({len(deleted)} pod(s))")

    def drain_outcomes(self) -> list[str]:
        """Messages from finished background actions, oldest first."""
        outcomes = []
        while True:
            try:
                outcomes.append(self._outcomes.get_nowait())
            except queue.Empty:
                break
        return outcomes

    def set_checkout(self, schedulable: bool) -> tuple[bool, str | None]:
        """Label the local node as (un)schedulable. Blocks until the cluster answers."""
        value = "true" if schedulable else "false"
        try:
            self.gateway.set_node_label(self.config.node_name, self.config.checkout_label, value)
        except GatewayError as e:
            state = "schedulable" if schedulable else "unschedulable"
            return False, f"Failed to mark host {state}: {e}"
        return True, None

    def is_host_schedulable(self) -> bool | None:
        """Whether the local node takes farm work. None when it is not part of the cluster."""
        try:
            value = self.gateway.get_node_label(self.config.node_name, self.config.checkout_label)
        except GatewayError:
            return None
        if value is None:
            return True
        return value.strip().lower() != "false"
