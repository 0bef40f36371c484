import argparse
from importlib.metadata import PackageNotFoundError, version
from typing import TYPE_CHECKING

from kubernetes import client, config
from kubernetes.config.config_exception import ConfigException
from rich.console import Console

if TYPE_CHECKING:
    from kubernetes.client import CoreV1Api

from .core.app import DashboardApp
from .core.config import FarmConfig
from .core.errors import GatewayError
from .core.utils import print_error, print_info, show_spinner
from .gateway import ClusterGateway

try:
    __version__ = version("lazy-farm")
except PackageNotFoundError:
    __version__ = "dev"

console = Console()


def main() -> None:
    """Interactive render farm dashboard."""
    args = _build_parser().parse_args()
    farm_config = _build_config(args)

    try:
        gateway = ClusterGateway(_create_core_client(args.context))
        app = DashboardApp(gateway, farm_config)
        with show_spinner():
            app.load()
    except (GatewayError, ConfigException) as e:
        print_error(f"Error: {e}")
        print_info("Make sure your kubeconfig is valid and the namespace exists.")
        raise SystemExit(1) from e

    try:
        app.run()
    except KeyboardInterrupt:
        console.print("\n👋 Goodbye!", style="cyan")


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: '{value}'") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Interactive render farm dashboard for Kubernetes")
    try:
        defaults = FarmConfig.from_env()
    except ValueError as e:
        parser.error(f"invalid LAZY_FARM_* environment setting: {e}")
    parser.add_argument("--version", action="version", version=f"lazy-farm {__version__}")
    parser.add_argument("--context", help="kubeconfig context to use", type=str, default=None)
    parser.add_argument("--namespace", help="Namespace the farm runs in", default=defaults.namespace)
    parser.add_argument("--selector", help="Label selector for farm pods", default=defaults.label_selector)
    parser.add_argument("--owner-label", help="Pod label naming who submitted it", default=defaults.owner_label)
    parser.add_argument("--node", help="Name of this machine's node", default=defaults.node_name)
    parser.add_argument(
        "--checkout-label", help="Node label marking the node as schedulable", default=defaults.checkout_label
    )
    parser.add_argument(
        "--tick", help="Refresh interval in seconds (0.1-1.0)", type=float, default=defaults.tick_interval
    )
    parser.add_argument(
        "--tail-lines", help="Log lines to show before following", type=_positive_int, default=defaults.tail_lines
    )
    return parser


def _build_config(args: argparse.Namespace) -> FarmConfig:
    return FarmConfig(
        namespace=args.namespace,
        label_selector=args.selector,
        owner_label=args.owner_label,
        node_name=args.node,
        checkout_label=args.checkout_label,
        tick_interval=args.tick,
        tail_lines=args.tail_lines,
    )


def _create_core_client(context: str | None) -> "CoreV1Api":
    """Create a CoreV1 client from kubeconfig, falling back to in-cluster config."""
    try:
        config.load_kube_config(context=context)
    except ConfigException:
        if context:
            raise
        config.load_incluster_config()
    return client.CoreV1Api()


if __name__ == "__main__":
    main()
