"""
Metrics publisher for Prometheus HTTP server.

Starts and manages the Prometheus metrics HTTP server that exposes
sanitization metrics on the /metrics endpoint while a dump is processed.
"""

import logging
import time
from typing import Optional

from prometheus_client import (
    start_http_server,
    Gauge,
    Info,
    CollectorRegistry,
    REGISTRY,
)

from .registry import get_or_create_metric

logger = logging.getLogger(__name__)


class MetricsPublisher:
    """
    Publishes metrics to Prometheus

    Serves the /metrics endpoint from a background thread for the length of
    one sanitization run.
    """

    def __init__(
        self,
        port: int = 9091,
        registry: Optional[CollectorRegistry] = None,
    ):
        """
        Initialize metrics publisher

        Args:
            port: Port to expose metrics on (default: 9091)
            registry: Custom Prometheus registry (default: global REGISTRY)
        """
        self.port = port
        self.registry = registry or REGISTRY
        self._server = None
        self._thread = None

    def start(self) -> None:
        """Start the metrics HTTP server"""
        if self.is_started():
            logger.warning(f"Metrics server already running on port {self.port}")
            return

        try:
            self._server, self._thread = start_http_server(
                self.port, registry=self.registry
            )
        except OSError as e:
            logger.error(f"Metrics server cannot bind port {self.port}: {e}")
            raise RuntimeError(
                f"Metrics server port {self.port} is unavailable: {e}"
            ) from e

        logger.info(f"Metrics server started on port {self.port}")

    def stop(self) -> None:
        """Shut the metrics HTTP server down, if running"""
        if not self.is_started():
            return

        self._server.shutdown()
        self._server.server_close()
        self._thread.join(timeout=5)
        self._server = None
        self._thread = None
        logger.info("Metrics server stopped")

    def is_started(self) -> bool:
        return self._server is not None


class ApplicationInfo:
    """
    Application metadata and version information
    """

    def __init__(
        self,
        app_name: str = "pgdump-sanitizer",
        version: str = "1.0.0",
        registry: Optional[CollectorRegistry] = None,
    ):
        """
        Initialize application info metrics

        Args:
            app_name: Application name
            version: Application version
            registry: Custom Prometheus registry (default: global REGISTRY)
        """
        self.registry = registry or REGISTRY

        self.info = get_or_create_metric(
            lambda: Info("application", "Application metadata", registry=self.registry),
            "application_info",
            self.registry,
        )
        self.info.info({
            "name": app_name,
            "version": version,
        })

        self._start_time = time.time()

        self.uptime_seconds = get_or_create_metric(
            lambda: Gauge(
                "application_uptime_seconds",
                "Application uptime in seconds",
                registry=self.registry,
            ),
            "application_uptime_seconds",
            self.registry,
        )

    def update_uptime(self) -> None:
        self.uptime_seconds.set(time.time() - self._start_time)
