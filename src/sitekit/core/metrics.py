"""Prometheus metrics for the application.

Provides:
- Default process, platform and GC collectors
- Web vital histograms fed by browser reports
- Text exposition for the /metrics endpoint
"""

from typing import Literal

import structlog
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    GCCollector,
    Histogram,
    PlatformCollector,
    ProcessCollector,
    generate_latest,
)
from pydantic import BaseModel, ConfigDict, Field


logger = structlog.get_logger()

WEB_VITAL_LABELS = ["navigation_type", "rating", "app_name", "app_version"]


def linear_buckets(start: float, width: float, count: int) -> list[float]:
    """``count`` buckets starting at ``start``, ``width`` apart."""
    return [start + width * i for i in range(count)]


class WebVital(BaseModel):
    """A web vital report as sent by the browser's web-vitals library."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    value: float
    delta: float
    id: str
    rating: Literal["good", "needs-improvement", "poor"]
    navigation_type: str = Field("navigate", alias="navigationType")


class Metrics:
    """Process metrics plus web vital histograms on one registry.

    The registry defaults to a fresh ``CollectorRegistry`` so several apps
    (and tests) in one process do not collide on metric names.
    """

    content_type = CONTENT_TYPE_LATEST

    def __init__(
        self,
        app_name: str,
        app_version: str,
        registry: CollectorRegistry | None = None,
    ) -> None:
        """Initialize collectors and histograms.

        Args:
            app_name: Application name label added to all observations
            app_version: Application version label added to all observations
            registry: Prometheus registry to use
        """
        self.registry = registry or CollectorRegistry()
        self.labels = {"app_name": app_name, "app_version": app_version}

        ProcessCollector(registry=self.registry)
        PlatformCollector(registry=self.registry)
        GCCollector(registry=self.registry)

        self.lcp = Histogram(
            "ui_lcp_delta",
            "Delta value for LCP (Largest Contentful Paint) in ms",
            WEB_VITAL_LABELS,
            buckets=linear_buckets(0, 250, 20),
            registry=self.registry,
        )
        self.cls = Histogram(
            "ui_cls_delta",
            "Delta value for CLS (Cumulative Layout Shift)",
            WEB_VITAL_LABELS,
            buckets=[0, 0.0001, 0.001, 0.01, 0.1, 0.2, 0.3, 0.5, 1, 2, 5, 10],
            registry=self.registry,
        )
        self.fcp = Histogram(
            "ui_fcp_delta",
            "Delta value for FCP (First Contentful Paint) in ms",
            WEB_VITAL_LABELS,
            buckets=linear_buckets(0, 250, 20),
            registry=self.registry,
        )
        self.fid = Histogram(
            "ui_fid_delta",
            "Delta value for FID (First Input Delay) in ms",
            WEB_VITAL_LABELS,
            buckets=linear_buckets(0, 10, 20),
            registry=self.registry,
        )
        self._histograms = {
            "CLS": self.cls,
            "LCP": self.lcp,
            "FCP": self.fcp,
            "FID": self.fid,
        }

    def observe_web_vital(self, metric: WebVital) -> None:
        """Record ``metric.delta`` in the histogram for its vital.

        Vitals without a histogram are ignored.
        """
        histogram = self._histograms.get(metric.name)
        if histogram is None:
            logger.debug("web_vital_ignored", name=metric.name)
            return

        histogram.labels(
            navigation_type=metric.navigation_type,
            rating=metric.rating,
            **self.labels,
        ).observe(metric.delta)

    def get_metrics(self) -> str:
        """Render every registered metric in the Prometheus text format."""
        return generate_latest(self.registry).decode("utf-8")
