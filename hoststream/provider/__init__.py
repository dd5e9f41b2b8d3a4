from .base import HostMetricsSource
from .metrics_provider import MetricsProvider
from .psutil_source import PsutilSource

__all__ = [
    "HostMetricsSource",
    "MetricsProvider",
    "PsutilSource",
]
