"""
Performance Monitoring
Prometheus-based metrics collection for the builder pipeline.
"""

from .metrics import MetricsCollector

__all__ = ["MetricsCollector"]
