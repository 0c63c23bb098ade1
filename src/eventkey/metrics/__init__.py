from .metrics import MetricsCollector, PipelineMetrics, plugin_timer

__all__ = ["MetricsCollector", "PipelineMetrics", "plugin_timer"]
