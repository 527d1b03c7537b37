"""Frame-processing pipeline building blocks: queues, nodes, geofence analysis and tracking."""

__version__ = "0.1.0"