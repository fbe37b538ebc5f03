"""cyclelens - live byte and cycle annotations for assembly buffers."""

__version__ = "0.1.0"
