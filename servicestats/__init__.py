"""Thread-safe flat counters, exported string values and runtime options for a running service."""

__version__ = "0.1.0"
__all__ = ["counters", "exported_values", "options", "service_data"]