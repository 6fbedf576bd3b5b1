from .run_loader import configure_logging, load_run_settings

__all__ = ["configure_logging", "load_run_settings"]
