from .setup import ContextAdapter, configure_logging, get_logger

__all__ = ["ContextAdapter", "configure_logging", "get_logger"]
