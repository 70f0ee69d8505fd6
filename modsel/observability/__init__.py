from .logging_setup import JSONFormatter, configure_logging  # noqa: F401

__all__ = ["JSONFormatter", "configure_logging"]
