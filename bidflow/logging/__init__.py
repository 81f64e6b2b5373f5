"""Structured logging helpers for the BIDFLOW matcher."""

import logging
from typing import Optional, Union


class ComponentLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter that merges a fixed component field into each call's extra."""

    def process(self, msg, kwargs):
        # Fields passed at the call site take precedence over the component default
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def get_logger(
    name: str, component: Optional[str] = None
) -> Union[logging.Logger, ComponentLoggerAdapter]:
    """Get a logger, optionally tagging every record with a component.

    Args:
        name: Logger name (typically __name__)
        component: Component label such as "matching" or "cli"

    Example:
        >>> logger = get_logger(__name__, component="matching")
        >>> logger.info("Announcement matched", extra={"event": "matching.announcement.matched"})
    """
    logger = logging.getLogger(name)

    if component:
        return ComponentLoggerAdapter(logger, {"component": component})

    return logger
