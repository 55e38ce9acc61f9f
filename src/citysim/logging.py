"""
Custom logging configuration for citysim.

Extends Python's standard logging with a custom DEEP_DEBUG level (5)
for very verbose per-job output. Provides the CityLogger class used by
every event and by the simulation facade.

Log Levels
----------
- CRITICAL (50): Critical errors
- ERROR (40): Errors
- WARNING (30): Warnings (invariant violations are logged here)
- INFO (20): Informational messages (default)
- DEBUG (10): Debug messages
- DEEP_DEBUG (5): Per-job values inside the job update loop

Examples
--------
>>> from citysim import logging
>>> logger = logging.getLogger("citysim.events.my_event")
>>> logger.info("Event executing")
>>> logger.deep("Very verbose output")

Configure per-event log levels:

>>> import citysim as cs
>>> log_config = {
...     "default_level": "INFO",
...     "events": {"update_jobs": "DEBUG", "resolve_links": "WARNING"},
... }
>>> sim = cs.Simulation.init(logging=log_config)

See Also
--------
Event.get_logger : Get logger for specific event
"""

import logging
from typing import Any

(CRITICAL, ERROR, WARNING, INFO, DEBUG) = (
    logging.CRITICAL,
    logging.ERROR,
    logging.WARNING,
    logging.INFO,
    logging.DEBUG,
)
DEEP_DEBUG = 5
logging.addLevelName(DEEP_DEBUG, "DEEP")


class CityLogger(logging.Logger):
    """
    Custom logger with DEEP_DEBUG level support.

    Examples
    --------
    >>> logger = CityLogger("test")
    >>> logger.setLevel(5)  # DEEP_DEBUG
    >>> logger.deep("Very verbose message")
    """

    def deep(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log message at DEEP_DEBUG level (5)."""
        if self.isEnabledFor(DEEP_DEBUG):
            self._log(DEEP_DEBUG, msg, args, **kwargs)


# Make the logging module hand out our subclass from now on
logging.setLoggerClass(CityLogger)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%H:%M:%S",
)


def getLogger(name: str | None = None) -> CityLogger:
    """
    Get a CityLogger instance.

    Parameters
    ----------
    name : str, optional
        Logger name. If None, returns root logger.

    Returns
    -------
    CityLogger
        Logger instance with deep() method.
    """
    return logging.getLogger(name)  # type: ignore[return-value]


def level_from_name(name: str) -> int:
    """Translate a level name (including ``DEEP_DEBUG``) to its number."""
    name = name.upper()
    if name in ("DEEP_DEBUG", "DEEP"):
        return DEEP_DEBUG
    return int(getattr(logging, name))
