import logging

from config import COMPLIANCE_LOG_LEVEL

LOG_FORMAT = '%(name)-12s: %(levelname)-8s %(message)s'

# Package loggers whose level follows COMPLIANCE_LOG_LEVEL
COMPLIANCE_LOGGERS = ("compliance", "db")

_logging_configured = False


def setup_logging(level: str | None = None) -> None:
    """Console output plus per-package levels; later calls are no-ops."""
    global _logging_configured
    if _logging_configured:
        return

    level = (level or COMPLIANCE_LOG_LEVEL).upper()

    root = logging.getLogger()
    if not root.handlers:
        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(console)

    for name in COMPLIANCE_LOGGERS:
        logging.getLogger(name).setLevel(level)

    _logging_configured = True
