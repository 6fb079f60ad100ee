"""Logging utilities.

Provides logging configuration for local (text) and deployed (structured JSON)
runs, and a filter that stamps each record with the current allocation run id
so the log lines of one run can be correlated.
"""

import contextvars
import json
import logging
import logging.config
from pathlib import Path

logger = logging.getLogger(__name__)

# Run id of the allocation currently executing in this context
ctx_run_id: contextvars.ContextVar[str] = contextvars.ContextVar("run_id", default="")


def configure_logging(json_logs: bool = False) -> None:
    """Configure logging from the packaged dictConfig files.

    Uses logging.json (structured, one JSON object per line) when json_logs is
    set, logging-dev.json (plain text) otherwise.
    """
    config_file = "logging.json" if json_logs else "logging-dev.json"
    config_path = Path(__file__).parent.parent / config_file

    if config_path.exists():
        with open(config_path) as f:
            logging.config.dictConfig(json.load(f))
    else:
        # Fallback to basic config if file not found
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )


class RunContextFilter(logging.Filter):
    """Adds the allocation run id to log records.

    Sets ``record.run_id`` (empty string outside a run) so formatters can
    reference it unconditionally.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = ctx_run_id.get()
        return True
