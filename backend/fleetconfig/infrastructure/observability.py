"""Structured Logging — JSON log lines carrying template/device audit fields.

Invariants:
    - Every line has timestamp, level, logger and message
    - Only whitelisted `extra` keys are emitted; a stray `password=` extra never
      reaches the output
    - setup_logging replaces handlers it installed earlier instead of stacking them

Design Decisions:
    - JSON for production, `text` for local development (LOG_FORMAT)
    - SQL echo routed through sqlalchemy.engine at INFO only when LOG_SQL is set
"""

import json
import logging
from datetime import datetime, timezone

AUDIT_FIELDS = (
    "template_id", "template_name", "scope", "device_id",
    "affected_devices", "template_count", "override_fields", "error_code",
    "operation", "path",
)

_HANDLER_NAME = "fleetconfig"


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update({
            key: getattr(record, key) for key in AUDIT_FIELDS
            if getattr(record, key, None) is not None
        })
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json", log_sql: bool = False):
    """Install the fleetconfig handler on the root logger."""
    root = logging.getLogger()
    for handler in list(root.handlers):
        if handler.get_name() == _HANDLER_NAME:
            root.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        JSONFormatter() if fmt == "json"
        else logging.Formatter("%(asctime)s %(levelname)-7s %(name)s: %(message)s"),
    )
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if log_sql else logging.WARNING,
    )
