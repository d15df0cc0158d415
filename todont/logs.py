import json, logging, time, uuid
from typing import Optional

logger = logging.getLogger("todont.operations")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO"):
    """Attach one stream handler to the package logger (idempotent)."""
    root = logging.getLogger("todont")
    root.setLevel(level)
    if not any(getattr(h, "_todont", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._todont = True
        root.addHandler(handler)


class LogContext:
    def __init__(self, action: str, user: str = "anonymous"):
        self.action = action
        self.user = user
        self.request_id = str(uuid.uuid4())
        self.start = time.perf_counter()
        self.payload = None
        self.entity_type = None
        self.entity_id = None

    def set_entity(self, etype: str, eid):
        self.entity_type = etype
        self.entity_id = str(eid)

    def set_payload(self, obj): self.payload = obj

    def record(self, result: str = "OK", err: Optional[str] = None) -> dict:
        return {
            "user": self.user,
            "action": self.action,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "request_id": self.request_id,
            "payload": self.payload,
            "result": result,
            "err_msg": err,
            "latency_ms": int((time.perf_counter() - self.start) * 1000),
        }

    def write(self, result: str = "OK", err: Optional[str] = None) -> dict:
        rec = self.record(result, err)
        level = logging.ERROR if result == "ERROR" else logging.INFO
        logger.log(level, json.dumps(rec, ensure_ascii=False, default=str))
        return rec
