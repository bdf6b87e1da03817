from draft_logs.base import Logger


class MemoryLogger(Logger):
    """Keeps records in a list. Handy for asserting on events."""

    def __init__(self, log_type="memory"):
        super().__init__(log_type)
        self.records = []

    def _log(self, level, msg, data):
        self.records.append({"level": level, "event": msg, **data})

    def events(self, level=None):
        return [r["event"] for r in self.records if level is None or r["level"] == level]
