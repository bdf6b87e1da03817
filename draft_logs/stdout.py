from draft_logs.base import Logger, utc_timestamp


class StdoutLogger(Logger):

    def _log(self, level, msg, data):
        context = " ".join(f"{k}={v}" for k, v in data.items())
        print(f"[{utc_timestamp()}] [{self.log_type}] {level} {msg} {context}".rstrip())
