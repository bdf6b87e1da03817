from draft_logs.stdout import StdoutLogger
from draft_logs.file import FileLogger
from draft_logs.json import JSONLogger
from draft_logs.composite import CompositeLogger


def get_logger(mode="dev", log_type="server", log_dir="logs"):
    if mode == "prod":
        return CompositeLogger(
            FileLogger(log_type=log_type, base_path=log_dir),
            JSONLogger(log_type=log_type)
        )
    return StdoutLogger(log_type=log_type)
