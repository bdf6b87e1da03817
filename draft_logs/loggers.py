from draft_logs.chooseLogType import get_logger
from draft_logs.file import FileLogger
import os

env = os.getenv("ENV", "dev")
log_dir = os.getenv("DRAFT_LOG_DIR", "logs")

server_logger = get_logger(mode=env, log_type="server", log_dir=log_dir)
draft_logger = get_logger(mode=env, log_type="draft", log_dir=log_dir)
reveal_logger = get_logger(mode=env, log_type="reveal", log_dir=log_dir)

# every battle outcome, always on disk
results_logger = FileLogger(log_type="results", base_path=log_dir)
