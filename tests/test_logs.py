import json

from draft_logs.chooseLogType import get_logger
from draft_logs.composite import CompositeLogger
from draft_logs.file import FileLogger
from draft_logs.memory import MemoryLogger
from draft_logs.stdout import StdoutLogger


def test_file_logger_writes_json_lines(tmp_path):
    logger = FileLogger(log_type="results", base_path=tmp_path / "logs")
    logger.info("battle_resolved", won=True, wins=1)
    logger.warning("odd", reason="x")

    lines = (tmp_path / "logs" / "results.log").read_text().splitlines()
    first = json.loads(lines[0])
    assert first["event"] == "battle_resolved"
    assert first["level"] == "INFO"
    assert first["won"] is True
    assert json.loads(lines[1])["level"] == "WARN"


def test_stdout_logger(capsys):
    StdoutLogger(log_type="draft").error("ban_rejected", card_id="3")
    out = capsys.readouterr().out
    assert "[draft] ERROR ban_rejected card_id=3" in out


def test_composite_fans_out():
    a, b = MemoryLogger(), MemoryLogger()
    CompositeLogger(a, b).debug("tick", n=1)
    assert a.records == b.records == [{"level": "DEBUG", "event": "tick", "n": 1}]


def test_get_logger_modes(tmp_path):
    assert isinstance(get_logger(mode="dev"), StdoutLogger)
    prod = get_logger(mode="prod", log_type="server", log_dir=tmp_path)
    assert isinstance(prod, CompositeLogger)
    prod.info("startup")
    assert json.loads((tmp_path / "server.log").read_text())["event"] == "startup"
