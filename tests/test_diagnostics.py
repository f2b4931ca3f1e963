import logging

from lightsmatrix.board import BoardState
from lightsmatrix.diagnostics import LoggingListener, setup_logging
from lightsmatrix.solver import solve


def test_logging_listener_reports_solve(caplog):
    with caplog.at_level(logging.DEBUG, logger="lightsmatrix"):
        solve(BoardState(3, 3))
    assert "solving 3x3 board (9 cells)" in caplog.text
    assert "pattern=empty,symmetric" in caplog.text
    assert "algorithm: optimized" in caplog.text
    assert "solved in" in caplog.text


def test_logging_listener_reports_rejection(caplog):
    log = logging.getLogger("test.listener")
    with caplog.at_level(logging.INFO, logger="test.listener"):
        solve(BoardState(40, 40), listener=LoggingListener(log))
    assert any(r.levelno == logging.ERROR for r in caplog.records)
    assert "too large" in caplog.text


def test_setup_logging_adds_file_handler(tmp_path, monkeypatch):
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.append(kw))
    setup_logging("debug", str(tmp_path / "solve.log"))
    (kwargs,) = calls
    assert kwargs["level"] == logging.DEBUG
    assert kwargs["force"] is True
    kinds = [type(h) for h in kwargs["handlers"]]
    assert kinds == [logging.StreamHandler, logging.FileHandler]
    for h in kwargs["handlers"]:
        h.close()
