import logging

from guionbd.logs import setup_logging
from guionbd.monitor import PerfMonitor


def test_setup_logging_does_not_duplicate_handlers(tmp_path):
    setup_logging(str(tmp_path))
    logger = setup_logging(str(tmp_path), verbose=True)
    assert logger.name == "guionbd"
    assert logger.propagate is False
    assert len(logger.handlers) == 2
    assert logger.handlers[0].level == logging.DEBUG


def test_console_only_without_log_dir():
    logger = setup_logging()
    assert len(logger.handlers) == 1
    assert logger.handlers[0].level == logging.INFO


def test_perf_monitor_records_phases(caplog):
    monitor = PerfMonitor()
    with caplog.at_level(logging.INFO, logger="guionbd.monitor"):
        with monitor.phase("lectura", "Lectura del fichero"):
            sum(range(1000))
        with monitor.phase("fusion"):
            pass
    assert [name for name, _ in monitor.timings] == ["lectura", "fusion"]
    assert all(t >= 0 for _, t in monitor.timings)
    assert "FASE 1: Lectura del fichero" in caplog.text
    assert monitor.get_mem_mb() > 0
