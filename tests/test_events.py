# -*- coding: utf-8 -*-
"""
이벤트 로그 테스트.
"""
import logging

import pytest

from conftest import FIXED_NOW
from sentinel_trader.simulation.events import Event, EventLog, Severity


class TestEventLog:

    def test_keeps_most_recent_50(self):
        """용량 초과 시 오래된 이벤트부터 밀려난다"""
        log = EventLog(capacity=50)
        for i in range(60):
            log.append(Event.at(FIXED_NOW, f"event #{i}"))

        assert len(log) == 50
        messages = [e.message for e in log]
        assert messages[0] == "event #10"
        assert messages[-1] == "event #59"

    def test_recent(self):
        log = EventLog(capacity=5)
        log.extend([Event.at(FIXED_NOW, str(i)) for i in range(4)])
        assert [e.message for e in log.recent(2)] == ["2", "3"]
        assert len(log.recent()) == 4

    def test_timestamp_label(self):
        event = Event.at(FIXED_NOW, "Bot Started.")
        assert len(event.timestamp) == 8
        assert event.timestamp.count(":") == 2
        assert event.severity == Severity.INFO


class TestEventLogging:

    @pytest.mark.parametrize("severity, level", [
        (Severity.INFO, logging.INFO),
        (Severity.SUCCESS, logging.INFO),
        (Severity.ADVISORY, logging.INFO),
        (Severity.WARNING, logging.WARNING),
        (Severity.ERROR, logging.ERROR),
    ])
    def test_severity_mapped_to_log_level(self, caplog, severity, level):
        caplog.set_level(logging.DEBUG, logger="sentinel_trader.events")
        EventLog().append(Event.at(FIXED_NOW, "Session Change Detected", severity))

        records = [r for r in caplog.records if r.name == "sentinel_trader.events"]
        assert len(records) == 1
        assert records[0].levelno == level
        assert records[0].getMessage() == f"[{severity.value}] Session Change Detected"
