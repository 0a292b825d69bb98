import logging

import pytest

from ukt_console.app.client.resources import ALL_ENDPOINTS
from ukt_console.app.core.logging import configure_logging
from ukt_console.app.services.notifications import ERROR, SUCCESS, Notifier

pytestmark = pytest.mark.anyio


async def test_session_registers_every_collection(console):
    for endpoint in ALL_ENDPOINTS:
        assert console.cache.is_stale(endpoint.key)
        assert console.cache.peek(endpoint.key) == ()
    assert console.client.base_url == "http://sandbox/api"


async def test_student_screen_and_directory_are_separate_collections(console, seed):
    seed.student("A1", "Budi", 1)
    await console.students.load()
    assert console.cache.is_loaded("students")
    assert not console.cache.is_loaded("masters")

    await console.bills.mount()
    assert [row.nim for row in console.cache.peek("masters")] == ["A1"]


def test_notifier_keeps_history_and_calls_listeners():
    received = []
    notifier = Notifier()
    notifier.subscribe(received.append)

    notifier.success("Student created")
    notifier.error("Failed to load bills: HTTP 500")

    assert [n.level for n in notifier.history] == [SUCCESS, ERROR]
    assert received == notifier.history
    assert notifier.last.message == "Failed to load bills: HTTP 500"


def test_configure_logging_returns_package_logger():
    logger = configure_logging("DEBUG")
    assert logger.name == "ukt_console"
    assert isinstance(logger, logging.Logger)
