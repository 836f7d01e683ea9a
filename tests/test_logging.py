import logging

from fintrack.core.log.context import ContextFilter, log_context
from fintrack.core.log.timing import timeit


def _record() -> logging.LogRecord:
    return logging.LogRecord("fintrack.test", logging.INFO, __file__, 1, "hello", None, None)


def test_scoped_context_is_rendered_and_reset() -> None:
    context_filter = ContextFilter()

    with log_context.scoped(user="user-1", org=None, op="create"):
        inside = _record()
        context_filter.filter(inside)
        assert log_context.as_dict()["user"] == "user-1"

    outside = _record()
    context_filter.filter(outside)

    assert inside.context == "user=user-1 op=create "
    assert "op" not in log_context.as_dict()
    assert "op=create" not in outside.context


def test_already_rendered_context_is_kept() -> None:
    record = _record()
    record.context = "job=seed "

    with log_context.scoped(user="user-2"):
        ContextFilter().filter(record)

    assert record.context == "job=seed "


def test_timeit_reports_count_and_failures(caplog) -> None:
    logger = logging.getLogger("fintrack.test.timer")

    with caplog.at_level(logging.INFO, logger="fintrack.test.timer"):
        with timeit("Replay", logger=logger, level=logging.INFO, unit="accounts") as timer:
            timer.add(3)
        try:
            with timeit("Broken", logger=logger, level=logging.INFO):
                raise KeyError("boom")
        except KeyError:
            pass

    messages = [record.getMessage() for record in caplog.records]
    assert any(message.startswith("Replay completed in") and "(3 accounts)" in message for message in messages)
    assert any(message.startswith("Broken failed after") and "KeyError" in message for message in messages)
