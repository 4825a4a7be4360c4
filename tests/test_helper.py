import json
import logging

from videogen.helper import generate_request_id, JSONFormatter, setup_logging


def test_request_ids_are_unique_hex():
    a, b = generate_request_id(), generate_request_id()
    assert a != b
    int(a, 16)


def test_json_formatter_includes_extras():
    record = logging.LogRecord(
        "videogen.pipeline", logging.INFO, __file__, 1, "task %s done", ("t-1",), None
    )
    record.task_id = "t-1"

    log = json.loads(JSONFormatter().format(record))

    assert log["level"] == "INFO"
    assert log["logger"] == "videogen.pipeline"
    assert log["message"] == "task t-1 done"
    assert log["task_id"] == "t-1"
    assert "request_id" not in log


def test_setup_logging_does_not_stack_handlers():
    root = logging.getLogger()
    level = root.level

    setup_logging("DEBUG", "text")
    setup_logging("WARNING", "json")

    ours = [h for h in root.handlers if getattr(h, "_videogen", False)]
    assert len(ours) == 1
    assert isinstance(ours[0].formatter, JSONFormatter)
    assert root.level == logging.WARNING

    root.removeHandler(ours[0])
    root.setLevel(level)
