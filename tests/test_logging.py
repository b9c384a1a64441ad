import json
import logging

from app.logging import JsonFormatter


def test_json_formatter_includes_extra_fields_only() -> None:
    record = logging.LogRecord(
        name="app.services.pipeline",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg="Explanation request %s",
        args=("completed",),
        exc_info=None,
    )
    record.request_id = "req-1"
    record.state = "completed"

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "Explanation request completed"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "app.services.pipeline"
    assert payload["request_id"] == "req-1"
    assert payload["state"] == "completed"
    assert "pathname" not in payload
    assert "args" not in payload
