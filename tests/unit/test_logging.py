from __future__ import annotations

import json
import logging

import pytest

from workflow_engine.engine.logging import JsonFormatter, configure_logging


def test_json_formatter_includes_extra_fields() -> None:
    record = logging.LogRecord(
        name="workflow_engine.test",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="Action rejected",
        args=None,
        exc_info=None,
    )
    record.instance_id = "i-1"
    record.kind = "InvalidSourceState"

    payload = json.loads(JsonFormatter().format(record))

    assert payload["level"] == "WARNING"
    assert payload["logger"] == "workflow_engine.test"
    assert payload["message"] == "Action rejected"
    assert payload["extra"] == {"instance_id": "i-1", "kind": "InvalidSourceState"}


def test_configure_logging_replaces_handlers(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging("info")
    configure_logging("info")

    root = logging.getLogger()
    assert len(root.handlers) == 1
    assert root.level == logging.INFO

    logging.getLogger("workflow_engine").info("hello", extra={"definition_id": "d-1"})
    line = capsys.readouterr().out.strip().splitlines()[-1]
    assert json.loads(line)["extra"] == {"definition_id": "d-1"}
