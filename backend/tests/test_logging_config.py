import json
import logging

from student_manager.logging_config import (
    StructuredJsonFormatter, get_logger, operation_id_var, start_operation,
)


def _record(**extra):
    record = logging.LogRecord("student_manager.db", logging.INFO, __file__, 1, "Loaded %d students", (3,), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_emits_structured_json():
    token = operation_id_var.set("op-123")
    try:
        line = StructuredJsonFormatter().format(_record(
            channel="db", context={"student_id": 7}, extra_data={"duration_ms": 1.5}))
    finally:
        operation_id_var.reset(token)

    entry = json.loads(line)
    assert entry["level"] == "INFO"
    assert entry["message"] == "Loaded 3 students"
    assert entry["channel"] == "db"
    assert entry["context"] == {"operation_id": "op-123", "student_id": 7}
    assert entry["extra"] == {"duration_ms": 1.5}
    assert entry["timestamp"].endswith("Z")


def test_channel_falls_back_to_logger_name():
    entry = json.loads(StructuredJsonFormatter().format(_record()))
    assert entry["channel"] == "db"
    assert entry["extra"] == {}


def test_start_operation_sets_context_var():
    op_id = start_operation()
    assert operation_id_var.get() == op_id
    assert len(op_id) == 36


def test_get_logger_namespaces_channels():
    assert get_logger("validation").name == "student_manager.validation"
