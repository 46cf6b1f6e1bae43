from wizmap.core import logging as wizmap_logging


def test_log_file_receives_messages(tmp_path):
    wizmap_logging.init_logging(str(tmp_path))
    wizmap_logging.set_logging_enabled(True)
    try:
        assert wizmap_logging.is_file_logging_active()
        wizmap_logging.log_placement("Rejected (9, 9): corner")
        wizmap_logging.log("plain message")
    finally:
        wizmap_logging.close_logging()

    assert not wizmap_logging.is_file_logging_active()
    lines = (tmp_path / wizmap_logging.LOG_FILE_NAME).read_text().splitlines()
    assert lines[0].startswith("=== Wizmap Debug Log")
    assert "[Placement] Rejected (9, 9): corner" in lines
    assert "[Wizmap] plain message" in lines


def test_disabled_logging_skips_file(tmp_path):
    wizmap_logging.init_logging(str(tmp_path))
    wizmap_logging.set_logging_enabled(False)
    try:
        assert not wizmap_logging.is_file_logging_active()
        wizmap_logging.log_store("not written")
    finally:
        wizmap_logging.close_logging()

    assert "not written" not in (tmp_path / wizmap_logging.LOG_FILE_NAME).read_text()


def test_missing_directory_is_reported_not_raised(tmp_path, capsys):
    wizmap_logging.init_logging(str(tmp_path / 'missing' / 'dir'))
    assert not wizmap_logging.is_file_logging_active()
    assert "Could not create log file" in capsys.readouterr().out


def test_reinit_closes_previous_file(tmp_path):
    first, second = tmp_path / 'first', tmp_path / 'second'
    first.mkdir()
    second.mkdir()
    wizmap_logging.set_logging_enabled(True)
    try:
        wizmap_logging.init_logging(str(first))
        wizmap_logging.init_logging(str(second))
        wizmap_logging.log_tools("Tool changed: TILE -> PATH")
    finally:
        wizmap_logging.close_logging()

    assert "Tool changed" not in (first / wizmap_logging.LOG_FILE_NAME).read_text()
    assert "[ToolManager] Tool changed: TILE -> PATH" in (second / wizmap_logging.LOG_FILE_NAME).read_text()
