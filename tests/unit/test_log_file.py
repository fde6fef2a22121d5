import pytest

from procguard.errors import LogFileError
from procguard.log_file import LogFile, clean_filename


def test_clean_filename_replaces_unsafe_characters():
    assert clean_filename("src/lib.rs: replace foo with bar") == "src__lib.rs__replace_foo_with_bar"
    assert clean_filename('a\\b<c>d?e*f|g"h') == "a_b_c_d_e_f_g_h"


def test_create_in_never_overwrites(tmp_path):
    first = LogFile.create_in(tmp_path, "scenario")
    second = LogFile.create_in(tmp_path, "scenario")
    third = LogFile.create_in(tmp_path, "scenario")
    try:
        assert first.path.name == "scenario.log"
        assert second.path.name == "scenario_001.log"
        assert third.path.name == "scenario_002.log"
    finally:
        for log in (first, second, third):
            log.close()


def test_create_in_missing_directory_raises(tmp_path):
    with pytest.raises(LogFileError):
        LogFile.create_in(tmp_path / "missing", "scenario")


def test_message_and_appended_output_interleave(log_file):
    log_file.message("start")
    with log_file.open_append() as handle:
        handle.write(b"child output\n")
    log_file.message("result: Success")

    text = log_file.path.read_text(encoding="utf-8")
    assert text == "\n*** start\nchild output\n\n*** result: Success\n"
    assert log_file.last_line() == "*** result: Success"


def test_last_line_of_empty_log_is_none(log_file):
    assert log_file.last_line() is None


def test_context_manager_closes(tmp_path):
    with LogFile.create_in(tmp_path, "ctx") as log:
        log.message("hello")
    with pytest.raises(ValueError):
        log.message("after close")
