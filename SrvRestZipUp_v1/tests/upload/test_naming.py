import re

import pytest

from services.upload.naming import capture_timestamp_ms, resolve_stored_name, sanitize_filename


def test_stored_name_keeps_stem_and_extension():
    assert resolve_stored_name("release.zip", 1700000000123) == "release_1700000000123.zip"
    assert resolve_stored_name("backup.tar.zip", 5) == "backup.tar_5.zip"


@pytest.mark.parametrize(
    "declared",
    ["../../etc/passwd.zip", "..\\..\\windows\\passwd.zip", "C:\\Users\\x\\passwd.zip", "/abs/passwd.zip"],
)
def test_stored_name_drops_directories(declared):
    name = resolve_stored_name(declared, 42)
    assert name == "passwd_42.zip"
    assert "/" not in name and "\\" not in name


@pytest.mark.parametrize("declared", ["", None, "..", "...", "/"])
def test_empty_or_dotted_names_fall_back(declared):
    assert resolve_stored_name(declared, 7) == "upload_7"


def test_odd_characters_are_replaced():
    assert sanitize_filename("mi archivo (1).zip") == "mi_archivo_1_.zip"
    assert resolve_stored_name("mi archivo (1).zip", 1) == "mi_archivo_1_1.zip"


def test_long_stem_is_truncated():
    name = resolve_stored_name("a" * 600 + ".zip", 1)
    assert len(name.encode()) < 255
    assert name.endswith("_1.zip")


def test_capture_timestamp_is_epoch_millis():
    ts = capture_timestamp_ms()
    assert re.fullmatch(r"\d{13}", str(ts))


@pytest.mark.parametrize(
    "declared, expected",
    [
        ("报告.zip", "报告_1700000000000.zip"),
        ("файл.zip", "файл_1700000000000.zip"),
        ("上传/资料 包.zip", "资料_包_1700000000000.zip"),
    ],
)
def test_non_ascii_names_keep_stem_and_extension(declared, expected):
    assert resolve_stored_name(declared, 1700000000000) == expected


def test_long_non_ascii_stem_is_truncated_on_utf8_boundary():
    name = resolve_stored_name("报" * 200 + ".zip", 1)
    assert len(name.encode()) < 255
    assert name == "报" * 60 + "_1.zip"
