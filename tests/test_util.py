from dataclasses import dataclass
from datetime import timedelta

import pytest

from casctl.constants import ColumnDefinition
from casctl.util import (
    Color,
    TemplateError,
    check_err,
    check_error,
    color_string_on_status,
    color_text,
    convert_to_ibytes,
    duration,
    fatal,
    get_available_capacity,
    get_used_percentage,
    print_by_template,
    table_printer,
    template_printer,
)


@pytest.mark.parametrize(
    "d,want",
    [
        (timedelta(days=2, minutes=1, seconds=59, milliseconds=300), "2d1m"),
        (timedelta(days=2, hours=2, minutes=1, seconds=59, milliseconds=300), "2d2h"),
        (timedelta(days=30, minutes=1, seconds=59, milliseconds=300), "30d1m"),
        (timedelta(days=365, minutes=1, seconds=59, milliseconds=300), "365d1m"),
        (timedelta(minutes=1, seconds=59, milliseconds=300), "1m59s"),
        (timedelta(seconds=59, milliseconds=300), "59s"),
    ],
)
def test_duration(d, want):
    assert duration(d) == want


@pytest.mark.parametrize(
    "value,want",
    [
        ("1.65GB", "1.5GiB"),
        ("1.65MB", "1.6MiB"),
        ("1.65KB", "1.6KiB"),
        ("1.65K", "1.6KiB"),
        ("1.65M", "1.6MiB"),
        ("1.65MiB", "1.6MiB"),
        ("1.65Mi", "1.6MiB"),
        ("", ""),
        ("1766215", "1.7MiB"),
        ("1766215CiB", "1766215CiB"),
    ],
)
def test_convert_to_ibytes(value, want):
    assert convert_to_ibytes(value) == want


@pytest.mark.parametrize(
    "total,used,want",
    [("12 GiB", "1 GiB", 8.333333333333332), ("12 GiB", "100 MiB", 0.8138020833333334)],
)
def test_get_used_percentage(total, used, want):
    assert get_used_percentage(total, used) == want


@pytest.mark.parametrize(
    "total,used,want",
    [
        ("20GiB", "655MiB", "19.36GiB"),
        ("21.66GiB", "12.221GiB", "9.439GiB"),
        ("21.66GiB", "12.221MiB", "21.65GiB"),
    ],
)
def test_get_available_capacity(total, used, want):
    assert get_available_capacity(total, used) == want


def test_check_err_calls_handler():
    seen = []
    check_err(RuntimeError("Some error occurred"), seen.append)
    check_err(None, seen.append)
    assert seen == ["Some error occurred"]


def test_check_error_exits(capsys):
    with pytest.raises(SystemExit) as info:
        check_error(RuntimeError("boom"))
    assert info.value.code == 1
    assert "An error occurred: boom" in capsys.readouterr().err


def test_fatal_adds_newline(capsys):
    with pytest.raises(SystemExit):
        fatal("bad")
    assert capsys.readouterr().err == "bad\n"


def test_colors():
    assert color_text("x", 0) == "x"
    assert color_text("x", Color.RED) == "\x1b[31mx\x1b[0m"
    assert color_string_on_status("Healthy") == "\x1b[32mHealthy\x1b[0m"
    assert color_string_on_status("Offline") == "\x1b[31mOffline\x1b[0m"


@dataclass
class _Pool:
    name: str
    read_only: bool


def test_print_by_template(capsys):
    text = print_by_template("pool", "N: {{.name}} RO: {{ .read_only }}\n", _Pool("a<b", False))
    assert text == "N: a&lt;b RO: false\n"
    assert capsys.readouterr().out == text


def test_print_by_template_missing_field():
    with pytest.raises(TemplateError):
        print_by_template("pool", "{{.absent}}", _Pool("a", True))


def test_template_printer_missing_key():
    doc = {"metadata": {"name": "jv"}}
    assert template_printer("{{.metadata.name}}:{{.spec.x}}", doc) == "jv:<no value>"


def test_table_printer(capsys):
    text = table_printer(
        [ColumnDefinition("Name"), ColumnDefinition("Free Size")], [["pool-1", "4.0GiB"]]
    )
    assert text == "NAME     FREE SIZE\npool-1   4.0GiB\n"
    assert capsys.readouterr().out == text