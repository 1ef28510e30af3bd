"""Tests for songmem/main.py (command line front end)"""

import logging

import pytest

from songmem import main
from songmem.config import Settings


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(db_path=str(tmp_path / "data" / "songmem.sql"))


def _lines(capsys) -> list[str]:
    return capsys.readouterr().out.splitlines()


def test_register_and_list(settings, capsys) -> None:
    assert main.run(settings, ["--register", "  Foo  "]) == main.EXIT_OK
    assert main.run(settings, ["-r", "Bar"]) == main.EXIT_OK
    assert main.run(settings, ["-r", "foo"]) == main.EXIT_OK
    capsys.readouterr()

    assert main.run(settings, []) == main.EXIT_OK
    assert _lines(capsys) == ["Foo", "Bar"]

    assert main.run(settings, ["--added-at"]) == main.EXIT_OK
    assert _lines(capsys) == ["Bar", "Foo"]

    assert main.run(settings, ["--favourite"]) == main.EXIT_OK
    assert _lines(capsys) == ["Foo", "Bar"]

    assert main.run(settings, ["--frecent"]) == main.EXIT_OK
    assert _lines(capsys) == ["Foo", "Bar"]

    assert main.run(settings, ["--suggestions", "Foo"]) == main.EXIT_OK
    assert _lines(capsys) == ["Bar"]


def test_register_no_add_unknown_song(settings) -> None:
    assert main.run(settings, ["--register", "--no-add", "Foo"]) == main.EXIT_ADD_HEARING


def test_register_invalid_name(settings) -> None:
    assert main.run(settings, ["--register", "x" * 101]) == main.EXIT_INVALID_NAME


def test_omit_all_recent_hearings(settings, capsys) -> None:
    main.run(settings, ["-r", "Foo"])
    capsys.readouterr()
    assert main.run(settings, ["--omit", "1h", "--favourite"]) == main.EXIT_OK
    assert _lines(capsys) == []
    assert main.run(settings, ["--omit=1h", "--suggestions", "Foo"]) == main.EXIT_SUGGESTIONS


def test_bad_omit_duration(settings) -> None:
    assert main.run(settings, ["--omit", "soon", "--frecent"]) == main.EXIT_FRECENT


def test_out_of_range_omit_duration(settings) -> None:
    assert main.run(settings, ["--omit", "9999999999999h", "--frecent"]) == main.EXIT_FRECENT


def test_suggestions_for_unknown_song(settings) -> None:
    assert main.run(settings, ["-s", "Nope"]) == main.EXIT_SUGGESTIONS


def test_remove_hearing_and_song(settings, caplog) -> None:
    main.run(settings, ["-r", "Foo"])
    assert main.run(settings, ["--remove-song", "Foo"]) == main.EXIT_REMOVE_SONG

    with caplog.at_level(logging.INFO, logger="songmem.main"):
        assert main.run(settings, ["--remove-hearing"]) == main.EXIT_OK
        assert main.run(settings, ["--remove-song"]) == main.EXIT_OK
    assert "Removed latest hearing of: Foo" in caplog.text
    assert "Removed song: Foo" in caplog.text

    assert main.run(settings, ["--remove-hearing"]) == main.EXIT_REMOVE_HEARING
    assert main.run(settings, ["--remove-song"]) == main.EXIT_REMOVE_SONG


def test_rename(settings, capsys) -> None:
    main.run(settings, ["-r", "Foo"])
    assert main.run(settings, ["--rename", "Foo", "Bar"]) == main.EXIT_OK
    assert main.run(settings, ["--rename", "Foo", "Baz"]) == main.EXIT_RENAME
    assert main.run(settings, ["--rename", "Bar", "two\nlines"]) == main.EXIT_INVALID_NAME
    capsys.readouterr()
    main.run(settings, [])
    assert _lines(capsys) == ["Bar"]


@pytest.mark.parametrize(
    "argv",
    [
        ["--register"],
        ["--rename", "only-one"],
        ["--favourite", "--frecent"],
        ["stray"],
        ["--no-add", "--favourite"],
        ["--omit", "1h", "--added-at"],
    ],
)
def test_usage_errors(settings, argv) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main.run(settings, argv)
    assert excinfo.value.code == main.EXIT_USAGE


def test_unopenable_database(tmp_path) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("")
    settings = Settings(db_path=str(blocker / "songmem.sql"))
    assert main.run(settings, []) == main.EXIT_OPEN_DATABASE
