from pathlib import Path

import pytest

from flt.cli import main

SAMPLE = "\n".join(
    [
        "0003 0 text/vnd.ficlab.flt",
        "0003 1 1",
        "0003 2 1",
        "0003 3 title A Tale",
        "0002 1",
        "0001 Hello ",
        "0021 world!",
    ]
)


def make_file(tmp_path: Path, content: str = SAMPLE) -> Path:
    path = tmp_path / "sample.flt"
    path.write_text(content, encoding="utf-8")
    return path


def test_check_reports_ok(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = make_file(tmp_path)

    assert main(["check", str(path)]) == 0

    assert "ok (4 lines, version 1)" in capsys.readouterr().out


def test_format_prints_canonical_source(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    path = make_file(tmp_path)

    assert main(["format", str(path)]) == 0

    out = capsys.readouterr().out
    assert "0003 3 title A Tale" in out
    assert "0021 world!" in out


def test_text_and_dc_commands(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    path = make_file(tmp_path)

    assert main(["text", str(path)]) == 0
    assert "Hello world!" in capsys.readouterr().out

    assert main(["dc", str(path), "title"]) == 0
    assert "A Tale" in capsys.readouterr().out


def test_at_command(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = make_file(tmp_path)

    assert main(["at", str(path), "7"]) == 0

    out = capsys.readouterr().out
    assert "line: offset=6 length=6" in out
    assert "paragraph: offset=0 length=12" in out
    assert "note: -" in out


def test_syntax_error_exit_code(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    path = make_file(tmp_path, "0001 fine\nnot a line")

    assert main(["check", str(path)]) == 1

    err = capsys.readouterr().err
    assert f"{path}:2: Malformed line structure" in err


def test_missing_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["check", str(tmp_path / "absent.flt")]) == 1
    assert "absent.flt" in capsys.readouterr().err


def test_vocabulary_error_reports_line(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    path = make_file(tmp_path, "0003 2 1\n0003 3 bogus value")

    assert main(["check", str(path)]) == 1

    err = capsys.readouterr().err
    assert f"{path}:2: Invalid dublin core term: bogus" in err
    assert "3 bogus value" in err


def test_format_error_without_line(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    path = make_file(tmp_path, "0003 0 text/plain")

    assert main(["check", str(path)]) == 1

    assert f"{path}: Not an FLT document" in capsys.readouterr().err
