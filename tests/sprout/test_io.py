import builtins
import io as std_io

import pytest

import sprout.io as io


def test_die_prints_error_and_exits(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        io.die("boom", 3)

    assert excinfo.value.code == 3
    assert capsys.readouterr().err == "error: boom\n"


@pytest.mark.parametrize(
    ("answer", "default", "expected"),
    [("y", False, True), ("YES", False, True), ("n", True, False), ("", True, True), ("", False, False)],
)
def test_confirm_reads_answer(
    monkeypatch: pytest.MonkeyPatch, answer: str, default: bool, expected: bool
) -> None:
    monkeypatch.setattr(builtins, "input", lambda prompt="": answer)

    assert io.confirm("Continue?", default=default) is expected


def test_confirm_treats_eof_as_refusal(monkeypatch: pytest.MonkeyPatch) -> None:
    def raise_eof(prompt: str = "") -> str:
        raise EOFError

    monkeypatch.setattr(builtins, "input", raise_eof)

    assert io.confirm("Continue?", default=True) is False


def test_select_many_numbered_fallback(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(builtins, "input", lambda prompt="": "3, 1 9 x")

    picked = io.select_many("Pick", ["a", "b", "c"], label=str.upper)

    assert picked == ["a", "c"]
    assert "  1) A" in capsys.readouterr().out


def test_select_many_all_and_cancel(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(builtins, "input", lambda prompt="": "a")
    assert io.select_many("Pick", ["a", "b"]) == ["a", "b"]

    def raise_interrupt(prompt: str = "") -> str:
        raise KeyboardInterrupt

    monkeypatch.setattr(builtins, "input", raise_interrupt)
    assert io.select_many("Pick", ["a", "b"]) is None
    assert io.select_many("Pick", []) == []


def test_select_many_uses_questionary_on_tty(monkeypatch: pytest.MonkeyPatch) -> None:
    class FakePrompt:
        def ask(self) -> list[int]:
            return [1]

    monkeypatch.setattr(io, "_use_questionary", lambda: True)
    monkeypatch.setattr(io.questionary, "checkbox", lambda text, choices: FakePrompt())

    assert io.select_many("Pick", ["a", "b"]) == ["b"]


def test_read_lines_skips_blanks() -> None:
    stream = std_io.StringIO("feat-a\n\n  feat-b  \n")

    assert io.read_lines(stream) == ["feat-a", "feat-b"]
