"""Tests for recipekit.core.cron.consent + the CLI yes/no oracle."""

from unittest.mock import MagicMock, patch

import pytest

from recipekit.cli.prompt import prompt_yes_no
from recipekit.core.cron.consent import resolve_consent
from recipekit.errors import ValidationError


def _never(header):
    raise AssertionError("prompt must not be called")


def test_off():
    d = resolve_consent("off", "r", 2, prompt_yes_no=_never, is_interactive=True)
    assert d.proceed is False
    assert d.note == "cron-installation-off"


def test_on():
    d = resolve_consent("on", "r", 2, prompt_yes_no=_never, is_interactive=True)
    assert d.proceed is True
    assert d.user_opt_in is True


def test_prompt_non_interactive():
    d = resolve_consent("prompt", "r", 2, prompt_yes_no=_never, is_interactive=False)
    assert d.proceed is True
    assert d.user_opt_in is False


def test_prompt_yes():
    headers = []
    d = resolve_consent(
        "prompt", "standup-bot", 3,
        prompt_yes_no=lambda h: headers.append(h) or True, is_interactive=True,
    )
    assert d.proceed and d.user_opt_in
    assert headers[0].startswith("Recipe standup-bot defines 3 cron job(s).")


def test_prompt_no():
    d = resolve_consent("prompt", "r", 1, prompt_yes_no=lambda h: False, is_interactive=True)
    assert d.proceed is False
    assert d.note == "cron-installation-declined"


def test_unknown_mode():
    with pytest.raises(ValidationError):
        resolve_consent("sometimes", "r", 1)


def test_oracle_non_tty_returns_false_without_prompting():
    fake_stdin = MagicMock()
    fake_stdin.isatty.return_value = False
    with (
        patch("recipekit.cli.prompt.sys.stdin", fake_stdin),
        patch("recipekit.cli.prompt.Confirm.ask") as ask,
    ):
        assert prompt_yes_no("Install?") is False
    ask.assert_not_called()


def test_oracle_tty_asks():
    fake_stdin = MagicMock()
    fake_stdin.isatty.return_value = True
    with (
        patch("recipekit.cli.prompt.sys.stdin", fake_stdin),
        patch("recipekit.cli.prompt.Confirm.ask", return_value=True) as ask,
    ):
        assert prompt_yes_no("Install?", console=MagicMock()) is True
    ask.assert_called_once()
