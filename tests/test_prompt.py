from __future__ import annotations

import pytest

from rmi_paycheck_downloader.prompt import USERNAME_HINT, CredentialPrompter, PromptCancelled, is_valid_username


def _feeder(values: list):
    it = iter(values)

    def _next(prompt: str) -> str:
        value = next(it)
        if isinstance(value, BaseException):
            raise value
        return value

    return _next


@pytest.mark.parametrize("name", ["jdoe", "John Doe", "j-doe-2", "E12345"])
def test_valid_usernames(name: str) -> None:
    assert is_valid_username(name)


@pytest.mark.parametrize("name", ["", "jdoe@example.com", "j.doe", "drop;table"])
def test_invalid_usernames(name: str) -> None:
    assert not is_valid_username(name)


def test_prompt_reasks_until_username_is_valid() -> None:
    printed: list[str] = []
    prompter = CredentialPrompter(
        input_fn=_feeder(["bad@name", "", "jdoe"]),
        password_fn=_feeder(["s3cret"]),
        print_fn=printed.append,
    )
    creds = prompter.prompt()
    assert creds.username == "jdoe"
    assert creds.password == "s3cret"
    assert printed == [USERNAME_HINT, USERNAME_HINT]


def test_prompt_reasks_empty_password() -> None:
    prompter = CredentialPrompter(input_fn=_feeder(["jdoe"]), password_fn=_feeder(["", "s3cret"]))
    assert prompter.prompt().password == "s3cret"


def test_password_uses_hidden_prompt_by_default(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: list[str] = []

    def _getpass(prompt: str = "Password: ") -> str:
        seen.append(prompt)
        return "s3cret"

    monkeypatch.setattr("rmi_paycheck_downloader.prompt.getpass.getpass", _getpass)
    prompter = CredentialPrompter(input_fn=_feeder(["jdoe"]))
    assert prompter.prompt().password == "s3cret"
    assert seen == ["password: "]


@pytest.mark.parametrize("interrupt", [KeyboardInterrupt(), EOFError()])
def test_interrupt_during_username_is_cancellation(interrupt: BaseException) -> None:
    prompter = CredentialPrompter(input_fn=_feeder([interrupt]), password_fn=_feeder(["x"]))
    with pytest.raises(PromptCancelled):
        prompter.prompt()


def test_interrupt_during_password_is_cancellation() -> None:
    prompter = CredentialPrompter(input_fn=_feeder(["jdoe"]), password_fn=_feeder([KeyboardInterrupt()]))
    with pytest.raises(PromptCancelled):
        prompter.prompt()


def test_username_is_returned_as_typed() -> None:
    prompter = CredentialPrompter(input_fn=_feeder([" John Doe "]), password_fn=_feeder(["s3cret"]))
    assert prompter.prompt().username == " John Doe "
