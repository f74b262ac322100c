from __future__ import annotations

import getpass
import re
from typing import Callable, Optional

from .models import Credentials


_USERNAME_RE = re.compile(r"^[a-zA-Z0-9\s\-]+$")

USERNAME_HINT = "Name must be only numbers, letters, spaces, or dashes"


class PromptCancelled(Exception):
    """Raised when the operator interrupts (Ctrl-C / EOF) while being asked for credentials."""


def is_valid_username(value: str) -> bool:
    return bool(_USERNAME_RE.match(value or ""))


class CredentialPrompter:
    def __init__(
        self,
        *,
        input_fn: Optional[Callable[[str], str]] = None,
        password_fn: Optional[Callable[[str], str]] = None,
        print_fn: Callable[[str], None] = print,
    ) -> None:
        self._input = input_fn or input
        self._password = password_fn or getpass.getpass
        self._print = print_fn

    def prompt(self) -> Credentials:
        try:
            username = self._ask_username()
            password = self._ask_password()
        except (KeyboardInterrupt, EOFError) as e:
            raise PromptCancelled("canceled") from e
        return Credentials(username=username, password=password)

    def _ask_username(self) -> str:
        while True:
            raw = self._input("username: ")
            if is_valid_username(raw):
                return raw
            self._print(USERNAME_HINT)

    def _ask_password(self) -> str:
        while True:
            password = self._password("password: ")
            if password:
                return password
