from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from pydantic import BaseModel, ConfigDict


UNKNOWN_DATE = "unknown"


@dataclass(frozen=True)
class Credentials:
    username: str
    password: str = field(repr=False)


class RecordEntry(BaseModel):
    """
    One paycheck as listed by the portal's check-date dropdown.

    `selector_value` is the opaque `<option value>` the portal uses to select the check;
    `normalized_date` is `YYYY-MM-DD` or `"unknown"` when the label carries no date.
    """

    model_config = ConfigDict(frozen=True)

    selector_value: str
    display_label: str
    normalized_date: str = UNKNOWN_DATE


@dataclass(frozen=True)
class LoginSucceeded:
    pass


@dataclass(frozen=True)
class InvalidCredentials:
    message: str


@dataclass(frozen=True)
class LoginFailed:
    cause: BaseException


LoginResult = Union[LoginSucceeded, InvalidCredentials, LoginFailed]
