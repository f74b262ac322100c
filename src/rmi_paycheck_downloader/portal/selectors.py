from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PortalSelectors:
    """
    The HRIS portal is an ASP.NET WebForms app; element ids are stable but may change on upgrades.
    Keep all UI selectors/text hooks here for easy maintenance.
    """

    # Login
    username_input: str = "#txtEeUserName"
    password_input: str = "#txtEePassword"
    login_submit: str = "#btnee"
    login_error_message: str = "#lblEeMsg"
    invalid_login_text: str = "Invalid Login Information"

    # Pay history
    check_date_select: str = "#drp_CheckDate"
    show_check_button: str = "#btn_showchecks"
