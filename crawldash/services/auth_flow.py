"""Sign-in / sign-up form logic."""

import logging
from typing import Literal, Optional

import httpx

from crawldash.errors import DashboardError
from crawldash.services.api_client import CrawlerAPIClient
from crawldash.services.job_list import HOME_ROUTE, Navigate

logger = logging.getLogger(__name__)

AUTH_FAILED_MESSAGE = "Authentication failed"

AuthMode = Literal["login", "register"]


class AuthFormController:
    """Submits credentials in either ``login`` or ``register`` mode.

    Registration only creates the account; it does not sign the user in,
    so the dashboard will bounce back to the login form afterwards.
    """

    def __init__(self, client: CrawlerAPIClient, navigate: Navigate) -> None:
        self.client = client
        self.navigate = navigate
        self.mode: AuthMode = "login"
        self.loading = False
        self.error = ""

    def toggle_mode(self) -> None:
        self.mode = "register" if self.mode == "login" else "login"
        self.error = ""

    async def submit(self, email: str, password: str, name: Optional[str] = "") -> bool:
        self.loading = True
        self.error = ""
        try:
            if self.mode == "login":
                await self.client.login(email, password)
            else:
                await self.client.register(name or "", email, password)
        except (DashboardError, httpx.HTTPError, ValueError) as exc:
            self.error = str(exc) or AUTH_FAILED_MESSAGE
            logger.warning("%s failed for %s: %s", self.mode.capitalize(), email, exc)
            return False
        finally:
            self.loading = False

        self.navigate(HOME_ROUTE)
        return True
