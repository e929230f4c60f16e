"""
Rocket.Chat REST API client.

Every call is made exactly once; there is no retry and no pooled
connection. In dry-run mode no request leaves the process and each call
returns a deterministic stand-in.
"""

from typing import ClassVar
from urllib.parse import urlsplit, urlunsplit

import requests
from pydantic import ValidationError

from rockethandler.core import LogoutResult, Message, PostResult, Session, UserInfo
from rockethandler.errors import ApiError, AuthError, LogoutError, PostError
from rockethandler.logging_config import get_logger, mask_secrets
from rockethandler.responses import (
    LoginResponse,
    LogoutResponse,
    PostMessageResponse,
    UserInfoResponse,
)

logger = get_logger(__name__)

DRY_RUN_VALUE = "dryrun"


class RocketChatClient:
    """
    Thin client for the four endpoints the handler uses.

    Args:
        base_url: Service URL, e.g. http://localhost:3000 (a sub-path is kept)
        dry_run: Skip all network calls and return stand-in results
        timeout: Per-request timeout in seconds
    """

    LOGIN_PATH: ClassVar[str] = "/api/v1/login"
    USER_INFO_PATH: ClassVar[str] = "/api/v1/users.info"
    POST_MESSAGE_PATH: ClassVar[str] = "/api/v1/chat.postMessage"
    LOGOUT_PATH: ClassVar[str] = "/api/v1/logout"

    def __init__(self, base_url: str, dry_run: bool = False, timeout: float = 10.0):
        self.base_url = base_url
        self.dry_run = dry_run
        self.timeout = timeout

    def endpoint(self, path: str) -> str:
        """Join the base URL's path with an API path."""
        parts = urlsplit(self.base_url)
        joined = parts.path.rstrip("/") + "/" + path.lstrip("/")
        return urlunsplit((parts.scheme, parts.netloc, joined, "", ""))

    def login(self, user: str, password: str) -> Session:
        """
        Open a session with user/password credentials.

        Returns:
            Session carrying the issued token, user ID and resolved username

        Raises:
            AuthError: On transport failure, an undecodable body, or a
                non-success status
        """
        if self.dry_run:
            logger.info("Dry Run: No RocketChat login request made")
            return Session(
                token=DRY_RUN_VALUE,
                user_id=DRY_RUN_VALUE,
                username=DRY_RUN_VALUE,
                from_login=True,
            )

        url = self.endpoint(self.LOGIN_PATH)
        try:
            response = requests.post(
                url,
                data={"user": user, "password": password},
                timeout=self.timeout
            )
        except requests.RequestException as e:
            raise AuthError(f"Login request to {url} failed: {e}") from e

        body = response.text
        try:
            login = LoginResponse.model_validate_json(body)
        except ValidationError as e:
            raise AuthError("Login response could not be decoded", response=body) from e

        if not login.succeeded:
            raise AuthError(login.message or str(login.error or login.status), response=body)

        mask_secrets(login.data.auth_token)
        logger.debug("Login data: username=%s roles=%s", login.data.me.username, login.data.me.roles)
        return Session(
            token=login.data.auth_token,
            user_id=login.data.user_id,
            username=login.data.me.username,
            from_login=True,
        )

    def fetch_user_info(self, session: Session, username: str | None = None) -> UserInfo | None:
        """
        Look up the acting user's type and roles.

        Looks the user up by username when one is known, otherwise by the
        session's user ID.

        Returns:
            UserInfo, or None if the service reports failure or the body
            cannot be decoded

        Raises:
            ApiError: On transport failure
        """
        if self.dry_run:
            return UserInfo(type="dry-run", roles=("bot",))

        username = username or session.username
        params = {"username": username} if username else {"userId": session.user_id}
        url = self.endpoint(self.USER_INFO_PATH)
        try:
            response = requests.get(
                url,
                params=params,
                headers=session.headers,
                timeout=self.timeout
            )
        except requests.RequestException as e:
            raise ApiError(f"User info request to {url} failed: {e}") from e

        try:
            info = UserInfoResponse.model_validate_json(response.text)
        except ValidationError:
            logger.warning("User info response could not be decoded: %s", response.text)
            return None

        if not info.success:
            return None
        return UserInfo(type=info.user.type, roles=tuple(info.user.roles))

    def post_message(self, session: Session, message: Message) -> PostResult:
        """
        Post a message as JSON to chat.postMessage.

        Returns:
            PostResult with the service's success flag and error

        Raises:
            PostError: On transport failure or an undecodable body
        """
        if self.dry_run:
            return PostResult(success=True)

        url = self.endpoint(self.POST_MESSAGE_PATH)
        try:
            response = requests.post(
                url,
                json=message.to_dict(),
                headers=session.headers,
                timeout=self.timeout
            )
        except requests.RequestException as e:
            raise PostError(f"Post request to {url} failed: {e}") from e

        body = response.text
        try:
            posted = PostMessageResponse.model_validate_json(body)
        except ValidationError as e:
            raise PostError("Post response could not be decoded", response=body) from e

        return PostResult(success=posted.success, error=posted.error or "", response=body)

    def logout(self, session: Session) -> LogoutResult:
        """
        Invalidate a session.

        Raises:
            LogoutError: On transport failure or an undecodable body
        """
        if self.dry_run:
            return LogoutResult(success=True)

        url = self.endpoint(self.LOGOUT_PATH)
        try:
            response = requests.post(url, headers=session.headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise LogoutError(f"Logout request to {url} failed: {e}") from e

        body = response.text
        try:
            result = LogoutResponse.model_validate_json(body)
        except ValidationError as e:
            raise LogoutError("Logout response could not be decoded", response=body) from e

        return LogoutResult(success=result.succeeded, message=result.message or "", response=body)
