"""
Dispatch orchestration: validate, authenticate, render, post, log out.

The sequence is linear. Login and post failures are raised to the caller,
after a login session has been closed; template and logout failures are
logged and the run carries on.
"""

import json
from dataclasses import dataclass

from rockethandler.client import RocketChatClient
from rockethandler.config import HandlerConfig, apply_annotation_overrides, resolve_credentials
from rockethandler.core import Message, Session
from rockethandler.errors import AuthError, LogoutError, PostError, TemplateError
from rockethandler.event import Event
from rockethandler.logging_config import get_logger
from rockethandler.renderer import build_payload, render_description

logger = get_logger(__name__)


@dataclass
class DispatchResult:
    """What a completed dispatch did."""
    session: Session
    message: Message
    posted: bool
    logged_out: bool = False


class Dispatcher:
    """
    Sends one event to Rocket.Chat.

    Args:
        config: Loaded handler configuration (validated again per event)
        client: Optional pre-built client; built from the config otherwise
    """

    def __init__(self, config: HandlerConfig, client: RocketChatClient | None = None):
        self.config = config
        self._client = client

    def _client_for(self, config: HandlerConfig) -> RocketChatClient:
        if self._client is not None:
            return self._client
        return RocketChatClient(config.url, dry_run=config.dry_run, timeout=config.timeout)

    def dispatch(self, event: Event) -> DispatchResult:
        """
        Run the full sequence for one event.

        Raises:
            ConfigError: Before any network call, on invalid settings
            AuthError: If login fails
            PostError: If the message is not accepted
            ApiError: If the bot role lookup cannot reach the service
        """
        config = resolve_credentials(apply_annotation_overrides(self.config, event))
        client = self._client_for(config)

        session = self._authenticate(client, config)

        # A session opened by login is closed even when a later step fails
        try:
            message = self._build_message(client, config, session, event)
            serialized = json.dumps(message.to_dict())

            if config.dry_run:
                logger.info(
                    "DryRun Report:\n Channel: %s Server: %s\n Msg: %s",
                    config.channel,
                    config.url,
                    serialized
                )

            self._post(client, config, session, message, serialized)
        finally:
            logged_out = self._logout(client, config, session)

        return DispatchResult(session=session, message=message, posted=True, logged_out=logged_out)

    def _authenticate(self, client: RocketChatClient, config: HandlerConfig) -> Session:
        if config.uses_token:
            return Session(token=config.token, user_id=config.user_id)

        try:
            return client.login(config.user, config.password)
        except AuthError as e:
            logger.error("RocketChat Login Failed with msg: %s", e)
            if e.response:
                logger.error("%s", e.response)
            raise

    def _build_message(
        self,
        client: RocketChatClient,
        config: HandlerConfig,
        session: Session,
        event: Event
    ) -> Message:
        is_bot = False
        if config.alias or config.avatar:
            info = client.fetch_user_info(session)
            is_bot = info is not None and info.is_bot
            if config.verbose:
                logger.info(
                    "User %s has bot role: %s",
                    session.username or session.user_id,
                    is_bot
                )

        try:
            description = render_description(event, config.description_template)
        except TemplateError as e:
            logger.error("%s", e)
            description = ""

        return build_payload(event, config, is_bot, description)

    def _post(
        self,
        client: RocketChatClient,
        config: HandlerConfig,
        session: Session,
        message: Message,
        serialized: str
    ) -> None:
        try:
            result = client.post_message(session, message)
        except PostError as e:
            logger.error(
                "RocketChat Message sent to channel: %s <%s> message: %s [error]",
                config.channel,
                config.url,
                serialized
            )
            if e.response:
                logger.error("%s", e.response)
            raise

        if not result.success:
            logger.error(
                "RocketChat Message sent to channel: %s <%s> message: %s [error]",
                config.channel,
                config.url,
                serialized
            )
            logger.error("Error posting message to RocketChat: %s", result.error)
            raise PostError(
                f"Error posting message to RocketChat: {result.error}",
                response=result.response
            )

        if config.verbose:
            logger.info(
                "RocketChat Message sent to channel: %s <%s> message: %s [ok]",
                config.channel,
                config.url,
                serialized
            )

    def _logout(self, client: RocketChatClient, config: HandlerConfig, session: Session) -> bool:
        if not session.from_login:
            if config.verbose:
                logger.info("RocketChat log out [skipped]")
            return False

        try:
            result = client.logout(session)
        except LogoutError as e:
            logger.warning("RocketChat log out [failed]: %s", e)
            return False

        if result.success:
            if config.verbose:
                logger.info("RocketChat log out [ok]")
            return True

        logger.warning("RocketChat log out [failed]: %s", result.message)
        return False
