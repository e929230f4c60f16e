"""
Core data structures for Rocket Handler.

Sessions, outbound messages and the results of the Rocket.Chat API calls
are plain dataclasses; they are built fresh for every invocation and
never persisted.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Session:
    """Authenticated token and user ID valid for one invocation."""
    token: str
    user_id: str
    username: str = ""
    from_login: bool = False  # Only sessions we opened get logged out

    @property
    def headers(self) -> dict[str, str]:
        """Authentication headers expected by the REST API."""
        return {
            "X-Auth-Token": self.token,
            "X-User-Id": self.user_id,
        }


@dataclass
class AttachmentField:
    """A single title/value row inside an attachment."""
    title: str
    value: str
    short: bool = False

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"title": self.title, "value": self.value}
        if self.short:
            data["short"] = True
        return data


@dataclass
class Attachment:
    """Structured block of a chat message."""
    title: str
    color: str = ""
    text: str = ""
    fields: list[AttachmentField] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"title": self.title}
        if self.color:
            data["color"] = self.color
        if self.text:
            data["text"] = self.text
        if self.fields:
            data["fields"] = [f.to_dict() for f in self.fields]
        return data


@dataclass
class Message:
    """Outbound chat.postMessage payload."""
    channel: str
    text: str = ""
    alias: str = ""
    avatar: str = ""
    attachments: list[Attachment] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the API's JSON shape, leaving out empty optional keys."""
        data: dict[str, Any] = {"channel": self.channel}
        for key in ("text", "alias", "avatar"):
            value = getattr(self, key)
            if value:
                data[key] = value
        if self.attachments:
            data["attachments"] = [a.to_dict() for a in self.attachments]
        return data


@dataclass(frozen=True)
class UserInfo:
    """Account type and roles of the acting user."""
    type: str = ""
    roles: tuple[str, ...] = ()

    @property
    def is_bot(self) -> bool:
        return "bot" in self.roles


@dataclass(frozen=True)
class PostResult:
    """Outcome of chat.postMessage."""
    success: bool
    error: str = ""
    response: str = ""


@dataclass(frozen=True)
class LogoutResult:
    """Outcome of logout."""
    success: bool
    message: str = ""
    response: str = ""
