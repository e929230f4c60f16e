"""
Decode targets for Rocket.Chat REST API responses.

Only the fields the handler inspects are modelled; anything else in the
body is ignored.
"""

from pydantic import BaseModel, ConfigDict, Field


class _Envelope(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class LoginUser(_Envelope):
    """The `me` block of a login response."""
    username: str = ""
    roles: list[str] = Field(default_factory=list)


class LoginData(_Envelope):
    """The `data` block of a login response."""
    auth_token: str = Field("", alias="authToken")
    user_id: str = Field("", alias="userId")
    me: LoginUser = Field(default_factory=LoginUser)


class LoginResponse(_Envelope):
    """POST /api/v1/login"""
    status: str = ""
    error: str | int | None = None
    message: str | None = None
    data: LoginData = Field(default_factory=LoginData)

    @property
    def succeeded(self) -> bool:
        return self.status == "success"


class UserDetails(_Envelope):
    """The `user` block of a users.info response."""
    type: str = ""
    roles: list[str] = Field(default_factory=list)


class UserInfoResponse(_Envelope):
    """GET /api/v1/users.info"""
    success: bool = False
    user: UserDetails = Field(default_factory=UserDetails)
    error: str | None = None


class PostMessageResponse(_Envelope):
    """POST /api/v1/chat.postMessage"""
    success: bool = False
    error: str | None = None


class LogoutResponse(_Envelope):
    """POST /api/v1/logout"""
    status: str = ""
    message: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == "success"
