from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from settee import DEFAULT_HOST, DEFAULT_PORT
from settee._user_agent import get_user_agent


class AuthType(str, Enum):
    BASIC = "basic"


@dataclass
class ConnectionConfig:
    """Connection settings owned by one client.

    Read during a request, changed only between requests through the client's setters.
    """

    host: str = DEFAULT_HOST
    port: Union[str, int] = DEFAULT_PORT
    username: Optional[str] = None
    password: Optional[str] = None
    auth_type: Optional[AuthType] = None
    decode: bool = True
    timeout: Optional[float] = None
    user_agent: str = field(default_factory=get_user_agent)

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"

    @property
    def has_credentials(self) -> bool:
        # blank usernames and passwords are still credentials
        return self.username is not None or self.password is not None
