import os
from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote, urlsplit, urlunsplit

USERNAME_ENV = "BATCHPICK_GIT_USERNAME"
PASSWORD_ENV = "BATCHPICK_GIT_PASSWORD"


@dataclass(frozen=True)
class CredentialsContext:
    """Username/password used for network operations of one run.

    Built once before a batch starts and handed to the backend. An empty
    context means git runs with whatever credential setup the user already has.
    """

    username: Optional[str] = None
    password: Optional[str] = None

    @classmethod
    def from_env(cls, username: Optional[str] = None) -> "CredentialsContext":
        return cls(
            username=os.getenv(USERNAME_ENV) or username,
            password=os.getenv(PASSWORD_ENV),
        )

    def is_set(self) -> bool:
        return bool(self.username and self.password)

    def apply_to_url(self, url: str) -> str:
        """Embed the credentials into an HTTP(S) URL; other URLs are returned unchanged."""
        if not self.is_set():
            return url
        parts = urlsplit(url)
        if parts.scheme not in ("http", "https") or not parts.hostname:
            return url

        host = parts.hostname
        if parts.port:
            host = f"{host}:{parts.port}"
        userinfo = f"{quote(self.username, safe='')}:{quote(self.password, safe='')}"
        return urlunsplit(
            (parts.scheme, f"{userinfo}@{host}", parts.path, parts.query, parts.fragment)
        )

    def __repr__(self) -> str:
        masked = "***" if self.password else None
        return f"CredentialsContext(username={self.username!r}, password={masked!r})"
