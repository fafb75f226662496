"""Authentication module for Confluence credentials.

This module resolves which of the supported auth schemes a loader uses and
builds the matching Authorization header. Credentials can be passed in
directly or loaded from environment variables using python-dotenv.

Supported schemes, in order of precedence:
    bearer: personal access token (Confluence Server / Data Center)
    basic:  username + access token (Confluence Cloud)
    none:   anonymous access
"""

import base64
import os
from typing import NamedTuple, Optional

from dotenv import load_dotenv

from .errors import InvalidCredentialsError


class Credentials(NamedTuple):
    """Confluence API credentials. Any field may be None."""
    username: Optional[str] = None
    access_token: Optional[str] = None
    personal_access_token: Optional[str] = None

    @property
    def scheme(self) -> str:
        """Name of the auth scheme these credentials resolve to."""
        if self.personal_access_token:
            return "bearer"
        if self.username and self.access_token:
            return "basic"
        return "none"

    def authorization_header(self) -> Optional[str]:
        """Build the Authorization header value, or None for anonymous access."""
        scheme = self.scheme
        if scheme == "bearer":
            return f"Bearer {self.personal_access_token}"
        if scheme == "basic":
            token = base64.b64encode(
                f"{self.username}:{self.access_token}".encode("utf-8")
            ).decode("ascii")
            return f"Basic {token}"
        return None

    def __repr__(self) -> str:
        # Never expose token values in logs or tracebacks
        return f"Credentials(scheme={self.scheme!r}, username={self.username!r})"


class Authenticator:
    """Loads Confluence credentials from environment variables.

    Credentials are loaded from a .env file using python-dotenv and are never
    cached or logged.

    Recognised environment variables:
        CONFLUENCE_USERNAME: Confluence Cloud user (email address)
        CONFLUENCE_ACCESS_TOKEN: Confluence Cloud API token
        CONFLUENCE_PERSONAL_ACCESS_TOKEN: Server / Data Center personal access token

    An access token selects Cloud basic auth and takes the username with it;
    otherwise a personal access token selects bearer auth. With neither set
    the loader runs anonymously.

    Example:
        >>> auth = Authenticator()
        >>> creds = auth.get_credentials()
        >>> creds.scheme
        'basic'
    """

    def __init__(self):
        """Initialize the authenticator by loading environment variables from .env file."""
        load_dotenv()

    def get_credentials(self) -> Credentials:
        """Get Confluence credentials from environment variables.

        Returns:
            Credentials: Resolved credentials (possibly all None)

        Raises:
            InvalidCredentialsError: If an access token is set without a username
        """
        username = os.getenv('CONFLUENCE_USERNAME')
        access_token = os.getenv('CONFLUENCE_ACCESS_TOKEN')
        personal_access_token = os.getenv('CONFLUENCE_PERSONAL_ACCESS_TOKEN')

        return resolve_credentials(
            username=username,
            access_token=access_token,
            personal_access_token=personal_access_token,
        )


def resolve_credentials(
    username: Optional[str] = None,
    access_token: Optional[str] = None,
    personal_access_token: Optional[str] = None,
) -> Credentials:
    """Pick exactly one credential set from environment-style inputs.

    Cloud credentials (username + access token) win when an access token is
    present; otherwise a personal access token is used.

    Raises:
        InvalidCredentialsError: If an access token is given without a username
    """
    if access_token:
        if not username:
            raise InvalidCredentialsError("access token given without a username")
        return Credentials(username=username, access_token=access_token)
    if personal_access_token:
        return Credentials(personal_access_token=personal_access_token)
    return Credentials()
