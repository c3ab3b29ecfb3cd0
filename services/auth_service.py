"""
Credential providers for the YouTube Data API.

The watch-later importer asks a provider for a valid credential on every run;
nothing here is cached at module level.
"""
import os
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from utils.errors import AuthenticationRequiredError

logger = logging.getLogger(__name__)

YOUTUBE_SCOPES = ["https://www.googleapis.com/auth/youtube.readonly"]


class CredentialProvider(ABC):
    """Supplies a usable OAuth credential for the video platform."""

    @abstractmethod
    def get_valid_credential(self) -> Any:
        """
        Return a credential that is valid right now.

        Raises:
            AuthenticationRequiredError: If no usable session exists.
        """
        pass


class TokenFileCredentialProvider(CredentialProvider):
    """
    Loads an authorized-user token file, refreshing and re-saving it when expired.

    Token files written without the OAuth client (only token and refresh_token)
    are completed from the client secret file downloaded from the Google console.

    Attributes:
        token_file (str): Path to the stored authorized-user JSON.
        client_secret_file (str): Optional path to the OAuth client secret JSON.
        scopes (list): OAuth scopes requested.
    """

    def __init__(self, token_file: Optional[str], client_secret_file: Optional[str] = None,
                 scopes: Optional[list] = None):
        self.token_file = token_file
        self.client_secret_file = client_secret_file
        self.scopes = scopes or YOUTUBE_SCOPES

    def __str__(self):
        return f"TokenFileCredentialProvider(token_file={self.token_file})"

    def _save(self, credentials: Credentials) -> None:
        try:
            with open(self.token_file, "w", encoding="utf-8") as fh:
                fh.write(credentials.to_json())
            logger.debug(f"Saved refreshed credentials to {self.token_file}")
        except OSError as e:
            logger.warning(f"Could not persist refreshed credentials to {self.token_file}: {e}")

    def _load_authorized_user_info(self) -> Dict[str, Any]:
        with open(self.token_file, encoding="utf-8") as fh:
            info = json.load(fh)
        if self.client_secret_file and not (info.get("client_id") and info.get("client_secret")):
            with open(self.client_secret_file, encoding="utf-8") as fh:
                secrets = json.load(fh)
            # Console downloads nest the client under "installed" or "web"
            client = secrets.get("installed") or secrets.get("web") or secrets
            for key in ("client_id", "client_secret"):
                if not info.get(key):
                    info[key] = client.get(key)
            logger.debug(f"Completed OAuth client details from {self.client_secret_file}")
        return info

    def get_valid_credential(self) -> Credentials:
        if not self.token_file or not os.path.exists(self.token_file):
            logger.warning("No stored YouTube session found")
            raise AuthenticationRequiredError("No authenticated session found")

        try:
            credentials = Credentials.from_authorized_user_info(self._load_authorized_user_info(), self.scopes)
        except (ValueError, OSError) as e:
            logger.warning(f"Stored YouTube session is unreadable: {e}")
            raise AuthenticationRequiredError("Stored session is invalid") from e

        if credentials.valid:
            return credentials

        if credentials.expired and credentials.refresh_token:
            logger.info("YouTube access token expired, refreshing")
            try:
                credentials.refresh(Request())
            except RefreshError as e:
                logger.warning(f"YouTube token refresh failed: {e}")
                raise AuthenticationRequiredError("Session expired and could not be refreshed") from e
            self._save(credentials)
            return credentials

        raise AuthenticationRequiredError("No authenticated session found")
