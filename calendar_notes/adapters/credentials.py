import json
import logging
from pathlib import Path
from typing import List, Optional

from google.auth.exceptions import RefreshError, TransportError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from ..exceptions import ApiError, AuthError, ConfigError, FileSystemError
from ..models import GOOGLE_AUTH_URI, GOOGLE_TOKEN_URI, ClientCredentials

logger = logging.getLogger(__name__)


class CredentialStore:
    """Loads the OAuth client config and keeps the cached user token on disk."""

    def __init__(self, credentials_path: Path, token_path: Path, scopes: List[str]):
        self.credentials_path = Path(credentials_path)
        self.token_path = Path(token_path)
        self.scopes = list(scopes)

    def load_credentials(self) -> ClientCredentials:
        """Read the client credentials file ("installed" or "web" section).

        Raises:
            ConfigError: file is absent, not JSON, or missing required keys
        """
        if not self.credentials_path.exists():
            raise ConfigError(f"Credentials file not found at {self.credentials_path}")
        try:
            data = json.loads(self.credentials_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise ConfigError(f"Could not read credentials file {self.credentials_path}: {e}", cause=e) from e

        client_type = next((key for key in ("installed", "web") if isinstance(data, dict) and data.get(key)), None)
        if client_type is None:
            raise ConfigError(f"Credentials file {self.credentials_path} has no 'installed' or 'web' section")
        section = data[client_type]
        try:
            return ClientCredentials(
                client_type=client_type,
                client_id=section["client_id"],
                client_secret=section["client_secret"],
                redirect_uri=section["redirect_uris"][0],
                auth_uri=section.get("auth_uri", GOOGLE_AUTH_URI),
                token_uri=section.get("token_uri", GOOGLE_TOKEN_URI),
            )
        except (KeyError, IndexError, TypeError) as e:
            raise ConfigError(f"Credentials file {self.credentials_path} is missing {e}", cause=e) from e

    def load_or_create_authorization(self) -> Credentials:
        """Return authorized user credentials, refreshing or running the OAuth flow as needed.

        The token cache is rewritten whenever a new token is obtained.
        """
        client = self.load_credentials()

        creds = self._load_cached_token()
        if creds and creds.valid:
            return creds

        if creds and creds.expired and creds.refresh_token:
            logger.info("🔄 Refreshing expired Google token")
            try:
                creds.refresh(Request())
            except RefreshError as e:
                raise AuthError(f"Token refresh failed: {e}", cause=e) from e
            except TransportError as e:
                raise ApiError(f"Token refresh could not reach Google: {e}", cause=e) from e
        else:
            creds = self._run_authorization_flow(client)

        self.save_token(creds)
        return creds

    def save_token(self, creds: Credentials) -> None:
        try:
            self.token_path.parent.mkdir(parents=True, exist_ok=True)
            self.token_path.write_text(creds.to_json(), encoding="utf-8")
        except OSError as e:
            raise FileSystemError(f"Could not write token cache {self.token_path}: {e}", cause=e) from e
        logger.info(f"💾 Token cached to {self.token_path}")

    def persist_if_refreshed(self, creds: Credentials, previous_token: Optional[str]) -> bool:
        """Rewrite the token cache if the API client refreshed the access token mid-call."""
        if creds.token and creds.token != previous_token:
            self.save_token(creds)
            return True
        return False

    def _load_cached_token(self) -> Optional[Credentials]:
        if not self.token_path.exists():
            return None
        try:
            return Credentials.from_authorized_user_file(str(self.token_path), self.scopes)
        except ValueError as e:
            raise ConfigError(f"Token file {self.token_path} is malformed: {e}", cause=e) from e

    def _run_authorization_flow(self, client: ClientCredentials) -> Credentials:
        logger.info("🔐 No usable token cached, starting browser authorization")
        try:
            flow = InstalledAppFlow.from_client_config(client.to_client_config(), self.scopes)
            return flow.run_local_server(port=0)
        except Exception as e:
            raise AuthError(f"Authorization flow failed: {e}", cause=e) from e
