"""Google Sign-In ID token verification."""

from dataclasses import dataclass

from google.auth.transport import requests as google_requests
from google.oauth2 import id_token

from walklet_api.services.auth import GoogleTokenVerifier


@dataclass
class GoogleIdTokenVerifier(GoogleTokenVerifier):
    """Verifies ID tokens issued for the configured OAuth client."""

    client_id: str

    def verify(self, token: str) -> dict[str, object]:
        """Return verified claims; google-auth raises ValueError when invalid."""
        return id_token.verify_oauth2_token(
            token, google_requests.Request(), self.client_id
        )
