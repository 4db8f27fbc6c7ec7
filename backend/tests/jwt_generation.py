"""
Mint a service token for manual testing against a running server.

Usage:
    python tests/jwt_generation.py alice
"""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Add parent directory to path so we can import chatline
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

import jwt
from chatline.config.settings import Config


def generate_jwt_token(user_id: str = "alice", name: str | None = None) -> str:
    """Generate a valid JWT token for testing API endpoints"""
    payload = {
        "sub": user_id,
        "sid": "test-session-id",
        "exp": datetime.now(timezone.utc) + timedelta(hours=1),
        "iat": datetime.now(timezone.utc),
        "iss": Config.SERVICE_AUTH_ISSUER,
        "aud": Config.SERVICE_AUTH_AUDIENCE,
    }
    if name:
        payload["name"] = name

    token = jwt.encode(payload, Config.SERVICE_AUTH_SECRET, algorithm="HS256")
    return token


if __name__ == "__main__":
    token = generate_jwt_token(*sys.argv[1:2])
    print(f"Bearer {token}")
