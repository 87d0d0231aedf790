"""Session token issuance and verification (JWT, ES256).

The session cookie is the only source of truth for who is signed in:
there is no server-side session table, so a token stays valid until it
expires (30 days).  Logging out deletes the cookie in that browser but
cannot revoke a copied token.
"""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime, timedelta

import jwt
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from feedr.core.config import SETTINGS
from feedr.models.session import SessionClaims

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Key management
# ---------------------------------------------------------------------------
# SESSION_SIGNING_KEY holds a PEM EC P-256 private key (required in prod).
# Without it, dev/test generate an ephemeral key on import and every
# restart signs everyone out.


def _load_private_key(pem: str | None) -> ec.EllipticCurvePrivateKey:
    if pem is None:
        return ec.generate_private_key(ec.SECP256R1())
    key = serialization.load_pem_private_key(pem.encode(), password=None)
    if not isinstance(key, ec.EllipticCurvePrivateKey):
        raise ValueError("SESSION_SIGNING_KEY must be an EC private key")
    return key


_private_key = _load_private_key(SETTINGS.session_signing_key)
_public_key = _private_key.public_key()

ALGORITHM = "ES256"
ISSUER = "feedr"
SESSION_AUDIENCE = "feedr-session"
SESSION_TTL_DAYS = 30
SESSION_COOKIE = "session"


def issue(user_id: str, org_id: str, email: str) -> str:
    """Sign a session token carrying the acting user, org and email."""
    now = datetime.now(UTC)
    payload = {
        "sub": user_id,
        "org": org_id,
        "email": email,
        "iss": ISSUER,
        "aud": SESSION_AUDIENCE,
        "exp": now + timedelta(days=SESSION_TTL_DAYS),
        "iat": now,
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(payload, _private_key, algorithm=ALGORITHM)


def verify(token: str | None) -> SessionClaims | None:
    """Return the claims of a valid token, or None.  Never raises.

    Pins the algorithm to ES256 and checks issuer, audience and expiry.
    """
    if not token:
        return None
    try:
        claims = jwt.decode(
            token,
            _public_key,
            algorithms=[ALGORITHM],
            issuer=ISSUER,
            audience=SESSION_AUDIENCE,
            options={"require": ["sub", "org", "exp", "iat"]},
        )
    except jwt.ExpiredSignatureError:
        logger.debug("Session token expired")
        return None
    except jwt.InvalidTokenError as e:
        logger.debug("Invalid session token: %s", type(e).__name__)
        return None

    return SessionClaims(
        user_id=str(claims["sub"]),
        org_id=str(claims["org"]),
        email=str(claims.get("email", "")),
    )
