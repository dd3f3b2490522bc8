# blogapi/api/auth/services.py
import logging
import uuid
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from blogapi.core.exceptions import ConflictError, NotFoundError, UnauthorizedError
from blogapi.core.security import hash_password, verify_password
from blogapi.models.user import User
from blogapi.services.firestore_service import FirestoreService
from blogapi.utils.datetime_utils import DateTimeUtils

logger = logging.getLogger(__name__)


class AuthService(FirestoreService):
    """
    Account registration, credential checks and the token blocklist.
    """

    def __init__(self, db=None):
        super().__init__(db)
        self.revoked_tokens_ref = self.db.collection('revoked_tokens')

    def _find_one(self, field: str, value: str) -> Optional[Dict[str, Any]]:
        docs = self.users_ref.where(field, '==', value).limit(1).stream()
        doc = next(iter(docs), None)
        return self._snapshot_to_dict(doc)

    def register_user(self, data: Dict[str, Any]) -> Dict[str, Any]:
        username = data['username'].strip()
        email = data['email'].strip().lower()

        if self._find_one('username', username):
            raise ConflictError("Username is already taken", error_code="USERNAME_TAKEN")
        if self._find_one('email', email):
            raise ConflictError("Email is already registered", error_code="EMAIL_TAKEN")

        user = User(
            user_id=str(uuid.uuid4()),
            username=username,
            email=email,
            full_name=data['full_name'].strip(),
            password_hash=hash_password(data['password']),
            avatar_url=data.get('avatar_url'),
        )
        self.users_ref.document(user.user_id).set(DateTimeUtils.for_firestore(asdict(user)))
        logger.info(f"User registered (user_id: {user.user_id})")
        return asdict(user)

    def authenticate(self, identifier: str, password: str) -> Dict[str, Any]:
        """Looks the user up by email or username and checks the password."""
        identifier = identifier.strip()
        user = self._find_one('email', identifier.lower()) or self._find_one('username', identifier)
        if not user or not verify_password(user.get('password_hash'), password):
            raise UnauthorizedError("Invalid credentials", error_code="INVALID_CREDENTIALS")
        return user

    def get_user(self, user_id: str) -> Dict[str, Any]:
        user = self._get(self.users_ref, user_id)
        if not user:
            raise NotFoundError("User not found", error_code="USER_NOT_FOUND")
        return user

    def get_author_summary(self, user_id: str) -> Dict[str, Any]:
        user = self.get_user(user_id)
        return {
            "user_id": user['user_id'],
            "username": user.get('username'),
            "full_name": user.get('full_name'),
            "avatar_url": user.get('avatar_url'),
        }

    # --- token blocklist ---
    def add_token_to_blocklist(self, jti: str, expires: datetime) -> None:
        self.revoked_tokens_ref.document(jti).set({
            'revoked_at': DateTimeUtils.now(),
            'expires_at': DateTimeUtils.for_firestore(expires),
        })

    def is_token_revoked(self, jwt_payload: dict) -> bool:
        jti = jwt_payload.get('jti')
        if not jti:
            return True
        return self.revoked_tokens_ref.document(jti).get().exists

    def logout_user(self, access_payload: dict, refresh_payload: Optional[dict] = None) -> None:
        """Revokes the presented access token and, when given, its refresh token."""
        for payload in filter(None, (access_payload, refresh_payload)):
            expires = datetime.fromtimestamp(payload['exp'], tz=timezone.utc)
            self.add_token_to_blocklist(payload['jti'], expires)
        logger.info(f"User logged out (jti: {access_payload['jti'][:8]}...)")
