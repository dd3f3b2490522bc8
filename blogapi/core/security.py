# blogapi/core/security.py
"""
Password hashing and the single ownership policy shared by every mutating operation.
"""
from typing import Any, Dict, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from blogapi.core.exceptions import ForbiddenError, NotFoundError


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password_hash: Optional[str], password: str) -> bool:
    if not password_hash:
        return False
    return check_password_hash(password_hash, password)


def owner_id_of(record: Dict[str, Any]) -> Optional[str]:
    """Returns the user id stored in the embedded ``author`` summary of a document."""
    author = record.get('author') or {}
    return author.get('user_id')


def ensure_owner(record: Optional[Dict[str, Any]], user_id: str, resource: str = "Resource") -> Dict[str, Any]:
    """
    Authorizes a mutation of ``record`` by ``user_id``.

    :raises NotFoundError: the record does not exist
    :raises ForbiddenError: the record belongs to someone else
    :return: the record, unchanged
    """
    if record is None:
        raise NotFoundError(f"{resource} not found", error_code=f"{resource.upper()}_NOT_FOUND")
    if owner_id_of(record) != user_id:
        raise ForbiddenError(
            f"Unauthorized: You cannot modify this {resource.lower()}",
            error_code="FORBIDDEN",
        )
    return record
