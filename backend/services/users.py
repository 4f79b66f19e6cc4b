# backend/services/users.py
import logging
from typing import List, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config import Settings
from models.users import ROLES, User
from utils.errors import Conflict, InvalidCredential, InvalidInput, NotFound
from utils.hashing import MAX_PASSWORD_BYTES, get_password_hash, verify_password
from utils.tokenJWT import token_for_user

logger = logging.getLogger(__name__)


def authenticate(db: Session, username, password, settings: Settings) -> Tuple[User, str]:
    """Check a username/password pair and issue a token.

    Unknown user and wrong password fail with the same InvalidCredential.
    """
    if not isinstance(username, str) or not username.strip() or not password:
        raise InvalidInput("Username and password are required")

    # Stored usernames are trimmed on creation
    user = db.query(User).filter(User.username == username.strip()).first()
    if user is None or not verify_password(password, user.password_hash):
        raise InvalidCredential("Invalid credentials")

    return user, token_for_user(user, settings)


# Newest accounts first
def list_users(db: Session) -> List[User]:
    return db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()


def create_user(db: Session, username, password, role, settings: Settings) -> User:
    if not isinstance(username, str) or not username.strip():
        raise InvalidInput("Username and password are required")
    if not isinstance(password, str) or not password.strip():
        raise InvalidInput("Username and password are required")
    if role not in ROLES:
        raise InvalidInput("Role must be admin or worker")
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise InvalidInput(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")

    username = username.strip()
    if db.query(User).filter(User.username == username).first():
        raise Conflict("A user with this username already exists")

    user = User(
        username=username,
        password_hash=get_password_hash(password, rounds=settings.BCRYPT_ROUNDS),
        role=role,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with another request creating the same username
        db.rollback()
        raise Conflict("A user with this username already exists")
    db.refresh(user)
    return user


def delete_user(db: Session, user_id: int, current_user_id: int) -> str:
    if user_id == current_user_id:
        raise InvalidInput("You cannot delete your own account")

    user = db.get(User, user_id)
    if user is None:
        raise NotFound("User not found")

    username = user.username
    db.delete(user)
    db.commit()
    logger.info("Deleted user %s (%s)", user_id, username)
    return username
