# storage/accounts.py
from __future__ import annotations

from passlib.context import CryptContext
from sqlalchemy import func, insert, select
from sqlalchemy.engine import Connection

from logger import log
from storage.schema import User

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class AdminExistsError(Exception):
    """An administrator account is already present in the data store."""
    pass


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def count_admins(conn: Connection) -> int:
    return conn.execute(
        select(func.count()).select_from(User).where(User.is_admin.is_(True))
    ).scalar_one()


def create_admin_account(conn: Connection, email: str, password: str) -> int:
    """
    Insert the initial administrator and return its id.

    Raises AdminExistsError when any administrator already exists, which
    is what stops a second finalize from provisioning a second admin.
    """
    if count_admins(conn):
        conn.rollback()
        raise AdminExistsError("An administrator account already exists.")

    result = conn.execute(
        insert(User).values(
            email=email,
            username=email.split("@", 1)[0],
            password_hash=hash_password(password),
            is_admin=True,
            is_editor=True,
            is_activated=True,
        )
    )
    user_id = result.inserted_primary_key[0]
    conn.commit()
    log.info("Created administrator account %s (id=%s)", email, user_id)
    return user_id
