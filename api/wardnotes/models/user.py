"""
User model.
"""
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime
import hashlib
import hmac
import secrets

from wardnotes.utils.time_utils import utc_now

if TYPE_CHECKING:
    from wardnotes.models.deck import FlashcardDeck
    from wardnotes.models.flashcard import Flashcard

_PBKDF2_ITERATIONS = 200_000


class User(SQLModel, table=True):
    """User table - owner of decks, flashcards and review logs."""
    __tablename__ = "user"

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(unique=True, index=True)  # Email address (login name)
    password: str  # "<salt>$<pbkdf2 hex digest>"
    full_name: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)

    # Relationships
    decks: List["FlashcardDeck"] = Relationship(back_populates="user")
    flashcards: List["Flashcard"] = Relationship(back_populates="user")

    @staticmethod
    def hash_password(password: str, salt: Optional[str] = None) -> str:
        """Salted PBKDF2-SHA256 password hash."""
        salt = salt or secrets.token_hex(16)
        digest = hashlib.pbkdf2_hmac(
            "sha256", password.encode(), salt.encode(), _PBKDF2_ITERATIONS
        ).hex()
        return f"{salt}${digest}"

    def verify_password(self, password: str) -> bool:
        """Verify a password against the stored hash."""
        salt, _, _ = self.password.partition("$")
        return hmac.compare_digest(self.password, self.hash_password(password, salt))
