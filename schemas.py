"""
Database Schemas for the Dating App

Each Pydantic model describes the documents of one MongoDB collection.
- User -> "users"
- Message -> "messages"

MatchRecord is embedded in User.matches and is never stored on its own.
"""

from pydantic import BaseModel, Field
from typing import List, Optional


class MatchRecord(BaseModel):
    """Directed edge from the owning user to another user."""
    user_id: str = Field(..., description="User ID this user has matched with")


class Profile(BaseModel):
    """
    Editable profile fields.
    Every field is optional so a partial update only touches what was sent.
    """
    first_name: Optional[str] = Field(None, description="Display name")
    dob_day: Optional[str] = Field(None, description="Day of birth")
    dob_month: Optional[str] = Field(None, description="Month of birth")
    dob_year: Optional[str] = Field(None, description="Year of birth")
    show_gender: Optional[bool] = Field(None, description="Whether to show gender on the profile")
    gender_identity: Optional[str] = Field(None, description="Gender identity")
    gender_interest: Optional[str] = Field(None, description="Gender the user wants to see")
    url: Optional[str] = Field(None, description="Profile picture URL")
    about: Optional[str] = Field(None, description="Short bio")


class User(Profile):
    """
    User accounts and profiles
    Collection name: "users"
    """
    user_id: str = Field(..., description="Public user identifier (uuid4)")
    email: str = Field(..., description="Lowercased email address")
    hashed_password: str = Field(..., description="bcrypt password hash")
    matches: List[MatchRecord] = Field(default_factory=list, description="One-directional match records")


class Message(BaseModel):
    """
    Direct messages
    Collection name: "messages"
    """
    timestamp: Optional[str] = Field(None, description="Client supplied send time (ISO 8601)")
    from_userId: str = Field(..., description="Sender user ID")
    to_userId: str = Field(..., description="Recipient user ID")
    message: str = Field(..., min_length=1, description="Message text")
