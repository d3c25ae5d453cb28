"""
Request and response schemas for the store server.

Record bodies keep every field optional and allow extra keys: the collections
are schemaless, but a field that is present must have the right type.
"""

from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, ConfigDict, Field


class RecordBody(BaseModel):
    model_config = ConfigDict(extra="allow")

    # ids are assigned by the store; a client-sent id is dropped
    id: Optional[Any] = Field(default=None, exclude=True)

    def record_fields(self) -> Dict:
        return self.model_dump(exclude_unset=True)


class UserBody(RecordBody):
    name: Optional[str] = None
    email: Optional[str] = None
    avatar: Optional[str] = None
    createdAt: Optional[str] = None


class PostBody(RecordBody):
    title: Optional[str] = None
    content: Optional[str] = None
    userId: Optional[int] = None
    likes: Optional[int] = None
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None


class ProductBody(RecordBody):
    name: Optional[str] = None
    price: Optional[float] = None
    description: Optional[str] = None
    category: Optional[str] = None
    image: Optional[str] = None
    inStock: Optional[bool] = None
    stock: Optional[int] = None


class CommentBody(RecordBody):
    postId: Optional[int] = None
    userId: Optional[int] = None
    content: Optional[str] = None
    createdAt: Optional[str] = None


class CategoryBody(RecordBody):
    name: Optional[str] = None
    description: Optional[str] = None


RECORD_BODIES: Dict[str, Type[RecordBody]] = {
    "users": UserBody,
    "posts": PostBody,
    "products": ProductBody,
    "comments": CommentBody,
    "categories": CategoryBody,
}


# Auth
class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class RegisterRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class PublicUser(BaseModel):
    """The part of a user record that auth routes hand back."""

    id: int
    name: str
    email: str
    avatar: Optional[str] = None


class AuthResponse(BaseModel):
    token: str
    user: PublicUser


class SearchResponse(BaseModel):
    users: List[Dict] = Field(default_factory=list)
    posts: List[Dict] = Field(default_factory=list)
    products: List[Dict] = Field(default_factory=list)
