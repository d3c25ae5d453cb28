# provide dataclass models for records coming back from the store server

from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional, Tuple

# wire key -> attribute name, for the camelCase keys the server uses
_WIRE_NAMES = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "userId": "user_id",
    "postId": "post_id",
    "inStock": "in_stock",
}
_ATTR_NAMES = {v: k for k, v in _WIRE_NAMES.items()}


def _from_wire(cls, data: Dict[str, Any]):
    names = {f.name for f in fields(cls)}
    kwargs = {}
    for key, value in data.items():
        attr = _WIRE_NAMES.get(key, key)
        if attr in names:
            kwargs[attr] = value
    return cls(**kwargs)


def to_wire(values: Dict[str, Any]) -> Dict[str, Any]:
    """Map snake_case attribute names back to the server's keys."""
    return {_ATTR_NAMES.get(k, k): v for k, v in values.items()}


class Record:
    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        return _from_wire(cls, data)


@dataclass(frozen=True)
class User(Record):
    id: int
    name: str = ""
    email: str = ""
    avatar: Optional[str] = None
    created_at: Optional[str] = None


@dataclass(frozen=True)
class Post(Record):
    id: int
    title: str = ""
    content: str = ""
    user_id: Optional[int] = None
    likes: int = 0
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


@dataclass(frozen=True)
class Product(Record):
    id: int
    name: str = ""
    price: float = 0.0
    description: str = ""
    category: str = ""
    image: Optional[str] = None
    in_stock: bool = False
    stock: int = 0


@dataclass(frozen=True)
class Comment(Record):
    id: int
    post_id: Optional[int] = None
    user_id: Optional[int] = None
    content: str = ""
    created_at: Optional[str] = None


@dataclass(frozen=True)
class Category(Record):
    id: int
    name: str = ""
    description: str = ""


@dataclass(frozen=True)
class AuthResult:
    token: str
    user: User

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AuthResult":
        return cls(token=data["token"], user=User.from_dict(data["user"]))


@dataclass(frozen=True)
class SearchResult:
    users: Tuple[User, ...] = field(default_factory=tuple)
    posts: Tuple[Post, ...] = field(default_factory=tuple)
    products: Tuple[Product, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SearchResult":
        return cls(
            users=tuple(User.from_dict(d) for d in data.get("users", [])),
            posts=tuple(Post.from_dict(d) for d in data.get("posts", [])),
            products=tuple(Product.from_dict(d) for d in data.get("products", [])),
        )

    @property
    def total(self) -> int:
        return len(self.users) + len(self.posts) + len(self.products)


def parse_list(cls, data: List[Dict[str, Any]]) -> List:
    return [cls.from_dict(d) for d in data]
