from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from client.http import ApiClient
from client.models import AuthResult, User
from client.services import (
    AuthService,
    CategoryService,
    PostService,
    ProductService,
    SearchService,
    UserService,
)


@dataclass
class GlobalState:
    """
    Centralized application state shared by screens.

    Fields:
      - api: the one HTTP client every service goes through
      - token: placeholder token from the last login/register, None when logged out
      - user: public projection of the logged-in user
    """

    api: ApiClient = field(default_factory=ApiClient)
    token: Optional[str] = None
    user: Optional[User] = None

    def __post_init__(self) -> None:
        self.users = UserService(self.api)
        self.posts = PostService(self.api)
        self.products = ProductService(self.api)
        self.auth = AuthService(self.api)
        self.search = SearchService(self.api)
        self.categories = CategoryService(self.api)

    @property
    def logged_in(self) -> bool:
        return self.token is not None

    def start_session(self, result: AuthResult) -> None:
        self.token = result.token
        self.user = result.user

    def end_session(self) -> None:
        self.token = None
        self.user = None
