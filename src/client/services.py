# endpoint wrappers, one class per entity; no logic beyond building the path
from typing import Any, Dict, List, Mapping
from urllib.parse import quote

from client.http import ApiClient
from client.models import (
    AuthResult,
    Category,
    Comment,
    Post,
    Product,
    SearchResult,
    User,
    parse_list,
)


class _Service:
    def __init__(self, api: ApiClient) -> None:
        self.api = api


class UserService(_Service):
    async def get_all_users(self) -> List[User]:
        return parse_list(User, await self.api.get("/users"))

    async def get_user_by_id(self, user_id: int) -> User:
        return User.from_dict(await self.api.get(f"/users/{user_id}"))

    async def get_user_posts(self, user_id: int) -> List[Post]:
        return parse_list(Post, await self.api.get(f"/users/{user_id}/posts"))

    async def create_user(self, user_data: Mapping[str, Any]) -> User:
        return User.from_dict(await self.api.post("/users", dict(user_data)))

    async def update_user(self, user_id: int, user_data: Mapping[str, Any]) -> User:
        return User.from_dict(await self.api.put(f"/users/{user_id}", dict(user_data)))

    async def delete_user(self, user_id: int) -> None:
        await self.api.delete(f"/users/{user_id}")


class PostService(_Service):
    async def get_all_posts(self) -> List[Post]:
        return parse_list(Post, await self.api.get("/posts"))

    async def get_post_by_id(self, post_id: int) -> Post:
        return Post.from_dict(await self.api.get(f"/posts/{post_id}"))

    async def get_post_comments(self, post_id: int) -> List[Comment]:
        return parse_list(Comment, await self.api.get(f"/posts/{post_id}/comments"))

    async def create_post(self, post_data: Mapping[str, Any]) -> Post:
        return Post.from_dict(await self.api.post("/posts", dict(post_data)))

    async def update_post(self, post_id: int, post_data: Mapping[str, Any]) -> Post:
        return Post.from_dict(await self.api.put(f"/posts/{post_id}", dict(post_data)))

    async def delete_post(self, post_id: int) -> None:
        await self.api.delete(f"/posts/{post_id}")


class ProductService(_Service):
    async def get_all_products(self) -> List[Product]:
        return parse_list(Product, await self.api.get("/products"))

    async def get_product_by_id(self, product_id: int) -> Product:
        return Product.from_dict(await self.api.get(f"/products/{product_id}"))

    async def get_products_by_category(self, category: str) -> List[Product]:
        return parse_list(
            Product, await self.api.get(f"/products/category/{quote(category, safe='')}")
        )

    async def create_product(self, product_data: Mapping[str, Any]) -> Product:
        return Product.from_dict(await self.api.post("/products", dict(product_data)))

    async def update_product(
        self, product_id: int, product_data: Mapping[str, Any]
    ) -> Product:
        return Product.from_dict(
            await self.api.put(f"/products/{product_id}", dict(product_data))
        )

    async def delete_product(self, product_id: int) -> None:
        await self.api.delete(f"/products/{product_id}")


class AuthService(_Service):
    async def login(self, email: str, password: str) -> AuthResult:
        data: Dict[str, Any] = await self.api.post(
            "/auth/login", {"email": email, "password": password}
        )
        return AuthResult.from_dict(data)

    async def register(self, name: str, email: str, password: str) -> AuthResult:
        data = await self.api.post(
            "/auth/register", {"name": name, "email": email, "password": password}
        )
        return AuthResult.from_dict(data)


class SearchService(_Service):
    async def search(self, query: str) -> SearchResult:
        return SearchResult.from_dict(
            await self.api.get(f"/search?q={quote(query, safe='')}")
        )


class CategoryService(_Service):
    async def get_all_categories(self) -> List[Category]:
        return parse_list(Category, await self.api.get("/categories"))

    async def get_category_by_id(self, category_id: int) -> Category:
        return Category.from_dict(await self.api.get(f"/categories/{category_id}"))
