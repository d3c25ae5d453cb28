import os
import sys
import tempfile
import unittest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
src_path = os.path.join(ROOT, "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

import httpx  # noqa: E402

from api.app import create_app  # noqa: E402
from client.http import ApiClient, ApiError  # noqa: E402
from client.models import Category, Comment, Post, Product, User  # noqa: E402
from client.services import (  # noqa: E402
    AuthService,
    CategoryService,
    PostService,
    ProductService,
    SearchService,
    UserService,
)
from db.store import RecordStore  # noqa: E402


class ServicesTestCase(unittest.IsolatedAsyncioTestCase):
    """Services talking to an in-process server through the real client."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        store = RecordStore(os.path.join(self.temp_dir.name, "svc.sqlite"))
        self.app = create_app(store, latency=0)

    async def asyncSetUp(self):
        self.api = ApiClient(transport=httpx.ASGITransport(app=self.app))
        self.users = UserService(self.api)
        self.posts = PostService(self.api)
        self.products = ProductService(self.api)
        self.auth = AuthService(self.api)
        self.search = SearchService(self.api)
        self.categories = CategoryService(self.api)

    async def asyncTearDown(self):
        await self.api.aclose()

    def tearDown(self):
        self.temp_dir.cleanup()

    # ---------- users ----------

    async def test_user_crud(self):
        users = await self.users.get_all_users()
        self.assertEqual([u.id for u in users], [1, 2, 3])
        self.assertIsInstance(users[0], User)
        self.assertEqual(users[0].created_at, "2025-01-10T09:00:00.000Z")

        created = await self.users.create_user({"name": "Dora", "email": "d@example.com"})
        self.assertEqual(created.name, "Dora")
        self.assertEqual(await self.users.get_user_by_id(created.id), created)

        updated = await self.users.update_user(
            created.id, {"name": "Dora L.", "email": "d@example.com"}
        )
        self.assertEqual(updated.id, created.id)
        self.assertEqual(updated.name, "Dora L.")

        await self.users.delete_user(created.id)
        with self.assertRaises(ApiError) as ctx:
            await self.users.get_user_by_id(created.id)
        self.assertEqual(ctx.exception.message, "Not found")

    async def test_user_posts(self):
        posts = await self.users.get_user_posts(1)
        self.assertTrue(all(isinstance(p, Post) and p.user_id == 1 for p in posts))
        self.assertEqual(await self.users.get_user_posts(3), [])

    # ---------- posts ----------

    async def test_post_crud_and_comments(self):
        created = await self.posts.create_post(
            {"title": "Hello", "content": "World", "userId": 2, "likes": 0}
        )
        self.assertEqual(created.user_id, 2)
        self.assertEqual((await self.posts.get_post_by_id(created.id)).title, "Hello")

        updated = await self.posts.update_post(
            created.id, {"title": "Hello again", "content": "World", "userId": 2}
        )
        self.assertEqual(updated.title, "Hello again")

        await self.posts.delete_post(created.id)
        self.assertNotIn(created.id, [p.id for p in await self.posts.get_all_posts()])

        comments = await self.posts.get_post_comments(1)
        self.assertEqual([c.id for c in comments], [1, 2])
        self.assertIsInstance(comments[0], Comment)
        self.assertEqual(comments[0].post_id, 1)

    # ---------- products & categories ----------

    async def test_products(self):
        products = await self.products.get_all_products()
        self.assertEqual(len(products), 5)
        keyboard = await self.products.get_product_by_id(1)
        self.assertIsInstance(keyboard, Product)
        self.assertTrue(keyboard.in_stock)

        electronics = await self.products.get_products_by_category("electronics")
        self.assertEqual([p.id for p in electronics], [1, 2, 4])

        created = await self.products.create_product(
            {"name": "Desk", "price": 120, "category": "home office", "inStock": True, "stock": 2}
        )
        self.assertEqual(
            [p.id for p in await self.products.get_products_by_category("home office")],
            [created.id],
        )
        updated = await self.products.update_product(
            created.id, {"name": "Desk", "price": 99.0, "category": "home office"}
        )
        self.assertEqual(updated.price, 99.0)
        await self.products.delete_product(created.id)

    async def test_categories(self):
        categories = await self.categories.get_all_categories()
        self.assertEqual([c.name for c in categories], ["electronics", "kitchen", "Stationery"])
        self.assertIsInstance(categories[0], Category)
        self.assertEqual((await self.categories.get_category_by_id(2)).name, "kitchen")

    # ---------- auth & search ----------

    async def test_auth(self):
        result = await self.auth.login("alice@example.com", "whatever")
        self.assertTrue(result.token.startswith("fake-jwt-token-"))
        self.assertEqual(result.user.name, "Alice Martins")

        registered = await self.auth.register("Eve", "eve@example.com", "pw")
        self.assertEqual(registered.user.email, "eve@example.com")

        with self.assertRaises(ApiError) as ctx:
            await self.auth.register("Eve", "eve@example.com", "pw")
        self.assertEqual(ctx.exception.status, 409)
        self.assertEqual(ctx.exception.message, "User already exists")

    async def test_search(self):
        result = await self.search.search("mug & more")
        self.assertEqual(result.total, 0)

        result = await self.search.search("speaker")
        self.assertEqual([p.name for p in result.products], ["Bluetooth Speaker"])
        self.assertEqual(result.users, ())

        with self.assertRaises(ApiError) as ctx:
            await self.search.search("")
        self.assertEqual(ctx.exception.status, 400)


if __name__ == "__main__":
    unittest.main()
