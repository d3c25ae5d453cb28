import os
import sys
import tempfile
import unittest
from unittest import mock

# Ensure project src/ is on sys.path for imports
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
src_path = os.path.join(ROOT, "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from db import store as db_store  # noqa: E402
from db.store import RecordStore, UnknownCollectionError  # noqa: E402


class StoreTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        # Each test gets a fresh sqlite file seeded from seed.json
        self.temp_dir = tempfile.TemporaryDirectory()
        self.db_path = os.path.join(self.temp_dir.name, "test.sqlite")
        self.store = RecordStore(self.db_path)

    def tearDown(self):
        self.temp_dir.cleanup()

    # ---------- Reads ----------

    async def test_list_keeps_seed_order(self):
        users = await self.store.list("users")
        self.assertEqual([u["id"] for u in users], [1, 2, 3])
        self.assertEqual(users[0]["email"], "alice@example.com")

    async def test_get_missing_returns_none(self):
        self.assertIsNone(await self.store.get("users", 424242))

    async def test_list_filters_compare_as_text(self):
        posts = await self.store.list("posts", {"userId": "1"})
        self.assertEqual([p["id"] for p in posts], [1, 2])

        out_of_stock = await self.store.list("products", {"inStock": "false"})
        self.assertEqual([p["name"] for p in out_of_stock], ["Coffee Mug"])

    async def test_filter_by_is_strict(self):
        self.assertEqual(
            [p["id"] for p in await self.store.filter_by("posts", "userId", 1)], [1, 2]
        )
        # no coercion between "1" and 1
        self.assertEqual(await self.store.filter_by("posts", "userId", "1"), [])
        self.assertEqual(await self.store.filter_by("posts", "userId", 3), [])

    async def test_search_is_case_insensitive_and_ordered(self):
        found = await self.store.search("products", "KEYBOARD", ("name", "description"))
        self.assertEqual([p["id"] for p in found], [1])

        found = await self.store.search("posts", "s", ("title", "content"))
        self.assertEqual([p["id"] for p in found], [1, 2, 3])

    async def test_search_skips_missing_fields(self):
        await self.store.insert("users", {"name": "No Email"})
        found = await self.store.search("users", "example.com", ("name", "email"))
        self.assertEqual(len(found), 3)

    async def test_unknown_collection(self):
        with self.assertRaises(UnknownCollectionError):
            await self.store.list("widgets")
        with self.assertRaises(UnknownCollectionError):
            await self.store.insert("widgets", {"name": "x"})

    async def test_snapshot_layout(self):
        snap = await self.store.snapshot()
        self.assertEqual(
            set(snap), {"users", "posts", "products", "comments", "categories"}
        )
        self.assertEqual(len(snap["products"]), 5)

    async def test_empty_store_without_seed(self):
        empty = RecordStore(os.path.join(self.temp_dir.name, "empty.sqlite"), None)
        self.assertEqual(await empty.list("users"), [])
        created = await empty.insert("users", {"name": "First"})
        self.assertIsInstance(created["id"], int)

    # ---------- Writes ----------

    async def test_insert_assigns_fresh_id(self):
        fields = {"name": "Dora", "email": "dora@example.com"}
        created = await self.store.insert("users", fields)

        existing = {1, 2, 3}
        self.assertNotIn(created["id"], existing)
        self.assertEqual({k: v for k, v in created.items() if k != "id"}, fields)
        self.assertEqual(await self.store.get("users", created["id"]), created)

        # appended at the end
        users = await self.store.list("users")
        self.assertEqual(users[-1]["id"], created["id"])

    async def test_insert_ignores_client_id(self):
        created = await self.store.insert("posts", {"id": 1, "title": "dup"})
        self.assertNotEqual(created["id"], 1)
        self.assertEqual((await self.store.get("posts", 1))["title"], "Getting started with the store API")

    async def test_ids_are_monotonic(self):
        a = await self.store.insert("comments", {"postId": 1})
        b = await self.store.insert("comments", {"postId": 1})
        self.assertGreater(b["id"], a["id"])

    async def test_next_id_never_goes_backwards(self):
        far_future = 10**15
        async with db_store.connect(self.db_path) as conn:
            await conn.execute(
                "INSERT INTO records(collection, id, body) VALUES (?, ?, ?);",
                ("categories", far_future, '{"id": %d}' % far_future),
            )
            await conn.commit()
        created = await self.store.insert("categories", {"name": "later"})
        self.assertEqual(created["id"], far_future + 1)

    async def test_deleted_id_is_not_reissued(self):
        # same millisecond for every insert
        with mock.patch.object(db_store.time, "time", return_value=1_700_000_000.0):
            first = await self.store.insert("comments", {"postId": 2})
            self.assertTrue(await self.store.delete("comments", first["id"]))
            second = await self.store.insert("comments", {"postId": 2})
        self.assertGreater(second["id"], first["id"])

        # the mark is on disk, not in memory
        reopened = RecordStore(self.db_path)
        third = await reopened.insert("comments", {"postId": 2})
        self.assertGreater(third["id"], second["id"])

    async def test_insert_unique(self):
        before = len(await self.store.list("users"))
        self.assertIsNone(
            await self.store.insert_unique(
                "users", {"name": "A", "email": "alice@example.com"}, "email"
            )
        )
        self.assertEqual(len(await self.store.list("users")), before)

        created = await self.store.insert_unique(
            "users", {"name": "E", "email": "e@example.com"}, "email"
        )
        self.assertIsNotNone(created)
        self.assertEqual(len(await self.store.list("users")), before + 1)

    async def test_replace_keeps_id_and_position(self):
        replaced = await self.store.replace("products", 2, {"id": 99, "name": "Trackball"})
        self.assertEqual(replaced, {"name": "Trackball", "id": 2})

        products = await self.store.list("products")
        self.assertEqual([p["id"] for p in products], [1, 2, 3, 4, 5])
        self.assertEqual(products[1], {"name": "Trackball", "id": 2})

        self.assertIsNone(await self.store.replace("products", 999, {"name": "x"}))

    async def test_patch_merges(self):
        patched = await self.store.patch("products", 3, {"stock": 7, "inStock": True})
        self.assertEqual(patched["name"], "Coffee Mug")
        self.assertEqual(patched["stock"], 7)
        self.assertTrue(patched["inStock"])
        self.assertIsNone(await self.store.patch("products", 999, {"stock": 1}))

    async def test_delete_does_not_cascade(self):
        self.assertTrue(await self.store.delete("users", 1))
        self.assertIsNone(await self.store.get("users", 1))
        self.assertFalse(await self.store.delete("users", 1))

        # posts and comments pointing at the user survive
        self.assertEqual(len(await self.store.filter_by("posts", "userId", 1)), 2)
        self.assertEqual(len(await self.store.filter_by("comments", "userId", 1)), 1)

    async def test_writes_are_visible_to_a_new_store(self):
        created = await self.store.insert("categories", {"name": "toys"})
        await self.store.delete("products", 5)

        reopened = RecordStore(self.db_path)
        self.assertEqual(await reopened.get("categories", created["id"]), created)
        self.assertIsNone(await reopened.get("products", 5))


if __name__ == "__main__":
    unittest.main()
