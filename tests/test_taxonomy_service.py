"""Tests for category and tag services: slugs, ordering and in-use guards."""

import unittest

from support import add_note, add_user, identity_for, make_session_factory

from simple_notes.core.errors import AuthenticationRequired, FailedPrecondition, NotFound
from simple_notes.services import categories as category_service
from simple_notes.services import tags as tag_service
from simple_notes.services.slugs import slugify


class TestSlugify(unittest.TestCase):
    def test_basic(self) -> None:
        self.assertEqual(slugify("  Hello World  ", "tag"), "hello-world")
        self.assertEqual(slugify("C++ & Rust!", "tag"), "c-rust")

    def test_fallback_when_nothing_is_left(self) -> None:
        self.assertEqual(slugify("日本語", "category"), "category")


class TaxonomyTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.db = make_session_factory()()
        self.user = add_user(self.db, "writer")
        self.identity = identity_for(self.user)

    def tearDown(self) -> None:
        self.db.close()


class TestCategories(TaxonomyTestCase):
    def test_duplicate_names_get_distinct_slugs(self) -> None:
        first = category_service.create_category(self.db, self.identity, "Work")
        second = category_service.create_category(self.db, self.identity, "Work")
        self.assertEqual(first.slug, "work")
        self.assertEqual(second.slug, "work-2")
        self.assertEqual(category_service.get_category_by_slug(self.db, "work-2").id, second.id)

    def test_rename_keeps_own_slug_free(self) -> None:
        category = category_service.create_category(self.db, self.identity, "Work")
        renamed = category_service.update_category(self.db, self.identity, category.id, display_name="work")
        self.assertEqual(renamed.slug, "work")

    def test_writes_require_identity(self) -> None:
        with self.assertRaises(AuthenticationRequired):
            category_service.create_category(self.db, None, "Work")

    def test_delete_refused_while_in_use(self) -> None:
        category = category_service.create_category(self.db, self.identity, "Work")
        note = add_note(self.db, self.user)
        note.category_id = category.id
        self.db.commit()
        with self.assertRaises(FailedPrecondition):
            category_service.delete_category(self.db, self.identity, category.id)

    def test_delete_unused(self) -> None:
        category = category_service.create_category(self.db, self.identity, "Spare")
        category_service.delete_category(self.db, self.identity, category.id)
        with self.assertRaises(NotFound):
            category_service.get_category(self.db, category.id)


class TestTags(TaxonomyTestCase):
    def test_list_orders_by_usage_then_name(self) -> None:
        rare = tag_service.create_tag(self.db, self.identity, "Rare")
        common = tag_service.create_tag(self.db, self.identity, "Common")
        unused = tag_service.create_tag(self.db, self.identity, "Aardvark")
        for _ in range(2):
            add_note(self.db, self.user).tags = [common]
        add_note(self.db, self.user).tags = [rare]
        self.db.commit()

        tags, total = tag_service.list_tags(self.db)
        self.assertEqual(total, 3)
        self.assertEqual([t.id for t in tags], [common.id, rare.id, unused.id])
        self.assertEqual(tag_service.note_counts(self.db, [common.id, unused.id]), {common.id: 2, unused.id: 0})

    def test_limit_and_offset(self) -> None:
        for name in ("a", "b", "c"):
            tag_service.create_tag(self.db, self.identity, name)
        tags, total = tag_service.list_tags(self.db, limit=1, offset=1)
        self.assertEqual(total, 3)
        self.assertEqual([t.name for t in tags], ["b"])

    def test_offset_past_integer_range(self) -> None:
        tag_service.create_tag(self.db, self.identity, "only")
        tags, total = tag_service.list_tags(self.db, limit=10**20, offset=10**20)
        self.assertEqual(total, 1)
        self.assertEqual(tags, [])

    def test_delete_refused_while_in_use(self) -> None:
        tag = tag_service.create_tag(self.db, self.identity, "Busy")
        add_note(self.db, self.user).tags = [tag]
        self.db.commit()
        with self.assertRaises(FailedPrecondition):
            tag_service.delete_tag(self.db, self.identity, tag.id)


if __name__ == "__main__":
    unittest.main()
