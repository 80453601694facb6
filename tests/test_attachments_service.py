"""Tests for attachment validation, linking and read rules."""

import unittest

from support import add_note, add_user, identity_for, make_session_factory

from simple_notes.core.errors import AuthenticationRequired, InvalidArgument, NotFound, PermissionDenied
from simple_notes.models import NoteVisibility, UserRole
from simple_notes.services import attachments as attachment_service


class TestValidation(unittest.TestCase):
    def test_filenames(self) -> None:
        for name in ("report.pdf", "photo 1.jpg", "日本語.txt"):
            with self.subTest(name=name):
                self.assertTrue(attachment_service.is_valid_filename(name))
        for name in ("", "../etc/passwd", "a\\b", " lead", "trail.", ".hidden", "x" * 256):
            with self.subTest(name=name):
                self.assertFalse(attachment_service.is_valid_filename(name))

    def test_mime_types(self) -> None:
        self.assertTrue(attachment_service.is_valid_mime_type("image/png"))
        self.assertTrue(attachment_service.is_valid_mime_type("application/vnd.ms-excel"))
        self.assertFalse(attachment_service.is_valid_mime_type("png"))
        self.assertFalse(attachment_service.is_valid_mime_type("text/html; charset=utf-8"))


class AttachmentsServiceTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.db = make_session_factory()()
        self.author = add_user(self.db, "author")
        self.stranger = add_user(self.db, "stranger")
        self.admin = add_user(self.db, "admin", UserRole.ADMIN)

    def tearDown(self) -> None:
        self.db.close()

    def _upload(self, user, note_id=None, content=b"hello"):
        return attachment_service.create_attachment(
            self.db, identity_for(user), "hello.txt", "text/plain", content, note_id=note_id
        )


class TestCreateAttachment(AttachmentsServiceTestCase):
    def test_records_size_and_author(self) -> None:
        attachment = self._upload(self.author)
        self.assertEqual(attachment.size, 5)
        self.assertEqual(attachment.author_id, self.author.id)
        self.assertIsNone(attachment.note_id)

    def test_requires_identity(self) -> None:
        with self.assertRaises(AuthenticationRequired):
            attachment_service.create_attachment(self.db, None, "a.txt", "text/plain", b"a")

    def test_rejects_empty_and_oversized(self) -> None:
        with self.assertRaises(InvalidArgument):
            self._upload(self.author, content=b"")
        with self.assertRaises(InvalidArgument):
            attachment_service.create_attachment(
                self.db, identity_for(self.author), "a.bin", "application/octet-stream", b"12345", max_bytes=4
            )

    def test_cannot_attach_to_someone_elses_note(self) -> None:
        note = add_note(self.db, self.author)
        with self.assertRaises(PermissionDenied):
            self._upload(self.stranger, note_id=note.id)

    def test_unknown_note(self) -> None:
        with self.assertRaises(NotFound):
            self._upload(self.author, note_id=404)


class TestReadAttachment(AttachmentsServiceTestCase):
    def test_unlinked_readable_only_by_uploader(self) -> None:
        attachment = self._upload(self.author)
        self.assertEqual(
            attachment_service.get_attachment(self.db, identity_for(self.author), attachment.id).id,
            attachment.id,
        )
        with self.assertRaises(PermissionDenied):
            attachment_service.get_attachment(self.db, identity_for(self.stranger), attachment.id)
        with self.assertRaises(PermissionDenied):
            attachment_service.get_attachment(self.db, identity_for(self.admin), attachment.id)
        with self.assertRaises(AuthenticationRequired):
            attachment_service.get_attachment(self.db, None, attachment.id)

    def test_linked_follows_note_visibility(self) -> None:
        public = add_note(self.db, self.author)
        private = add_note(self.db, self.author, visibility=NoteVisibility.PRIVATE)
        on_public = self._upload(self.author, note_id=public.id)
        on_private = self._upload(self.author, note_id=private.id)
        self.assertEqual(attachment_service.get_attachment(self.db, None, on_public.id).id, on_public.id)
        with self.assertRaises(PermissionDenied):
            attachment_service.get_attachment(self.db, identity_for(self.stranger), on_private.id)
        self.assertEqual(
            attachment_service.get_attachment(self.db, identity_for(self.admin), on_private.id).id,
            on_private.id,
        )


class TestListAttachments(AttachmentsServiceTestCase):
    def test_by_note_is_public_for_public_notes(self) -> None:
        note = add_note(self.db, self.author)
        linked = self._upload(self.author, note_id=note.id)
        self._upload(self.author)
        listed = attachment_service.list_attachments(self.db, None, note_id=note.id)
        self.assertEqual([a.id for a in listed], [linked.id])

    def test_by_private_note_needs_permission(self) -> None:
        note = add_note(self.db, self.author, visibility=NoteVisibility.PRIVATE)
        with self.assertRaises(PermissionDenied):
            attachment_service.list_attachments(self.db, identity_for(self.stranger), note_id=note.id)

    def test_without_note_lists_own_uploads(self) -> None:
        mine = self._upload(self.author)
        self._upload(self.stranger)
        listed = attachment_service.list_attachments(self.db, identity_for(self.author))
        self.assertEqual([a.id for a in listed], [mine.id])
        with self.assertRaises(AuthenticationRequired):
            attachment_service.list_attachments(self.db, None)


class TestUpdateAndDeleteAttachment(AttachmentsServiceTestCase):
    def test_link_then_unlink(self) -> None:
        note = add_note(self.db, self.author)
        attachment = self._upload(self.author)
        linked = attachment_service.update_attachment(self.db, identity_for(self.author), attachment.id, note.id)
        self.assertEqual(linked.note_id, note.id)
        unlinked = attachment_service.update_attachment(self.db, identity_for(self.author), attachment.id, None)
        self.assertIsNone(unlinked.note_id)

    def test_stranger_cannot_relink_or_delete(self) -> None:
        attachment = self._upload(self.author)
        with self.assertRaises(PermissionDenied):
            attachment_service.update_attachment(self.db, identity_for(self.stranger), attachment.id, None)
        with self.assertRaises(PermissionDenied):
            attachment_service.delete_attachment(self.db, identity_for(self.stranger), attachment.id)

    def test_admin_deletes(self) -> None:
        attachment = self._upload(self.author)
        attachment_service.delete_attachment(self.db, identity_for(self.admin), attachment.id)
        with self.assertRaises(NotFound):
            attachment_service.get_attachment(self.db, identity_for(self.author), attachment.id)


if __name__ == "__main__":
    unittest.main()
