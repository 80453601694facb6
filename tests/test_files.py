"""Tests for the /file attachment server: access rules and response hardening."""

import unittest

from support import ApiTestCase, add_note, add_user

from simple_notes.api.files import content_disposition, is_inline, parse_range, safe_content_type
from simple_notes.models import Attachment, NoteVisibility, UserRole


class TestContentTypes(unittest.TestCase):
    def test_active_content_is_downgraded(self) -> None:
        for mime in ("text/html", "TEXT/HTML", "image/svg+xml", "application/javascript", "text/xml"):
            with self.subTest(mime=mime):
                self.assertEqual(safe_content_type(mime), "application/octet-stream")

    def test_html_with_parameters_is_still_downgraded(self) -> None:
        self.assertEqual(safe_content_type("text/html; charset=utf-8"), "application/octet-stream")

    def test_text_gets_charset(self) -> None:
        self.assertEqual(safe_content_type("text/plain"), "text/plain; charset=utf-8")
        self.assertEqual(safe_content_type("text/markdown"), "text/markdown; charset=utf-8")

    def test_empty_falls_back(self) -> None:
        self.assertEqual(safe_content_type(""), "application/octet-stream")

    def test_inline_types(self) -> None:
        self.assertTrue(is_inline("image/png"))
        self.assertTrue(is_inline("video/mp4"))
        self.assertTrue(is_inline("application/pdf"))
        self.assertFalse(is_inline("application/zip"))
        self.assertFalse(is_inline("text/plain; charset=utf-8"))

    def test_content_disposition(self) -> None:
        self.assertEqual(content_disposition("a.zip"), 'attachment; filename="a.zip"')
        self.assertEqual(
            content_disposition("résumé.pdf"), "attachment; filename*=utf-8''r%C3%A9sum%C3%A9.pdf"
        )


class TestParseRange(unittest.TestCase):
    def test_ranges(self) -> None:
        self.assertIsNone(parse_range(None, 10))
        self.assertEqual(parse_range("bytes=0-3", 10), (0, 3))
        self.assertEqual(parse_range("bytes=5-", 10), (5, 9))
        self.assertEqual(parse_range("bytes=-4", 10), (6, 9))
        self.assertEqual(parse_range("bytes=8-100", 10), (8, 9))

    def test_multiple_ranges_serve_whole_body(self) -> None:
        self.assertIsNone(parse_range("bytes=0-1,4-5", 10))


class TestServeAttachmentFile(ApiTestCase, unittest.TestCase):
    def setUp(self) -> None:
        super().setUp()
        self.author = add_user(self.db, "author")
        self.stranger = add_user(self.db, "stranger")
        self.admin = add_user(self.db, "admin", UserRole.ADMIN)

    def _attach(self, filename: str, mime_type: str, content: bytes, note_id: int | None = None) -> Attachment:
        attachment = Attachment(
            filename=filename,
            mime_type=mime_type,
            size=len(content),
            content=content,
            author_id=self.author.id,
            note_id=note_id,
        )
        self.db.add(attachment)
        self.db.commit()
        self.db.refresh(attachment)
        return attachment

    def _get(self, attachment: Attachment, headers: dict[str, str] | None = None):
        return self.client.get(f"/file/attachments/{attachment.id}/{attachment.filename}", headers=headers)

    def test_public_note_file_is_served_inline(self) -> None:
        note = add_note(self.db, self.author)
        attachment = self._attach("pic.png", "image/png", b"\x89PNG....", note.id)
        response = self._get(attachment)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.content, b"\x89PNG....")
        self.assertEqual(response.headers["content-type"], "image/png")
        self.assertEqual(response.headers["x-content-type-options"], "nosniff")
        self.assertEqual(response.headers["x-frame-options"], "DENY")
        self.assertIn("default-src 'none'", response.headers["content-security-policy"])
        self.assertNotIn("content-disposition", response.headers)

    def test_html_is_forced_to_download(self) -> None:
        note = add_note(self.db, self.author)
        attachment = self._attach("page.html", "text/html", b"<script>alert(1)</script>", note.id)
        response = self._get(attachment)
        self.assertEqual(response.headers["content-type"], "application/octet-stream")
        self.assertEqual(response.headers["content-disposition"], 'attachment; filename="page.html"')

    def test_text_gets_charset_and_download(self) -> None:
        note = add_note(self.db, self.author)
        attachment = self._attach("readme.txt", "text/plain", b"hi", note.id)
        response = self._get(attachment)
        self.assertEqual(response.headers["content-type"], "text/plain; charset=utf-8")
        self.assertTrue(response.headers["content-disposition"].startswith("attachment;"))

    def test_private_note_file(self) -> None:
        note = add_note(self.db, self.author, visibility=NoteVisibility.PRIVATE)
        attachment = self._attach("pic.png", "image/png", b"png", note.id)
        self.assertEqual(self._get(attachment).status_code, 401)
        self.assertEqual(self._get(attachment, self.auth_headers(self.stranger)).status_code, 403)
        self.assertEqual(self._get(attachment, self.auth_headers(self.admin)).status_code, 200)

    def test_unlinked_file_only_for_uploader(self) -> None:
        attachment = self._attach("draft.png", "image/png", b"png")
        self.assertEqual(self._get(attachment, self.auth_headers(self.author)).status_code, 200)
        self.assertEqual(self._get(attachment, self.auth_headers(self.admin)).status_code, 403)

    def test_missing_attachment(self) -> None:
        self.assertEqual(self.client.get("/file/attachments/999/x.png").status_code, 404)

    def test_video_range_request(self) -> None:
        note = add_note(self.db, self.author)
        attachment = self._attach("clip.mp4", "video/mp4", b"0123456789", note.id)
        response = self._get(attachment, {"Range": "bytes=2-5"})
        self.assertEqual(response.status_code, 206)
        self.assertEqual(response.content, b"2345")
        self.assertEqual(response.headers["content-range"], "bytes 2-5/10")
        self.assertEqual(response.headers["accept-ranges"], "bytes")

    def test_unsatisfiable_range(self) -> None:
        note = add_note(self.db, self.author)
        attachment = self._attach("clip.mp4", "video/mp4", b"0123456789", note.id)
        response = self._get(attachment, {"Range": "bytes=20-"})
        self.assertEqual(response.status_code, 416)
        self.assertEqual(response.headers["content-range"], "bytes */10")


if __name__ == "__main__":
    unittest.main()
