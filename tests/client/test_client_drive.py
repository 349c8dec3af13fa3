import json
import os
import tempfile
import unittest
from unittest.mock import Mock
from urllib.parse import parse_qs, urlsplit

import requests

from gsheetsclient.client import URI_DRIVE_FILES, URI_DRIVE_UPLOAD, GoogleSheetsClient
from gsheetsclient.errors import NotFoundError, PermissionError, UploadInitError
from gsheetsclient.models import ClientConfig

DEFAULT = "fields=kind,id,name,mimeType,parents"


def _response(status=200, payload=None, headers=None):
    resp = requests.Response()
    resp.status_code = status
    resp._content = json.dumps(payload).encode("utf-8") if payload is not None else b""
    resp.headers.update(headers or {})
    return resp


class _ClientTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.transport = Mock()
        self.transport.request.return_value = _response(200, {"id": "F1"})
        self.client = GoogleSheetsClient.from_transport(self.transport)

    def uris(self) -> list[str]:
        return [c.args[0] for c in self.transport.request.call_args_list]

    def last_call(self):
        uri, method, headers, options = self.transport.request.call_args.args
        return uri, method, headers, options


class TestFieldProjection(_ClientTestCase):
    def test_get_file_uses_default_fields(self) -> None:
        data = self.client.get_file("F1")

        self.assertEqual(data, {"id": "F1"})
        self.assertEqual(self.uris(), [f"{URI_DRIVE_FILES}/F1?{DEFAULT}"])
        self.assertEqual(self.last_call()[1], "GET")

    def test_explicit_fields_replace_default(self) -> None:
        self.client.get_file("F1", ["id", "size"])
        self.assertEqual(self.uris(), [f"{URI_DRIVE_FILES}/F1?fields=id,size"])

    def test_set_default_fields_applies_to_later_calls(self) -> None:
        self.client.set_default_fields(["id", "trashed"])
        self.client.get_file("F1")
        self.client.create_file_metadata("doc")

        self.assertEqual(
            self.uris(),
            [f"{URI_DRIVE_FILES}/F1?fields=id,trashed", f"{URI_DRIVE_FILES}?fields=id,trashed"],
        )

    def test_fields_appended_with_ampersand_after_existing_query(self) -> None:
        self.client.update_file_metadata("F1", {"name": "x"}, {"addParents": "P2"})
        self.assertEqual(self.uris(), [f"{URI_DRIVE_FILES}/F1?{DEFAULT}&addParents=P2"])

    def test_fields_in_query_params_replace_default(self) -> None:
        self.client.update_file_metadata("F1", {"name": "x"}, {"fields": "id"})
        self.assertEqual(self.uris(), [f"{URI_DRIVE_FILES}/F1?fields=id"])

    def test_config_is_per_instance(self) -> None:
        other = GoogleSheetsClient.from_transport(
            self.transport, config=ClientConfig(default_fields=("id",))
        )
        other.set_all_drives_support(True)

        self.client.get_file("F1")
        self.assertEqual(self.uris(), [f"{URI_DRIVE_FILES}/F1?{DEFAULT}"])
        self.assertFalse(self.client.config.supports_all_drives)


class TestAllDrivesFlag(_ClientTestCase):
    def _exercise(self) -> None:
        self.client.get_file("F1")
        self.client.create_file_metadata("doc")
        self.client.update_file_metadata("F1", {"name": "y"})
        self.client.delete_file("F1")
        self.transport.request.return_value = _response(200, {"files": []})
        self.client.list_files()

    def test_enabled_flag_reaches_every_file_call(self) -> None:
        self.client.set_all_drives_support(True)
        self._exercise()

        uris = self.uris()
        self.assertEqual(len(uris), 5)
        for uri in uris:
            self.assertIn("supportsAllDrives=true", uri)
        self.assertIn("includeItemsFromAllDrives=true", uris[-1])
        self.assertEqual(uris[3], f"{URI_DRIVE_FILES}/F1?supportsAllDrives=true")

    def test_disabling_flag_removes_it(self) -> None:
        self.client.set_all_drives_support(True)
        self.client.set_all_drives_support(False)
        self._exercise()

        for uri in self.uris():
            self.assertNotIn("supportsAllDrives", uri)
            self.assertNotIn("includeItemsFromAllDrives", uri)

    def test_export_and_generate_ids_never_carry_flag(self) -> None:
        self.client.set_all_drives_support(True)
        self.transport.request.return_value = _response(200, {"ids": ["a", "b"]})

        self.client.export_file("F1")
        ids = self.client.generate_ids(2)

        self.assertEqual(ids, ["a", "b"])
        self.assertEqual(
            self.uris(),
            [
                f"{URI_DRIVE_FILES}/F1/export?mimeType=text/csv",
                f"{URI_DRIVE_FILES}/generateIds?count=2",
            ],
        )


class TestListFiles(_ClientTestCase):
    def test_follows_pages_and_keeps_query_verbatim(self) -> None:
        self.transport.request.side_effect = [
            _response(200, {"files": [{"id": "A"}], "nextPageToken": "T2"}),
            _response(200, {"files": [{"id": "B"}]}),
        ]

        files = self.client.list_files("name = 'report'")

        self.assertEqual([f["id"] for f in files], ["A", "B"])
        base = (
            f"{URI_DRIVE_FILES}?q=name = 'report'"
            "&fields=nextPageToken,files(kind,id,name,mimeType,parents)"
        )
        self.assertEqual(self.uris(), [base, f"{base}&pageToken=T2"])

    def test_page_token_is_encoded(self) -> None:
        self.transport.request.side_effect = [
            _response(200, {"files": [], "nextPageToken": "a+b/c="}),
            _response(200, {"files": []}),
        ]

        self.client.list_files()

        self.assertTrue(self.uris()[1].endswith("&pageToken=a%2Bb/c%3D"))
        self.assertEqual(parse_qs(urlsplit(self.uris()[1]).query)["pageToken"], ["a+b/c="])

    def test_without_query(self) -> None:
        self.transport.request.return_value = _response(200, {"files": []})
        self.assertEqual(self.client.list_files(), [])
        self.assertTrue(self.uris()[0].startswith(f"{URI_DRIVE_FILES}?fields="))


class TestFileExists(_ClientTestCase):
    def test_found(self) -> None:
        self.assertTrue(self.client.file_exists("F1"))
        lookup = self.client.lookup_file("F1")
        self.assertEqual(lookup.status, "found")
        self.assertEqual(lookup.file, {"id": "F1"})

    def test_404_is_false(self) -> None:
        self.transport.request.side_effect = NotFoundError(
            "File not found", details={"status_code": 404}
        )
        self.assertFalse(self.client.file_exists("F404"))
        lookup = self.client.lookup_file("F404")
        self.assertEqual(lookup.status, "not_found")
        self.assertIsNone(lookup.file)

    def test_other_errors_propagate(self) -> None:
        err = PermissionError("denied", details={"status_code": 403})
        self.transport.request.side_effect = err

        with self.assertRaises(PermissionError) as ctx:
            self.client.file_exists("F1")
        self.assertIs(ctx.exception, err)


class TestRawResponses(_ClientTestCase):
    def test_delete_returns_raw_response(self) -> None:
        raw = _response(204)
        self.transport.request.return_value = raw

        self.assertIs(self.client.delete_file("F1"), raw)
        self.assertEqual(self.last_call()[1], "DELETE")

    def test_export_custom_mime(self) -> None:
        raw = _response(200)
        raw._content = b"a,b\n"
        self.transport.request.return_value = raw

        resp = self.client.export_file("F1", "application/pdf")
        self.assertEqual(resp.content, b"a,b\n")
        self.assertEqual(self.uris(), [f"{URI_DRIVE_FILES}/F1/export?mimeType=application/pdf"])

    def test_export_mime_type_with_plus_is_encoded(self) -> None:
        self.transport.request.return_value = _response(200)

        self.client.export_file("F1", "application/epub+zip")

        uri = self.uris()[0]
        self.assertEqual(uri, f"{URI_DRIVE_FILES}/F1/export?mimeType=application/epub%2Bzip")
        self.assertEqual(parse_qs(urlsplit(uri).query)["mimeType"], ["application/epub+zip"])


class TestUpload(_ClientTestCase):
    SESSION = f"{URI_DRIVE_UPLOAD}?uploadType=resumable&upload_id=XYZ"

    def setUp(self) -> None:
        super().setUp()
        fd, self.path = tempfile.mkstemp(suffix=".csv")
        with os.fdopen(fd, "wb") as f:
            f.write(b"name,age\nJack,20\n")

    def tearDown(self) -> None:
        os.remove(self.path)

    def test_create_file_initiates_then_streams(self) -> None:
        self.transport.request.side_effect = [
            _response(200, {}, headers={"Location": self.SESSION}),
            _response(200, {"id": "F9", "name": "titanic", "mimeType": "text/csv"}),
        ]

        data = self.client.create_file(self.path, "titanic", {"parents": ["P1"]})

        self.assertEqual(data["id"], "F9")
        init, upload = self.transport.request.call_args_list

        uri, method, headers, options = init.args
        self.assertEqual(uri, f"{URI_DRIVE_UPLOAD}?uploadType=resumable&{DEFAULT}")
        self.assertEqual(method, "POST")
        self.assertEqual(headers["X-Upload-Content-Type"], "text/csv")
        self.assertEqual(options["json"], {"name": "titanic", "parents": ["P1"]})

        uri, method, headers, options = upload.args
        self.assertEqual(uri, f"{self.SESSION}&{DEFAULT}")
        self.assertEqual(method, "PUT")
        self.assertEqual(headers["Content-Type"], "text/csv")
        self.assertEqual(headers["Content-Length"], str(len(b"name,age\nJack,20\n")))
        self.assertIn("body", options)

    def test_update_file_patches_existing_id(self) -> None:
        self.transport.request.side_effect = [
            _response(200, {}, headers={"Location": self.SESSION}),
            _response(200, {"id": "F1", "name": "renamed"}),
        ]

        self.client.update_file("F1", self.path, {"name": "renamed"})

        uri, method, _, options = self.transport.request.call_args_list[0].args
        self.assertEqual(uri, f"{URI_DRIVE_UPLOAD}/F1?uploadType=resumable&{DEFAULT}")
        self.assertEqual(method, "PATCH")
        self.assertEqual(options["json"], {"name": "renamed"})

    def test_all_drives_flag_on_both_upload_steps(self) -> None:
        self.client.set_all_drives_support(True)
        self.transport.request.side_effect = [
            _response(200, {}, headers={"Location": self.SESSION}),
            _response(200, {"id": "F9"}),
        ]

        self.client.create_file(self.path, "titanic")

        for uri in self.uris():
            self.assertIn("supportsAllDrives=true", uri)

    def test_missing_location_stops_before_upload(self) -> None:
        self.transport.request.return_value = _response(200, {})

        with self.assertRaises(UploadInitError):
            self.client.create_file(self.path, "titanic")
        self.assertEqual(self.transport.request.call_count, 1)

    def test_non_200_initiation_fails_with_body(self) -> None:
        self.transport.request.return_value = _response(
            201, {"note": "odd"}, headers={"Location": self.SESSION}
        )

        with self.assertRaises(UploadInitError) as ctx:
            self.client.create_file(self.path, "titanic")
        self.assertEqual(ctx.exception.details["status_code"], 201)
        self.assertIn("odd", ctx.exception.details["body"])
        self.assertEqual(self.transport.request.call_count, 1)

    def test_init_upload_returns_session(self) -> None:
        self.transport.request.return_value = _response(
            200, {}, headers={"location": self.SESSION}
        )

        session = self.client.init_upload({"name": "x"}, "text/plain", file_id="F1")

        self.assertEqual(session.url, self.SESSION)
        self.assertEqual(session.content_type, "text/plain")
        self.assertEqual(session.file_id, "F1")


class TestRevisions(_ClientTestCase):
    def test_list_revisions_projection_and_no_all_drives(self) -> None:
        self.client.set_all_drives_support(True)
        self.transport.request.return_value = _response(200, {"revisions": [{"id": "1"}]})

        revisions = self.client.list_revisions("F1")

        self.assertEqual(revisions, [{"id": "1"}])
        self.assertEqual(
            self.uris(),
            [
                f"{URI_DRIVE_FILES}/F1/revisions"
                "?fields=nextPageToken,revisions(kind,id,mimeType,modifiedTime)"
            ],
        )

    def test_get_update_delete_revision(self) -> None:
        self.client.get_revision("F1", "7", ["id", "keepForever"])
        self.client.update_revision("F1", "7", {"keepForever": True})
        self.client.delete_revision("F1", "7")

        base = f"{URI_DRIVE_FILES}/F1/revisions/7"
        self.assertEqual(
            self.uris(),
            [
                f"{base}?fields=id,keepForever",
                f"{base}?fields=kind,id,mimeType,modifiedTime",
                base,
            ],
        )
        methods = [c.args[1] for c in self.transport.request.call_args_list]
        self.assertEqual(methods, ["GET", "PATCH", "DELETE"])


if __name__ == "__main__":
    unittest.main()
