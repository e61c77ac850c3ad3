import unittest

from gaeb_toolkit.parsing.encoding import decode_gaeb_bytes
from gaeb_toolkit.parsing.upload import is_supported_file, parse_upload, validate_file_name
from gaeb_toolkit.system.error_handling import (
    ErrorCategory,
    FileReadError,
    UnsupportedFileError,
)


class TestExtensionGate(unittest.TestCase):
    def test_accepted_extensions_case_insensitive(self):
        for name in ("a.gaeb", "b.d83", "c.P83", "d.X83"):
            self.assertTrue(is_supported_file(name), name)

    def test_other_extensions_rejected(self):
        for name in ("a.xml", "b.pdf", "noext", "c.x84"):
            self.assertFalse(is_supported_file(name), name)

    def test_rejection_carries_extension(self):
        with self.assertRaises(UnsupportedFileError) as ctx:
            validate_file_name("angebot.pdf")
        error = ctx.exception
        self.assertEqual(error.extension, ".pdf")
        self.assertEqual(error.category, ErrorCategory.UNSUPPORTED_INPUT)
        self.assertIn(".pdf", error.get_user_friendly_message())

    def test_parse_upload_rejects_before_decoding(self):
        with self.assertRaises(UnsupportedFileError):
            parse_upload(None, "angebot.docx")


class TestDecoding(unittest.TestCase):
    def test_declared_encoding_is_used(self):
        raw = '<?xml version="1.0" encoding="ISO-8859-1"?><GAEB>Stück</GAEB>'.encode("latin-1")
        text, encoding = decode_gaeb_bytes(raw)
        self.assertIn("Stück", text)
        self.assertEqual(encoding, "ISO-8859-1")

    def test_utf8_bom_is_dropped(self):
        text, encoding = decode_gaeb_bytes("\ufeff1.1 Beton 12 m³".encode("utf-8"))
        self.assertEqual(text, "1.1 Beton 12 m³")
        self.assertEqual(encoding, "utf-8-sig")

    def test_missing_bytes_raise_file_read_error(self):
        with self.assertRaises(FileReadError):
            decode_gaeb_bytes(None, source_name="leer.d83")


class TestParseUpload(unittest.TestCase):
    def test_text_upload(self):
        doc = parse_upload("1 ROHBAU\n1.1 Beton 12 m³ 95,00 €\n".encode("utf-8"), "rohbau.d83")
        self.assertEqual(doc.file_name, "rohbau.d83")
        self.assertEqual(doc.total_positions, 2)
        self.assertEqual(doc.positions[1].total_price, 1140.0)

    def test_missing_content_is_a_read_error(self):
        with self.assertRaises(FileReadError):
            parse_upload(None, "rohbau.d83")


if __name__ == "__main__":
    unittest.main()
