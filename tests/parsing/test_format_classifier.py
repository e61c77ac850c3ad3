import unittest

from gaeb_toolkit.parsing.format_classifier import (
    ParsingPath,
    classify_content,
    detect_text_format,
    detect_xml_format,
)


class TestClassifyContent(unittest.TestCase):
    def test_xml_declaration_selects_structured_path(self):
        self.assertIs(classify_content('   <?xml version="1.0"?><root/>'), ParsingPath.STRUCTURED)

    def test_gaeb_root_anywhere_selects_structured_path(self):
        self.assertIs(classify_content("garbage before <GAEB>"), ParsingPath.STRUCTURED)

    def test_everything_else_is_heuristic(self):
        self.assertIs(classify_content("1.1 Beton 12 m³"), ParsingPath.HEURISTIC)
        self.assertIs(classify_content(""), ParsingPath.HEURISTIC)


class TestDetectFormats(unittest.TestCase):
    def test_xml_markers_in_priority_order(self):
        self.assertEqual(detect_xml_format('<GAEB xmlns="http://www.gaeb.de/GAEB_DA_XML/DA83/3.3">'), "X83")
        self.assertEqual(detect_xml_format("<GAEB><DP>DA84</DP></GAEB>"), "X84")
        self.assertEqual(detect_xml_format("<GAEB><DP>DA81</DP></GAEB>"), "X81")
        self.assertEqual(detect_xml_format("<GAEB></GAEB>"), "XML GAEB")
        self.assertEqual(detect_xml_format("<root/>"), "XML")

    def test_text_codes_case_insensitive_first_in_list(self):
        self.assertEqual(detect_text_format("GAEB d83 Export"), "D83")
        self.assertEqual(detect_text_format("P83 und X83"), "P83")
        self.assertEqual(detect_text_format("no marker"), "Unknown")


if __name__ == "__main__":
    unittest.main()
