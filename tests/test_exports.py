import re
import unittest
from datetime import datetime, timezone
from io import BytesIO

from openpyxl import load_workbook

from gaeb_toolkit.exports import (
    ExportOptions,
    build_production_csv,
    build_production_workbook,
    generate_production_csv,
    safe_sheet_name,
)
from gaeb_toolkit.exports.export_common import build_export_filename, sanitize_excel_value
from gaeb_toolkit.exports.production_excel import build_position_rows, build_summary_rows
from gaeb_toolkit.metadata.models import DocumentHeader, ParsedDocument, PositionNode, PositionType
from gaeb_toolkit.parsing import parse_text_document
from gaeb_toolkit.system.error_handling import ExportError


PROCESSED_AT = "2024-03-01T10:15:30.000+00:00"


def _document(file_name="halle.x83", project="Neubau Halle", detected_format="X83"):
    positions = [
        PositionNode(id="C1", title="Rohbau", type=PositionType.TITLE, position_number="1"),
        PositionNode(
            id="I1",
            title="Fundamentbeton",
            type=PositionType.POSITION,
            position_number="1.1",
            description="Beton C25/30 fuer Fundamente",
            quantity=12.5,
            unit="m3",
            level=1,
            parent="C1",
        ),
        PositionNode(id="I2", title="=Zulage", type=PositionType.POSITION, position_number="1.2", quantity=0.0, level=1),
        PositionNode(id="pos_4", title="Summe Rohbau", type=PositionType.CALCULATION, quantity=3.0),
    ]
    return ParsedDocument.build(
        header=DocumentHeader(project_name=project, detected_format=detected_format),
        positions=positions,
        raw_content="raw",
        file_name=file_name,
        processed_at=PROCESSED_AT,
    )


def _load(payload: bytes):
    return load_workbook(BytesIO(payload))


class TestExportCommon(unittest.TestCase):
    def test_safe_sheet_name(self):
        self.assertEqual(safe_sheet_name("halle.x83"), "halle.x83")
        self.assertEqual(safe_sheet_name("a/b:c?.d83"), "a_b_c_.d83")
        self.assertEqual(safe_sheet_name("x" * 40), "x" * 31)
        self.assertEqual(safe_sheet_name("x" * 40, ordinal=2), "File_2_" + "x" * 24)

    def test_export_filename(self):
        moment = datetime(2024, 3, 1, 12, 30, 45, tzinfo=timezone.utc)
        self.assertEqual(build_export_filename("GAEB_Export", "xlsx", moment), "GAEB_Export_20240301T123045.xlsx")
        self.assertEqual(build_export_filename("Bau Liste/1", "csv", moment), "Bau_Liste1_20240301T123045.csv")

    def test_formula_like_text_is_escaped(self):
        self.assertEqual(sanitize_excel_value("=SUM(A1)"), "'=SUM(A1)")
        self.assertEqual(sanitize_excel_value("Beton"), "Beton")
        self.assertEqual(sanitize_excel_value(12.5), 12.5)

    def test_control_characters_are_removed(self):
        self.assertEqual(sanitize_excel_value("Beton\x1a"), "Beton")
        self.assertEqual(sanitize_excel_value("Estrich\x0cZulage"), "EstrichZulage")
        self.assertEqual(sanitize_excel_value("\x1a=SUM(A1)"), "'=SUM(A1)")


class TestRowBuilders(unittest.TestCase):
    def test_summary_rows_single_document_has_no_total(self):
        rows = build_summary_rows([_document()])
        self.assertEqual(rows[0], ["GAEB Produktionsliste - Übersicht"])
        self.assertEqual(rows[2][0], "Datei")
        self.assertEqual(rows[3][:5], ["halle.x83", "X83", 1, 2, 4])
        self.assertEqual(len(rows), 4)

    def test_summary_total_row_sums_documents(self):
        docs = [_document("a.x83"), _document("b.d83", detected_format=None)]
        rows = build_summary_rows(docs)
        self.assertEqual(rows[4][1], "X83")
        total = rows[-1]
        self.assertEqual(total[0], "GESAMT")
        self.assertEqual(total[2], sum(d.counts()[0] for d in docs))
        self.assertEqual(total[3], sum(d.counts()[1] for d in docs))
        self.assertEqual(total[4], 8)

    def test_position_rows_layout(self):
        rows = build_position_rows(_document())
        self.assertEqual(rows[0], ["Projekt: Neubau Halle"])
        self.assertEqual(rows[2][0], "Werkstatt")
        self.assertEqual(rows[2][5], "Zukauf")
        self.assertEqual(rows[4][1], "Produkt")
        self.assertEqual(rows[5][:3], ["1", "Rohbau", None])
        self.assertEqual(rows[6][:3], ["1.1", "Fundamentbeton", 12.5])
        # Zero quantities and non-item nodes leave the count empty
        self.assertEqual(rows[7][:3], ["1.2", "'=Zulage", None])
        self.assertEqual(rows[8][:3], [None, "Summe Rohbau", None])
        self.assertTrue(all(len(row) == 11 for row in rows[5:]))

    def test_project_falls_back_to_file_name(self):
        rows = build_position_rows(_document(project=None))
        self.assertEqual(rows[0], ["Projekt: halle.x83"])


class TestProductionWorkbook(unittest.TestCase):
    def test_single_document_workbook(self):
        filename, payload = build_production_workbook([_document()])
        self.assertRegex(filename, r"^GAEB_Export_\d{8}T\d{6}\.xlsx$")

        wb = _load(payload)
        self.assertEqual(wb.sheetnames, ["Summary", "halle.x83"])

        summary = wb["Summary"]
        self.assertEqual(summary["A1"].value, "GAEB Produktionsliste - Übersicht")
        self.assertTrue(summary["A1"].font.bold)
        self.assertEqual(summary["E3"].value, "Gesamt Positionen")
        self.assertEqual(summary["A4"].value, "halle.x83")
        self.assertEqual(summary["E4"].value, 4)

        ws = wb["halle.x83"]
        self.assertEqual(ws["A1"].value, "Projekt: Neubau Halle")
        self.assertEqual(ws["A3"].value, "Werkstatt")
        self.assertEqual(ws["F3"].value, "Zukauf")
        self.assertEqual(ws["I5"].value, "bestellt am")
        self.assertTrue(ws["A5"].font.bold)
        self.assertEqual(ws["B6"].value, "Rohbau")
        self.assertTrue(ws["K6"].fill.fgColor.rgb.endswith("DBEAFE"))
        self.assertTrue(ws["B6"].font.bold)
        self.assertEqual(ws["C7"].value, 12.5)
        self.assertFalse(ws["B7"].fill.fgColor.rgb.endswith("DBEAFE"))
        self.assertEqual(ws.column_dimensions["B"].width, 50)
        self.assertEqual(ws.column_dimensions["F"].width, 3)
        self.assertEqual(ws.freeze_panes, "A6")

    def test_descriptions_become_comments(self):
        _, payload = build_production_workbook([_document()], ExportOptions(include_description=True))
        ws = _load(payload)["halle.x83"]
        self.assertIsNotNone(ws["B7"].comment)
        self.assertIn("Beton C25/30", ws["B7"].comment.text)
        self.assertIsNone(ws["B6"].comment)

        _, payload = build_production_workbook([_document()], ExportOptions(include_description=False))
        self.assertIsNone(_load(payload)["halle.x83"]["B7"].comment)

    def test_multiple_documents_get_prefixed_sheets_and_total(self):
        docs = [_document("a.x83"), _document("b.d83")]
        _, payload = build_production_workbook(docs, ExportOptions(file_stem="Baustelle"))
        wb = _load(payload)
        self.assertEqual(wb.sheetnames, ["Summary", "File_1_a.x83", "File_2_b.d83"])
        summary = wb["Summary"]
        self.assertEqual(summary["A7"].value, "GESAMT")
        self.assertEqual(summary["C7"].value, 2)
        self.assertEqual(summary["D7"].value, 4)

    def test_same_file_name_twice_stays_unique(self):
        docs = [_document("same.x83"), _document("same.x83")]
        wb = _load(build_production_workbook(docs)[1])
        self.assertEqual(len(set(wb.sheetnames)), 3)

    def test_control_characters_do_not_break_the_workbook(self):
        doc = ParsedDocument.build(
            DocumentHeader(project_name="Halle\x0c"),
            [
                PositionNode(
                    id="1.1",
                    title="Beton\x1a",
                    type=PositionType.POSITION,
                    position_number="1.1",
                    description="Fundament\x1a",
                    quantity=12.0,
                    unit="m³",
                ),
            ],
            "1.1 Beton 12 m³ 95,00 €\x1a\n",
            "alt.d83",
        )
        _, payload = build_production_workbook([doc, _document()], ExportOptions(include_description=True))
        ws = _load(payload)["File_1_alt.d83"]
        self.assertEqual(ws["A1"].value, "Projekt: Halle")
        self.assertEqual(ws["B6"].value, "Beton")
        self.assertEqual(ws["B6"].comment.text.strip(), "Fundament")

    def test_parsed_legacy_line_with_eof_marker_exports(self):
        doc = parse_text_document("1.1 Beton 12 m³ 95,00 €\x1a\n", "alt.d83")
        _, payload = build_production_workbook([doc])
        ws = _load(payload)["alt.d83"]
        self.assertNotIn("\x1a", ws["B6"].value)

    def test_failures_are_export_errors(self):
        with self.assertRaises(ExportError) as ctx:
            build_production_workbook([object()])
        self.assertEqual(ctx.exception.export_type, "xlsx")


class TestProductionCsv(unittest.TestCase):
    def test_single_document_block(self):
        filename, content = build_production_csv([_document()])
        self.assertTrue(re.match(r"^GAEB_Export_\d{8}T\d{6}\.csv$", filename))
        lines = content.split("\n")
        self.assertEqual(lines[:5], [
            "File: halle.x83",
            "Format: X83",
            "Project: Neubau Halle",
            "",
            "Position,Type,Title,Description,Quantity,Unit",
        ])
        self.assertEqual(lines[5], '"1","Category","Rohbau","","",""')
        self.assertEqual(lines[6], '"1.1","Position","Fundamentbeton","Beton C25/30 fuer Fundamente",12.5,"m3"')
        self.assertEqual(lines[7], '"1.2","Position","=Zulage","","",""')
        self.assertEqual(lines[8], '"","Calculation","Summe Rohbau","",3,""')

    def test_quotes_are_doubled(self):
        doc = ParsedDocument.build(
            DocumentHeader(),
            [PositionNode(id="1", title='Tür "Typ A"', type=PositionType.POSITION)],
            "",
            "t.d83",
        )
        self.assertIn('"Tür ""Typ A"""', generate_production_csv([doc]))

    def test_documents_separated_by_blank_line(self):
        content = generate_production_csv([_document("a.x83"), _document("b.d83")])
        self.assertIn('"Summe Rohbau","",3,""\n\nFile: b.d83', content)

    def test_failures_are_export_errors(self):
        with self.assertRaises(ExportError):
            build_production_csv([None])


if __name__ == "__main__":
    unittest.main()
