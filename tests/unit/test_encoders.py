"""Unit tests for the local document encoders."""

import io
import re
import struct
import zipfile
import zlib

import docx
import pytest

from docstudio.strategies.encoders import (
    DocxEncoder,
    HtmlEncoder,
    PageGeometry,
    PdfEncoder,
    ZipEntry,
    build_zip,
    crc32,
    render_html,
)
from docstudio.strategies.encoders.docx import document_xml, escape_xml, paragraph_xml
from docstudio.strategies.encoders.html import markdown_to_html_body
from docstudio.strategies.encoders.markdown import BULLET, DIVIDER, to_plain_text, wrap_line
from docstudio.strategies.encoders.pdf import EMPTY_DOCUMENT_LINE, escape_pdf_string


_LOCAL_HEADER = struct.Struct("<IHHHHHIIIHH")


def _walk_local_entries(data: bytes) -> list[dict]:
    """Read local file headers front to back until the central directory."""
    entries = []
    offset = 0
    while data[offset:offset + 4] == b"PK\x03\x04":
        fields = _LOCAL_HEADER.unpack_from(data, offset)
        crc, compressed, uncompressed, name_len, extra_len = fields[6:]
        name_start = offset + _LOCAL_HEADER.size
        content_start = name_start + name_len + extra_len
        entries.append(
            {
                "offset": offset,
                "name": data[name_start:name_start + name_len].decode("utf-8"),
                "method": fields[3],
                "crc": crc,
                "compressed": compressed,
                "uncompressed": uncompressed,
                "content": data[content_start:content_start + compressed],
            }
        )
        offset = content_start + compressed
    return entries


# =============================================================================
# CRC-32 and ZIP Tests
# =============================================================================


class TestCrc32:
    """Test suite for the CRC-32 implementation."""

    @pytest.mark.parametrize(
        "data",
        [b"", b"a", b"123456789", b"The quick brown fox jumps over the lazy dog", bytes(range(256)) * 3],
    )
    def test_matches_zlib(self, data):
        """Test that the checksum agrees with zlib."""
        assert crc32(data) == zlib.crc32(data)

    def test_check_value(self):
        """Test the standard CRC-32 check value."""
        assert crc32(b"123456789") == 0xCBF43926


class TestBuildZip:
    """Test suite for the stored ZIP writer."""

    @pytest.fixture
    def entries(self):
        """A few entries with text and binary content."""
        return [
            ZipEntry("first.txt", b"hello"),
            ZipEntry("dir/second.bin", bytes(range(50))),
            ZipEntry("empty", b""),
        ]

    def test_archive_is_readable(self, entries):
        """Test that zipfile opens the archive and CRCs check out."""
        with zipfile.ZipFile(io.BytesIO(build_zip(entries))) as archive:
            assert archive.testzip() is None
            assert archive.namelist() == ["first.txt", "dir/second.bin", "empty"]
            assert archive.read("dir/second.bin") == bytes(range(50))
            for info in archive.infolist():
                assert info.compress_type == zipfile.ZIP_STORED
                assert info.date_time == (1980, 1, 1, 0, 0, 0)

    def test_central_directory_offsets(self, entries):
        """Test that each central record points at its local header."""
        data = build_zip(entries)
        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            for info in archive.infolist():
                assert data[info.header_offset:info.header_offset + 4] == b"PK\x03\x04"

    def test_local_headers_describe_content(self, entries):
        """Test CRC and sizes in each local header against the stored bytes."""
        local = _walk_local_entries(build_zip(entries))
        assert [e["name"] for e in local] == [e.name for e in entries]
        for record, entry in zip(local, entries):
            assert record["method"] == 0
            assert record["content"] == entry.content
            assert record["crc"] == zlib.crc32(entry.content)
            assert record["compressed"] == record["uncompressed"] == len(entry.content)

    def test_central_offsets_are_cumulative(self, entries):
        """Test central offsets equal the running length of preceding entries."""
        data = build_zip(entries)
        expected = []
        position = 0
        for entry in entries:
            expected.append(position)
            position += 30 + len(entry.name.encode("utf-8")) + len(entry.content)

        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            assert [info.header_offset for info in archive.infolist()] == expected
            assert [info.CRC for info in archive.infolist()] == [zlib.crc32(e.content) for e in entries]
        assert [e["offset"] for e in _walk_local_entries(data)] == expected
        assert data[position:position + 4] == b"PK\x01\x02"

    def test_end_of_central_directory(self, entries):
        """Test entry counts and sizes in the final record."""
        data = build_zip(entries)
        eocd = data[-22:]
        signature, _, _, on_disk, total, cd_size, cd_offset, comment = struct.unpack("<IHHHHIIH", eocd)
        assert signature == 0x06054B50
        assert on_disk == total == 3
        assert cd_offset + cd_size == len(data) - 22
        assert data[cd_offset:cd_offset + 4] == b"PK\x01\x02"
        assert comment == 0

    def test_empty_archive(self):
        """Test that no entries yields a bare end record."""
        data = build_zip([])
        assert len(data) == 22
        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            assert archive.namelist() == []


# =============================================================================
# Markdown Helper Tests
# =============================================================================


class TestMarkdownHelpers:
    """Test suite for plain text conversion and wrapping."""

    def test_to_plain_text(self):
        """Test that headings, emphasis, lists and rules are converted."""
        text = to_plain_text("# Title\n\n**Bold** and *it*\n- item\n---\n")
        assert text == f"Title\n\nBold and it\n{BULLET} item\n{DIVIDER}"

    def test_wrap_short_line(self):
        """Test that lines within width are untouched."""
        assert wrap_line("short line", 80) == ["short line"]

    def test_wrap_long_line(self):
        """Test greedy wrapping on word boundaries."""
        assert wrap_line("aaa bbb ccc ddd", 7) == ["aaa bbb", "ccc ddd"]

    def test_wrap_long_word(self):
        """Test that an overlong word stays whole."""
        assert wrap_line("x " + "y" * 20 + " z", 10) == ["x", "y" * 20, "z"]


# =============================================================================
# PDF Encoder Tests
# =============================================================================


def _xref_offsets(pdf: bytes) -> list[int]:
    xref_start = pdf.index(b"\nxref\n") + 1
    lines = pdf[xref_start:].split(b"\n")
    count = int(lines[1].split()[1])
    return [int(line[:10]) for line in lines[3:3 + count - 1]]


class TestPdfEncoder:
    """Test suite for PdfEncoder."""

    @pytest.fixture
    def encoder(self):
        """Create an encoder with letter geometry."""
        return PdfEncoder()

    def test_header_and_trailer(self, encoder):
        """Test the file header, binary comment and EOF marker."""
        pdf = encoder.encode("Hello")
        assert pdf.startswith(b"%PDF-1.4\n%\xe2\xe3\xcf\xd3\n")
        assert pdf.endswith(b"%%EOF")
        assert b"/Root 1 0 R" in pdf

    def test_xref_offsets_point_at_objects(self, encoder):
        """Test that every xref entry locates its object header."""
        pdf = encoder.encode("\n".join(f"Line {i}" for i in range(120)))
        offsets = _xref_offsets(pdf)
        for number, offset in enumerate(offsets, start=1):
            assert pdf[offset:].startswith(f"{number} 0 obj\n".encode("ascii"))

    def test_startxref(self, encoder):
        """Test that startxref gives the byte offset of the xref table."""
        pdf = encoder.encode("Text")
        startxref = int(pdf.rsplit(b"startxref\n", 1)[1].split(b"\n")[0])
        assert pdf[startxref:].startswith(b"xref\n0 ")

    def test_stream_lengths(self, encoder):
        """Test that /Length matches the stream byte count."""
        pdf = encoder.encode("Café (draft)\n- item")
        for match in re.finditer(rb"<< /Length (\d+) >>\nstream\n", pdf):
            end = match.end() + int(match.group(1))
            assert pdf[end:end + 10] == b"\nendstream"

    def test_pagination(self, encoder):
        """Test that lines are split across pages."""
        assert PageGeometry().lines_per_page == 46
        pdf = encoder.encode("\n".join(f"Line {i}" for i in range(100)))
        assert b"/Count 3" in pdf
        assert pdf.count(b"/Type /Page ") == 3

    def test_empty_content_gets_placeholder_page(self, encoder):
        """Test that empty input still yields one page."""
        assert encoder.layout("") == [[EMPTY_DOCUMENT_LINE]]
        pdf = encoder.encode("   \n")
        assert b"/Count 1" in pdf
        assert EMPTY_DOCUMENT_LINE.encode("ascii") in pdf

    def test_winansi_text(self, encoder):
        """Test that bullets and accents use WinAnsi bytes."""
        pdf = encoder.encode("- café 中")
        assert b"(\x95 caf\xe9 ?) Tj" in pdf
        assert b"/Encoding /WinAnsiEncoding" in pdf

    def test_string_escaping(self):
        """Test escaping of parentheses and backslashes."""
        assert escape_pdf_string("a (b) \\c") == "a \\(b\\) \\\\c"
        pdf = PdfEncoder().encode("f(x)")
        assert b"(f\\(x\\)) Tj" in pdf

    def test_info_dictionary(self):
        """Test that title and author add an /Info entry."""
        pdf = PdfEncoder(title="My NDA", author="Acme").encode("Body")
        assert b"/Title (My NDA)" in pdf
        assert b"/Author (Acme)" in pdf
        assert b"/Info " in pdf
        assert b"/Info " not in PdfEncoder().encode("Body")

    def test_a4_geometry(self):
        """Test that A4 pages get the A4 media box."""
        geometry = PageGeometry.for_page_size("a4")
        pdf = PdfEncoder(geometry=geometry).encode("Body")
        assert b"/MediaBox [0 0 595 842]" in pdf

    def test_non_finite_margin_keeps_one_line_per_page(self):
        """Test that an unbounded margin does not break pagination."""
        geometry = PageGeometry.for_page_size("letter", top=float("inf"))
        assert geometry.lines_per_page == 1
        assert PdfEncoder(geometry=geometry).encode("a\nb").startswith(b"%PDF-1.4")


# =============================================================================
# DOCX Encoder Tests
# =============================================================================


class TestDocxEncoder:
    """Test suite for DocxEncoder."""

    @pytest.fixture
    def encoder(self):
        """Create a DOCX encoder."""
        return DocxEncoder()

    def test_parts_in_order(self, encoder):
        """Test the package part names and order."""
        data = encoder.encode("Hello")
        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            assert archive.namelist() == [
                "[Content_Types].xml",
                "_rels/.rels",
                "word/_rels/document.xml.rels",
                "word/document.xml",
            ]
            assert archive.testzip() is None

    def test_part_headers_match_content(self, encoder):
        """Test every part's local header CRC and sizes, and the central offsets."""
        data = encoder.encode("# Title\n\nBody text")
        local = _walk_local_entries(data)
        assert len(local) == 4
        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            infos = archive.infolist()
            for record, info in zip(local, infos):
                assert record["name"] == info.filename
                assert record["offset"] == info.header_offset
                assert record["crc"] == info.CRC == zlib.crc32(record["content"])
                assert record["compressed"] == record["uncompressed"] == len(record["content"]) == info.file_size

    def test_opens_in_python_docx(self, encoder):
        """Test that python-docx reads the paragraphs back."""
        data = encoder.encode("# Title\n\nFirst & <second>\n- item\n  indented")
        document = docx.Document(io.BytesIO(data))
        texts = [p.text for p in document.paragraphs]
        assert texts == ["Title", "", "First & <second>", f"{BULLET} item", "  indented"]

    def test_heading_styles(self):
        """Test heading lines get heading paragraph styles."""
        assert '<w:pStyle w:val="Heading1"/>' in paragraph_xml("# One")
        assert '<w:pStyle w:val="Heading2"/>' in paragraph_xml("## Two")
        assert '<w:pStyle w:val="Heading3"/>' in paragraph_xml("### Three")
        assert "pStyle" not in paragraph_xml("#### Four")

    def test_blank_line_paragraph(self):
        """Test that blank lines become empty paragraphs."""
        assert paragraph_xml("") == "<w:p><w:r><w:t></w:t></w:r></w:p>"
        assert document_xml("a\n\nb").count("<w:p>") == 3

    def test_escape_xml(self):
        """Test escaping and removal of characters XML forbids."""
        assert escape_xml("<a href=\"x\">'&'</a>") == "&lt;a href=&quot;x&quot;&gt;&apos;&amp;&apos;&lt;/a&gt;"
        assert escape_xml("bad\x00\x0bchars") == "badchars"
        assert escape_xml("tab\tnewline") == "tab\tnewline"

    def test_crlf_normalized(self, encoder):
        """Test that CRLF input gives the same document as LF input."""
        assert encoder.encode("a\r\nb") == encoder.encode("a\nb")


# =============================================================================
# HTML Encoder Tests
# =============================================================================


class TestHtmlEncoder:
    """Test suite for the HTML preview renderer."""

    def test_headings_and_emphasis(self):
        """Test heading and inline emphasis conversion."""
        body = markdown_to_html_body("# Title\n## Sub\n**bold** *it*")
        assert "<h1>Title</h1>" in body
        assert "<h2>Sub</h2>" in body
        assert "<strong>bold</strong> <em>it</em>" in body

    def test_list_runs(self):
        """Test that each run of list items gets its own list."""
        body = markdown_to_html_body("- a\n- b\n\ntext\n\n- c")
        assert body.count("<ul>") == 2
        assert "<ul><li>a</li><li>b</li></ul>" in body
        assert "<ul><li>c</li></ul>" in body

    def test_escapes_markup(self):
        """Test that HTML in the content is escaped."""
        body = markdown_to_html_body("**A & B** <script>alert(1)</script>")
        assert "<strong>A &amp; B</strong>" in body
        assert "<script>" not in body
        assert "&lt;script&gt;" in body

    def test_paragraphs_and_rules(self):
        """Test paragraph breaks, line breaks and horizontal rules."""
        body = markdown_to_html_body("one\ntwo\n\n---")
        assert body == "<p>one<br>two</p><p><hr></p>"

    def test_full_document(self):
        """Test the standalone document wrapper."""
        page = render_html("Body", title="A & B")
        assert page.startswith("<!DOCTYPE html>")
        assert '<meta charset="utf-8">' in page
        assert "<title>A &amp; B</title>" in page
        assert "Times New Roman" in page

    def test_encoder_output(self):
        """Test the encoder returns UTF-8 bytes."""
        encoder = HtmlEncoder()
        data = encoder.encode("Café")
        assert "Café".encode("utf-8") in data
        assert encoder.content_type.startswith("text/html")
        assert encoder.extension == "html"
