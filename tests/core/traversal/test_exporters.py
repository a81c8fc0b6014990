import pytest
from lxml import etree as ET

from doctree_toolkit.core.exceptions import UnsafeFragmentError
from doctree_toolkit.core.models import Directory, TextFile
from doctree_toolkit.core.traversal import ExportTemplate, MarkdownExporter, SafeFragment, XmlExporter
from doctree_toolkit.core.traversal.exporters import XML_ESCAPES


class TestXmlExporter:
    def test_document(self, tree):
        output = XmlExporter().walk(tree.root).result()
        assert output == (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            '<Directory Name="root">\n'
            '  <Directory Name="dirA">\n'
            '    <File Name="report.pdf" Size="500KB" pages="3" />\n'
            '    <File Name="photo.png" Size="2048KB" res="1920x1080" />\n'
            "  </Directory>\n"
            "</Directory>\n"
        )

    def test_is_well_formed(self, tree):
        element = XmlExporter().walk(tree.root).to_element()
        assert element.tag == "Directory"
        files = element.findall(".//File")
        assert [f.get("Name") for f in files] == ["report.pdf", "photo.png"]
        assert files[1].get("res") == "1920x1080"

    def test_names_are_escaped(self):
        root = Directory('a & <b> "c"')
        root.add(TextFile("it's.txt", 1, encoding="UTF-8"))
        exporter = XmlExporter().walk(root)
        assert 'Name="a &amp; &lt;b&gt; &quot;c&quot;"' in exporter.result()
        element = exporter.to_element()
        assert element.get("Name") == 'a & <b> "c"'
        assert element.find("File").get("Name") == "it's.txt"

    def test_indent_size(self, tree):
        lines = XmlExporter(indent_size=4).walk(tree.root).result().splitlines()
        assert lines[2] == '    <Directory Name="dirA">'

    def test_reusable(self, tree):
        exporter = XmlExporter()
        first = exporter.walk(tree.root).result()
        assert exporter.walk(tree.root).result() == first

    def test_progress(self, tree, recorder):
        exporter = XmlExporter()
        exporter.channel.subscribe(recorder)
        exporter.walk(tree.root)
        assert recorder.messages[0] == "Exporting directory: root"
        assert len(recorder.events) == 4


class TestMarkdownExporter:
    def test_document(self, tree):
        output = MarkdownExporter(indent_size=2).walk(tree.root).result()
        assert output == (
            "# File System Export\n\n"
            "## root/\n"
            "  ### dirA/\n"
            "    - report\\.pdf (500KB) \\[pages: 3\\]\n"
            "    - photo\\.png (2048KB) \\[res: 1920x1080\\]\n"
        )

    def test_markdown_characters_escaped(self):
        root = Directory("*draft*")
        output = MarkdownExporter().walk(root).result()
        assert "## \\*draft\\*/" in output


class TestExportTemplate:
    def test_raw_string_hook_is_rejected(self, tree):
        class Careless(ExportTemplate):
            def __init__(self):
                super().__init__(XML_ESCAPES)

            def render_directory_start(self, directory):
                return f"<d n='{directory.name}'>"

            def render_directory_end(self, directory):
                return self.raw("</d>")

            def render_file(self, file):
                return self.format("<f/>")

        with pytest.raises(UnsafeFragmentError):
            Careless().walk(tree.root)

    def test_format_escapes_values_but_not_fragments(self):
        class Plain(ExportTemplate):
            def render_directory_start(self, directory):
                return self.raw("")

            render_directory_end = render_directory_start

            def render_file(self, file):
                return self.raw("")

        template = Plain({"<": "&lt;"})
        fragment = template.format("{}{}{}", "<a>", SafeFragment("<b>"), None)
        assert fragment.content == "&lt;a><b>"
