"""Tests for style parsing and basedOn resolution."""

import pytest
from lxml import etree

from docxhtml.docx_parser.styles import StyleDefinition, StyleResolver, parse_styles
from docxhtml.docx_parser.tree import get_attr
from docxhtml.ir import PropertySet

from builders import W, styles_xml


STYLES = styles_xml(
    '<w:style w:type="paragraph" w:styleId="Base"><w:name w:val="Base"/>'
    '<w:pPr><w:jc w:val="center"/><w:spacing w:after="120"/></w:pPr>'
    '<w:rPr><w:b/><w:color w:val="FF0000"/></w:rPr></w:style>'
    '<w:style w:type="paragraph" w:styleId="Derived"><w:name w:val="Derived"/><w:basedOn w:val="Base"/>'
    '<w:pPr><w:jc w:val="right"/></w:pPr><w:rPr><w:color w:val="00FF00"/></w:rPr></w:style>'
    '<w:style w:type="paragraph" w:styleId="Leaf"><w:basedOn w:val="Derived"/>'
    '<w:rPr><w:i/></w:rPr></w:style>'
    '<w:style w:type="character" w:styleId="LeafChar"><w:link w:val="Leaf"/></w:style>',
    defaults='<w:rPrDefault><w:rPr><w:sz w:val="22"/></w:rPr></w:rPrDefault>'
    '<w:pPrDefault><w:pPr><w:spacing w:after="160"/></w:pPr></w:pPrDefault>',
).encode("utf-8")


def _val(props: PropertySet, tag: str):
    return get_attr(props.get(tag), "w:val")


def _props(inner: str) -> PropertySet:
    return PropertySet.from_element(etree.fromstring(f'<w:rPr xmlns:w="{W}">{inner}</w:rPr>'))


class TestParseStyles:
    """Tests for parse_styles."""

    def test_derived_overrides_base(self):
        styles = parse_styles(STYLES)
        derived = styles.get("Derived")
        assert _val(derived.paragraph, "w:jc") == "right"
        assert _val(derived.run, "w:color") == "00FF00"

    def test_inherits_missing_properties(self):
        styles = parse_styles(STYLES)
        derived = styles.get("Derived")
        assert get_attr(derived.paragraph.get("w:spacing"), "w:after") == "120"
        assert "w:b" in derived.run

    def test_multi_level_chain(self):
        leaf = parse_styles(STYLES).get("Leaf")
        assert "w:i" in leaf.run
        assert "w:b" in leaf.run
        assert _val(leaf.run, "w:color") == "00FF00"
        assert _val(leaf.paragraph, "w:jc") == "right"

    def test_metadata(self):
        styles = parse_styles(STYLES)
        assert styles.get("Derived").name == "Derived"
        assert styles.get("Derived").based_on == "Base"
        assert styles.get("LeafChar").linked_style == "Leaf"
        assert styles.get("LeafChar").style_type == "character"

    def test_doc_defaults(self):
        styles = parse_styles(STYLES)
        assert _val(styles.defaults.run, "w:sz") == "22"
        assert get_attr(styles.defaults.paragraph.get("w:spacing"), "w:after") == "160"

    def test_unknown_style(self):
        styles = parse_styles(STYLES)
        assert styles.get("Missing") is None
        assert styles.get(None) is None
        assert "Missing" not in styles
        assert len(styles) == 4


class TestStyleResolver:
    """Tests for memoized resolution."""

    def _definitions(self):
        return {
            "A": StyleDefinition(style_id="A", based_on="B"),
            "B": StyleDefinition(style_id="B", based_on="A"),
            "Self": StyleDefinition(style_id="Self", based_on="Self"),
        }

    def test_idempotent(self):
        resolver = StyleResolver({"X": StyleDefinition(style_id="X")})
        assert resolver.resolve("X") is resolver.resolve("X")

    def test_order_independent(self):
        def chain():
            return {
                "Base": StyleDefinition(style_id="Base", run=_props("<w:b/><w:sz w:val='20'/>")),
                "Mid": StyleDefinition(style_id="Mid", based_on="Base", run=_props("<w:sz w:val='24'/>")),
                "Leaf": StyleDefinition(style_id="Leaf", based_on="Mid", run=_props("<w:i/>")),
            }

        leaf_first = StyleResolver(chain())
        leaf_first.resolve("Leaf")
        base_first = StyleResolver(chain())
        for style_id in ("Base", "Mid", "Leaf"):
            base_first.resolve(style_id)

        a = leaf_first.resolve("Leaf").run
        b = base_first.resolve("Leaf").run
        assert sorted(a.tags()) == sorted(b.tags())
        assert _val(a, "w:sz") == _val(b, "w:sz") == "24"

    def test_cycle_does_not_recurse_forever(self):
        resolver = StyleResolver(self._definitions())
        resolved = resolver.resolve_all()
        assert set(resolved) == {"A", "B", "Self"}

    def test_self_cycle(self):
        resolver = StyleResolver(self._definitions())
        assert resolver.resolve("Self").style_id == "Self"

    def test_undefined_style_is_empty(self):
        resolved = StyleResolver({}).resolve("Ghost")
        assert len(resolved.paragraph) == 0
        assert len(resolved.run) == 0


class TestPropertySet:
    """Tests for PropertySet merging."""

    def test_merge_last_wins(self):
        first = etree.fromstring(f'<w:rPr xmlns:w="{W}"><w:b/><w:sz w:val="20"/></w:rPr>')
        second = etree.fromstring(f'<w:rPr xmlns:w="{W}"><w:sz w:val="28"/></w:rPr>')
        merged = PropertySet.merge(PropertySet.from_element(first), PropertySet.from_element(second))
        assert _val(merged, "w:sz") == "28"
        assert "w:b" in merged
        assert len(merged) == 2

    def test_from_none(self):
        assert len(PropertySet.from_element(None)) == 0

    def test_rejects_foreign_prefix(self):
        with pytest.raises(ValueError):
            PropertySet().get("a:blip")
