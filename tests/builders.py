"""Build minimal .docx packages in memory for tests."""

import io
import zipfile
from typing import Dict, Optional

from docxhtml.docx_parser.tree import NAMESPACES

W = NAMESPACES["w"]
R = NAMESPACES["r"]
WP = NAMESPACES["wp"]
A = NAMESPACES["a"]
PIC = NAMESPACES["pic"]

NS_DECL = f'xmlns:w="{W}" xmlns:r="{R}" xmlns:wp="{WP}" xmlns:a="{A}" xmlns:pic="{PIC}"'

CONTENT_TYPES = """<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">
<Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>
<Default Extension="xml" ContentType="application/xml"/>
<Default Extension="png" ContentType="image/png"/>
<Override PartName="/word/document.xml" ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"/>
</Types>"""

ROOT_RELS = """<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">
<Relationship Id="rId1" Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument" Target="word/document.xml"/>
</Relationships>"""

HYPERLINK_TYPE = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/hyperlink"
IMAGE_TYPE = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/image"

# 1x1 transparent PNG
PNG_BYTES = bytes.fromhex(
    "89504e470d0a1a0a0000000d49484452000000010000000108060000001f15c489"
    "0000000d49444154789c63000100000500010d0a2db40000000049454e44ae426082"
)


def document_xml(body: str) -> str:
    return f'<?xml version="1.0" encoding="UTF-8" standalone="yes"?><w:document {NS_DECL}><w:body>{body}</w:body></w:document>'


def styles_xml(styles: str, defaults: str = "") -> str:
    doc_defaults = f"<w:docDefaults>{defaults}</w:docDefaults>" if defaults else ""
    return f'<?xml version="1.0" encoding="UTF-8"?><w:styles xmlns:w="{W}">{doc_defaults}{styles}</w:styles>'


def numbering_xml(content: str) -> str:
    return f'<?xml version="1.0" encoding="UTF-8"?><w:numbering xmlns:w="{W}">{content}</w:numbering>'


def rels_xml(relationships: Dict[str, tuple]) -> str:
    """``{rId: (type, target[, target_mode])}`` to a relationships part."""
    entries = []
    for rel_id, rel in relationships.items():
        rel_type, target = rel[0], rel[1]
        mode = f' TargetMode="{rel[2]}"' if len(rel) > 2 else ""
        entries.append(f'<Relationship Id="{rel_id}" Type="{rel_type}" Target="{target}"{mode}/>')
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f'<Relationships xmlns="{NAMESPACES["rel"]}">{"".join(entries)}</Relationships>'
    )


def build_docx(
    body: str,
    styles: Optional[str] = None,
    numbering: Optional[str] = None,
    relationships: Optional[Dict[str, tuple]] = None,
    media: Optional[Dict[str, bytes]] = None,
    extra_parts: Optional[Dict[str, bytes]] = None,
    raw_document: Optional[str] = None,
) -> bytes:
    """Zip a package whose document body is ``body`` (WordprocessingML markup)."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
        zf.writestr("[Content_Types].xml", CONTENT_TYPES)
        zf.writestr("_rels/.rels", ROOT_RELS)
        if raw_document is not None:
            zf.writestr("word/document.xml", raw_document)
        elif body is not None:
            zf.writestr("word/document.xml", document_xml(body))
        if styles is not None:
            zf.writestr("word/styles.xml", styles)
        if numbering is not None:
            zf.writestr("word/numbering.xml", numbering)
        if relationships is not None:
            zf.writestr("word/_rels/document.xml.rels", rels_xml(relationships))
        for name, data in (media or {}).items():
            zf.writestr(f"word/media/{name}", data)
        for name, data in (extra_parts or {}).items():
            zf.writestr(name, data)
    return buffer.getvalue()


def paragraph(text: str = "", ppr: str = "", rpr: str = "") -> str:
    run_props = f"<w:rPr>{rpr}</w:rPr>" if rpr else ""
    para_props = f"<w:pPr>{ppr}</w:pPr>" if ppr else ""
    run = f'<w:r>{run_props}<w:t xml:space="preserve">{text}</w:t></w:r>' if text else ""
    return f"<w:p>{para_props}{run}</w:p>"


def list_paragraph(text: str, num_id: str, level: int = 0) -> str:
    return paragraph(text, ppr=f'<w:numPr><w:ilvl w:val="{level}"/><w:numId w:val="{num_id}"/></w:numPr>')


def abstract_num(abstract_id: str, levels: str) -> str:
    return f'<w:abstractNum w:abstractNumId="{abstract_id}">{levels}</w:abstractNum>'


def level(ilvl: int, fmt: str = "decimal", text: str = "%1.", start: int = 1) -> str:
    return (
        f'<w:lvl w:ilvl="{ilvl}"><w:start w:val="{start}"/><w:numFmt w:val="{fmt}"/>'
        f'<w:lvlText w:val="{text}"/></w:lvl>'
    )


def num(num_id: str, abstract_id: str, overrides: str = "") -> str:
    return f'<w:num w:numId="{num_id}"><w:abstractNumId w:val="{abstract_id}"/>{overrides}</w:num>'
