"""Generate DOCX samples for testing."""
from pathlib import Path
import docx
from docx.enum.section import WD_ORIENT
from docx.shared import Inches, RGBColor


def generate_text_formatting(directory: Path) -> Path:
    """Generate sample with basic text formatting."""
    doc = docx.Document()
    doc.add_heading('Text Formatting Test', 1)

    p = doc.add_paragraph('This is a ')
    p.add_run('bold').bold = True
    p.add_run(' word.')

    p = doc.add_paragraph('This is an ')
    p.add_run('italic').italic = True
    p.add_run(' word.')

    p = doc.add_paragraph('This is ')
    p.add_run('underlined').underline = True
    p.add_run('.')

    p = doc.add_paragraph('Colored: ')
    p.add_run('red').font.color.rgb = RGBColor(0xFF, 0x00, 0x00)

    path = directory / "feature_text.docx"
    doc.save(path)
    return path


def generate_lists(directory: Path) -> Path:
    """Generate sample with lists."""
    doc = docx.Document()
    doc.add_heading('List Test', 1)

    doc.add_paragraph('Unordered List:')
    doc.add_paragraph('Item 1', style='List Bullet')
    doc.add_paragraph('Item 2', style='List Bullet')

    doc.add_paragraph('Ordered List:')
    doc.add_paragraph('First', style='List Number')
    doc.add_paragraph('Second', style='List Number')

    path = directory / "feature_lists.docx"
    doc.save(path)
    return path


def generate_tables(directory: Path) -> Path:
    """Generate sample with tables."""
    doc = docx.Document()
    doc.add_heading('Table Test', 1)

    table = doc.add_table(rows=2, cols=2)
    table.style = 'Table Grid'

    table.cell(0, 0).text = "A1"
    table.cell(0, 1).text = "B1"
    table.cell(1, 0).text = "A2"
    table.cell(1, 1).text = "B2"

    merged = doc.add_table(rows=2, cols=2)
    merged.cell(0, 0).merge(merged.cell(1, 0))
    merged.cell(0, 0).text = "Tall"
    merged.cell(0, 1).text = "Right top"
    merged.cell(1, 1).text = "Right bottom"

    path = directory / "feature_tables.docx"
    doc.save(path)
    return path


def generate_landscape(directory: Path) -> Path:
    """Generate a landscape sample with custom margins."""
    doc = docx.Document()
    section = doc.sections[0]
    section.orientation = WD_ORIENT.LANDSCAPE
    section.page_width, section.page_height = section.page_height, section.page_width
    section.left_margin = Inches(0.5)
    section.right_margin = Inches(0.5)
    doc.add_paragraph('Wide page')

    path = directory / "feature_landscape.docx"
    doc.save(path)
    return path
