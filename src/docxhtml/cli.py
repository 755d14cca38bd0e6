"""DOCX to HTML Converter - CLI Entry Point."""

import logging
import os
import sys
from pathlib import Path
from typing import Optional

import click

from docxhtml.converter import DocxToHtmlConverter, to_standalone_html
from docxhtml.errors import DocxHtmlError
from docxhtml.ir import ConvertOptions


def _env_bool(name: str) -> Optional[bool]:
    value = os.environ.get(name)
    if value is None:
        return None
    value = value.strip().lower()
    if value in {"1", "true", "yes", "y"}:
        return True
    if value in {"0", "false", "no", "n"}:
        return False
    return None


def _resolve_toggle(flag: Optional[bool], env_name: str, default: bool) -> bool:
    if flag is not None:
        return flag
    env_value = _env_bool(env_name)
    if env_value is not None:
        return env_value
    return default


@click.command()
@click.argument("input_docx", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("output_html", type=click.Path(dir_okay=False, path_type=Path), required=False)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.option(
    "--page-styles/--no-page-styles",
    default=None,
    show_default=False,
    help="Extract @page size and margins from the final section (default: enabled)",
)
@click.option("--standalone/--fragment", default=True, help="Write a full HTML document or only the fragment")
@click.option("--css", "css_path", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="Extra stylesheet to inline into standalone output")
@click.option("--share-base-url", help="Base URL for links to shared documents")
def cli(input_docx: Path, output_html: Optional[Path] = None, verbose: bool = False,
        page_styles: Optional[bool] = None, standalone: bool = True, css_path: Optional[Path] = None,
        share_base_url: Optional[str] = None):
    """Convert a Word document to HTML.

    INPUT_DOCX: Path to the input .docx file.
    OUTPUT_HTML: Where to write the HTML (default: next to the input).
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    options = ConvertOptions(
        extract_page_styles=_resolve_toggle(page_styles, "DOCXHTML_PAGE_STYLES", default=True),
    )
    if share_base_url:
        options.share_base_url = share_base_url

    if output_html is None:
        output_html = input_docx.with_suffix(".html")

    if verbose:
        click.echo(f"Parsing: {input_docx}")

    try:
        converter = DocxToHtmlConverter.create(input_docx.read_bytes(), options)
        result = converter.convert()
    except (DocxHtmlError, OSError) as e:
        click.echo(f"Error converting DOCX: {e}", err=True)
        sys.exit(1)

    if verbose:
        click.echo(f"  Styles: {len(converter.styles)}, numbering instances: {len(converter.numbering)}")
        if result.page_styles_css:
            click.echo(f"  Page: {result.page_styles_css}")

    if standalone:
        extra_css = css_path.read_text(encoding="utf-8") if css_path else None
        output = to_standalone_html(result, title=input_docx.stem, extra_css=extra_css)
    else:
        output = result.html

    output_html.parent.mkdir(parents=True, exist_ok=True)
    output_html.write_text(output, encoding="utf-8")

    click.echo(f"✓ Converted {input_docx.name} → {output_html.name}")


if __name__ == "__main__":
    cli()
