"""
Export system rendering Markdown summaries and analyses to Markdown, HTML,
PDF, DOCX and JSON files.
"""

import os
import re
import json
import math
import logging
from datetime import datetime
from typing import List, Dict, Any, Optional
from xml.sax.saxutils import escape

import markdown
from bs4 import BeautifulSoup, NavigableString, Tag

# PDF generation
try:
    from reportlab.lib.pagesizes import A4
    from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, HRFlowable
    from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
    from reportlab.lib.units import inch
    PDF_AVAILABLE = True
except ImportError:
    PDF_AVAILABLE = False

# DOCX generation
try:
    import docx
    from docx.shared import Pt
    DOCX_AVAILABLE = True
except ImportError:
    DOCX_AVAILABLE = False

from prompts import resolve_output_settings
from utils import ensure_directory, sanitize_filename, format_timestamp

logger = logging.getLogger(__name__)

# reportlab standard fonts and their bold faces
PDF_FONTS = {
    'Times-Roman': 'Times-Bold',
    'Helvetica': 'Helvetica-Bold',
    'Courier': 'Courier-Bold',
}

DOCX_FONTS = {
    'Times-Roman': 'Times New Roman',
    'Helvetica': 'Arial',
    'Courier': 'Courier New',
}

FILE_EXTENSIONS = {
    'markdown': '.md',
    'html': '.html',
    'pdf': '.pdf',
    'docx': '.docx',
    'json': '.json',
}


def markdown_to_text(md: str) -> str:
    """Strip Markdown syntax, keeping bullets as '•' lines."""
    text = re.sub(r"^#+\s+(.*)", r"\1\n", md, flags=re.MULTILINE)
    text = re.sub(r"\*\*(.*?)\*\*", r"\1", text)
    text = re.sub(r"^\s*[-*+]\s+(.*)", r"• \1", text, flags=re.MULTILINE)
    text = re.sub(r"(?<!\*)\*(?!\s)(.*?)\*", r"\1", text)
    text = re.sub(r"\[(.*?)\]\((.*?)\)", r"\1", text)
    text = re.sub(r"^---+$", "", text, flags=re.MULTILINE)
    return text


def estimate_pages(text: str, font_size: float = 12, line_spacing: float = 1.5) -> int:
    """Rough page count for an A4 page with one-inch margins."""
    chars_per_line = math.floor(180 * (12 / font_size))
    lines_per_page = math.floor(45 / line_spacing)
    lines = sum(max(1, math.ceil(len(line) / chars_per_line)) for line in text.split("\n"))
    return math.ceil(lines / lines_per_page)


def markdown_to_html(md: str) -> str:
    return markdown.markdown(md, extensions=['sane_lists'])


class Exporter:
    """
    Export summaries and analyses to files in a folder.
    """

    def __init__(self, config: Dict[str, Any]):
        """
        Initialize exporter with configuration.

        :param config: Configuration dictionary
        """
        self.config = config or {}
        self.output_dir = self.config.get('output_dir', 'exports')
        self.formats = self.config.get('formats', ['markdown'])

        # Ensure output directory exists
        ensure_directory(self.output_dir)

        logger.info(f"Exporter initialized. Output formats: {self.formats}")
        logger.info(f"Output directory: {self.output_dir}")

    def _file_path(self, filename_base: str, format_type: str) -> str:
        return os.path.join(self.output_dir, f"{filename_base}{FILE_EXTENSIONS[format_type]}")

    def export(self, title: str, content: str, settings: Optional[Dict[str, Any]] = None,
               formats: Optional[List[str]] = None) -> Optional[str]:
        """
        Export a Markdown document in all requested formats.

        :param title: Document title, also used for the file name
        :param content: Markdown content
        :param settings: Output settings (fonts, spacing)
        :param formats: Formats to write; configured formats when None
        :return: Path to the primary export file (Markdown if written)
        """
        settings = resolve_output_settings(settings)
        filename_base = f"{sanitize_filename(title) or 'summary'}_{format_timestamp()}"
        exported_files = []

        for format_type in formats or self.formats:
            try:
                if format_type == 'markdown':
                    file_path = self._export_markdown(filename_base, title, content)
                elif format_type == 'html':
                    file_path = self._export_html(filename_base, title, content, settings)
                elif format_type == 'pdf':
                    file_path = self._export_pdf(filename_base, title, content, settings)
                elif format_type == 'docx':
                    file_path = self._export_docx(filename_base, title, content, settings)
                elif format_type == 'json':
                    file_path = self._export_json(filename_base, title, content, settings)
                else:
                    logger.warning(f"Unsupported export format: {format_type}")
                    continue

                exported_files.append(file_path)
                logger.info(f"Exported {format_type.upper()} format: {file_path}")

            except Exception as e:
                logger.error(f"Error exporting {format_type} format: {e}")
                continue

        primary_file = next((f for f in exported_files if f.endswith('.md')), exported_files[0] if exported_files else None)
        return primary_file

    def _export_markdown(self, filename_base: str, title: str, content: str) -> str:
        file_path = self._file_path(filename_base, 'markdown')
        with open(file_path, "w", encoding="utf-8") as f:
            f.write(content)
            if not content.endswith("\n"):
                f.write("\n")
        return file_path

    def _export_json(self, filename_base: str, title: str, content: str, settings: Dict[str, Any]) -> str:
        file_path = self._file_path(filename_base, 'json')
        export_data = {
            "metadata": {
                "title": title,
                "export_date": datetime.now().isoformat(),
                "language": settings.get('language'),
                "settings": settings,
                "estimated_pages": estimate_pages(markdown_to_text(content), settings['font_size'], settings['line_spacing']),
            },
            "content": content,
        }
        with open(file_path, "w", encoding="utf-8") as f:
            json.dump(export_data, f, indent=2, ensure_ascii=False)
        return file_path

    def _export_html(self, filename_base: str, title: str, content: str, settings: Dict[str, Any]) -> str:
        file_path = self._file_path(filename_base, 'html')
        html_content = f"""<!DOCTYPE html>
<html lang="{settings.get('language', 'en')}">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{escape(title)}</title>
    <style>
        body {{ font-family: {DOCX_FONTS.get(settings['font_family'], settings['font_family'])}, serif;
               font-size: {settings['font_size']}pt; line-height: {settings['line_spacing']}; margin: 40px; }}
        h1 {{ color: #333; border-bottom: 2px solid #333; }}
        h2 {{ color: #666; margin-top: 30px; }}
        h3 {{ color: #888; }}
    </style>
</head>
<body>
{markdown_to_html(content)}
</body>
</html>
"""
        with open(file_path, "w", encoding="utf-8") as f:
            f.write(html_content)
        return file_path

    def _inline_markup(self, element: Tag) -> str:
        """Render inline HTML children as reportlab paragraph markup."""
        parts = []
        for child in element.children:
            if isinstance(child, NavigableString):
                parts.append(escape(str(child)))
            elif child.name in ('strong', 'b'):
                parts.append(f"<b>{self._inline_markup(child)}</b>")
            elif child.name in ('em', 'i'):
                parts.append(f"<i>{self._inline_markup(child)}</i>")
            elif child.name == 'code':
                parts.append(f'<font face="Courier">{escape(child.get_text())}</font>')
            elif child.name == 'br':
                parts.append("<br/>")
            else:
                parts.append(self._inline_markup(child))
        return "".join(parts)

    def _export_pdf(self, filename_base: str, title: str, content: str, settings: Dict[str, Any]) -> str:
        """Export content to PDF format."""
        if not PDF_AVAILABLE:
            raise ImportError("PDF export requires reportlab. Install with: pip install reportlab")

        file_path = self._file_path(filename_base, 'pdf')

        font_name = settings['font_family']
        if font_name not in PDF_FONTS:
            logger.warning(f"Font {font_name} not available for PDF, using Times-Roman")
            font_name = 'Times-Roman'
        bold_font = PDF_FONTS[font_name]
        font_size = float(settings['font_size'])
        leading = font_size * float(settings['line_spacing'])

        styles = getSampleStyleSheet()
        body = ParagraphStyle('Body', parent=styles['Normal'], fontName=font_name,
                              fontSize=font_size, leading=leading, spaceAfter=6)
        bullet = ParagraphStyle('BulletBody', parent=body, leftIndent=18, bulletIndent=6)
        headings = {
            level: ParagraphStyle(f'H{level}', parent=styles[f'Heading{min(level, 4)}'], fontName=bold_font,
                                  fontSize=font_size + max(0, 8 - 2 * level),
                                  leading=(font_size + max(0, 8 - 2 * level)) * 1.2)
            for level in range(1, 7)
        }

        doc = SimpleDocTemplate(file_path, pagesize=A4, title=title,
                                leftMargin=inch, rightMargin=inch, topMargin=inch, bottomMargin=inch)
        story = []

        soup = BeautifulSoup(markdown_to_html(content), 'html.parser')
        for element in soup.children:
            if not isinstance(element, Tag):
                continue
            if element.name in ('h1', 'h2', 'h3', 'h4', 'h5', 'h6'):
                story.append(Paragraph(self._inline_markup(element), headings[int(element.name[1])]))
            elif element.name in ('ul', 'ol'):
                for number, item in enumerate(element.find_all('li', recursive=False), 1):
                    marker = f"{number}." if element.name == 'ol' else "•"
                    story.append(Paragraph(self._inline_markup(item), bullet, bulletText=marker))
            elif element.name == 'hr':
                story.append(HRFlowable(width="100%"))
                story.append(Spacer(1, 6))
            elif element.name == 'pre':
                story.append(Paragraph(escape(element.get_text()).replace("\n", "<br/>"), body))
            else:
                story.append(Paragraph(self._inline_markup(element), body))

        doc.build(story)
        return file_path

    def _add_docx_runs(self, paragraph, element: Tag, bold: bool = False, italic: bool = False):
        for child in element.children:
            if isinstance(child, NavigableString):
                run = paragraph.add_run(str(child))
                run.bold = bold
                run.italic = italic
            elif child.name in ('strong', 'b'):
                self._add_docx_runs(paragraph, child, True, italic)
            elif child.name in ('em', 'i'):
                self._add_docx_runs(paragraph, child, bold, True)
            else:
                self._add_docx_runs(paragraph, child, bold, italic)

    def _export_docx(self, filename_base: str, title: str, content: str, settings: Dict[str, Any]) -> str:
        """Export content to a Word document."""
        if not DOCX_AVAILABLE:
            raise ImportError("DOCX export requires python-docx. Install with: pip install python-docx")

        file_path = self._file_path(filename_base, 'docx')

        document = docx.Document()
        normal = document.styles['Normal']
        normal.font.name = DOCX_FONTS.get(settings['font_family'], settings['font_family'])
        normal.font.size = Pt(float(settings['font_size']))
        normal.paragraph_format.line_spacing = float(settings['line_spacing'])
        document.core_properties.title = title

        soup = BeautifulSoup(markdown_to_html(content), 'html.parser')
        for element in soup.children:
            if not isinstance(element, Tag):
                continue
            if element.name in ('h1', 'h2', 'h3', 'h4', 'h5', 'h6'):
                document.add_heading(element.get_text(), level=min(int(element.name[1]), 9))
            elif element.name in ('ul', 'ol'):
                style = 'List Number' if element.name == 'ol' else 'List Bullet'
                for item in element.find_all('li', recursive=False):
                    self._add_docx_runs(document.add_paragraph(style=style), item)
            elif element.name == 'hr':
                document.add_paragraph()
            else:
                self._add_docx_runs(document.add_paragraph(), element)

        document.save(file_path)
        return file_path

    def get_export_stats(self) -> Dict[str, Any]:
        """Summarize what has been exported so far."""
        files = os.listdir(self.output_dir) if os.path.isdir(self.output_dir) else []
        by_format = {}
        for format_type, ext in FILE_EXTENSIONS.items():
            by_format[format_type] = len([f for f in files if f.endswith(ext)])
        return {
            'output_dir': self.output_dir,
            'formats': self.formats,
            'total_files': len(files),
            'files_by_format': by_format,
        }
