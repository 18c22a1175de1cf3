"""
Printable .docx story templates (python-docx)
"""

from dataclasses import dataclass, field
from io import BytesIO
from typing import List, Optional
import re

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Pt

from storybook.models.story import Story
from storybook.schemas.story import PremadeStory

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

INSTRUCTIONS = [
    "• Read the story text on each page",
    "• Follow the drawing prompt to create your illustration",
    "• Use the space provided to draw your picture",
    "• Have fun bringing the story to life!",
]

DRAWING_AREA_LINES = 8


@dataclass
class ExportPage:
    page_number: int
    text: str
    drawing_prompt: Optional[str] = None


@dataclass
class ExportStory:
    title: str
    description: Optional[str] = None
    age_group: Optional[str] = None
    category: Optional[str] = None
    pages: List[ExportPage] = field(default_factory=list)

    @classmethod
    def from_premade(cls, story: PremadeStory) -> "ExportStory":
        return cls(
            title=story.title,
            description=story.description,
            age_group=story.age_group,
            category=story.category,
            pages=[ExportPage(p.page_number, p.text, p.drawing_prompt) for p in story.pages],
        )

    @classmethod
    def from_story(cls, story: Story) -> "ExportStory":
        pages = [
            ExportPage(int(p.get("page_number") or i), p.get("text") or "")
            for i, p in enumerate(story.pages or [], start=1)
        ]
        return cls(title=story.title, description=story.description, pages=pages)


def document_filename(title: str) -> str:
    """'The Magic Forest Adventure' -> 'the_magic_forest_adventure_story_template.docx'"""
    cleaned = re.sub(r"[^a-z0-9\s]", "", title or "", flags=re.IGNORECASE)
    cleaned = re.sub(r"\s+", "_", cleaned).lower()
    return f"{cleaned}_story_template.docx"


def _paragraph(doc, text: str, *, size: Optional[int] = None, bold: bool = False, italic: bool = False,
               center: bool = False, space_after: Optional[int] = None):
    para = doc.add_paragraph()
    run = para.add_run(text)
    run.bold = bold
    run.italic = italic
    if size:
        run.font.size = Pt(size)
    if center:
        para.alignment = WD_ALIGN_PARAGRAPH.CENTER
    if space_after is not None:
        para.paragraph_format.space_after = Pt(space_after)
    return para


def render_story_document(story: ExportStory) -> bytes:
    """Title page, instructions, then one block per page with room to draw."""
    doc = Document()

    _paragraph(doc, story.title, size=24, bold=True, center=True, space_after=20)
    if story.description:
        _paragraph(doc, story.description, size=12, center=True, space_after=10)
    if story.age_group:
        _paragraph(doc, f"Age Group: {story.age_group}", size=10, center=True, space_after=10)
    if story.category:
        _paragraph(doc, f"Category: {story.category}", size=10, center=True, space_after=20)

    _paragraph(doc, "Instructions:", size=12, bold=True, space_after=10)
    for line in INSTRUCTIONS:
        _paragraph(doc, line, size=10, space_after=5)
    doc.add_paragraph()

    last = len(story.pages) - 1
    for index, page in enumerate(story.pages):
        _paragraph(doc, f"Page {page.page_number}", size=16, bold=True, center=True, space_after=15)

        _paragraph(doc, "Story Text:", size=12, bold=True, space_after=10)
        text_para = _paragraph(doc, page.text, size=11, space_after=20)
        text_para.paragraph_format.line_spacing = 1.5

        if page.drawing_prompt:
            _paragraph(doc, "Drawing Prompt:", size=12, bold=True, space_after=10)
            _paragraph(doc, page.drawing_prompt, size=11, italic=True, space_after=20)

        _paragraph(doc, "Your Drawing:", size=12, bold=True, space_after=10)
        for _ in range(DRAWING_AREA_LINES):
            _paragraph(doc, "", size=12, space_after=10)

        if index < last:
            _paragraph(doc, "---", center=True, space_after=30)

    buffer = BytesIO()
    doc.save(buffer)
    return buffer.getvalue()
