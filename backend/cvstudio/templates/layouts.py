"""
CV layouts - one story builder per template key
"""
from typing import Callable, Dict, List

from reportlab.lib.colors import HexColor
from reportlab.lib.units import inch
from reportlab.platypus import HRFlowable, KeepTogether, Paragraph, Spacer, Table, TableStyle

from cvstudio.models.cv_document import CVData
from cvstudio.models.enums import SectionKind
from cvstudio.templates.markup import plain, to_paragraph_markup
from cvstudio.templates.sections import (
    SECTION_TITLES,
    contact_parts,
    full_name,
    section_body,
    summary,
)
from cvstudio.utils.dates import format_date_range

DEFAULT_ORDER = [
    SectionKind.EXPERIENCE,
    SectionKind.EDUCATION,
    SectionKind.PROJECTS,
    SectionKind.CERTIFICATIONS,
    SectionKind.VOLUNTEERING,
    SectionKind.COURSES,
    SectionKind.MILITARY,
    SectionKind.SKILLS,
    SectionKind.LANGUAGES,
    SectionKind.LINKS,
    SectionKind.HOBBIES,
    SectionKind.REFERENCES,
    SectionKind.GDPR,
]

# Contact-style sections first, as in a sidebar
SIDEBAR_FIRST_ORDER = [
    SectionKind.SKILLS,
    SectionKind.LANGUAGES,
    SectionKind.LINKS,
    SectionKind.EXPERIENCE,
    SectionKind.EDUCATION,
    SectionKind.PROJECTS,
    SectionKind.CERTIFICATIONS,
    SectionKind.VOLUNTEERING,
    SectionKind.COURSES,
    SectionKind.MILITARY,
    SectionKind.HOBBIES,
    SectionKind.REFERENCES,
    SectionKind.GDPR,
]


def _heading(title: str, styles, rule: bool, scale: float, upper: bool = False) -> List:
    text = plain(title.upper() if upper else title)
    flowables = [Paragraph(text, styles['section'])]
    if rule:
        flowables.append(HRFlowable(width="100%", thickness=max(0.5, 1 * scale),
                                    color=styles['accent'], spaceBefore=0, spaceAfter=4 * scale))
    return flowables


def _sections(data: CVData, styles, interactive: bool, scale: float,
              order=DEFAULT_ORDER, rule: bool = False, upper: bool = False) -> List:
    story = []
    for kind in order:
        body = section_body(data, kind, styles, interactive)
        if not body:
            continue
        title = SECTION_TITLES[kind]
        if title:
            # Keep the heading with the first entry
            story.append(KeepTogether(_heading(title, styles, rule, scale, upper) + body[:1]))
            story.extend(body[1:])
        else:
            story.append(Spacer(1, 8 * scale))
            story.extend(body)
    return story


def _contact_line(data: CVData, style, interactive: bool) -> List:
    parts = contact_parts(data.personal, interactive)
    return [Paragraph(" | ".join(parts), style)] if parts else []


def _name_block(data: CVData, name_style, title_style) -> List:
    story = []
    name = full_name(data.personal)
    if name:
        story.append(Paragraph(name, name_style))
    if data.personal.jobTitle:
        story.append(Paragraph(plain(data.personal.jobTitle), title_style))
    return story


def modern(data: CVData, styles, interactive: bool, scale: float, width: float) -> List:
    """Left accent bar header, sections titled in the accent colour"""
    header = _name_block(data, styles['name'], styles['job_title'])
    header += _contact_line(data, styles['contact'], interactive)
    story = []
    if header:
        bar = Table([[header]], colWidths=[width])
        bar.setStyle(TableStyle([
            ('LINEBEFORE', (0, 0), (0, 0), 6 * scale, styles['accent']),
            ('LEFTPADDING', (0, 0), (-1, -1), 10 * scale),
            ('TOPPADDING', (0, 0), (-1, -1), 2 * scale),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 2 * scale),
        ]))
        story += [bar, Spacer(1, 8 * scale)]
    story += summary(data.personal, styles, scale)
    return story + _sections(data, styles, interactive, scale)


def classic(data: CVData, styles, interactive: bool, scale: float, width: float) -> List:
    """Centered header, ruled upper-case section titles"""
    story = _name_block(data, styles['name_centered'], styles['job_title_centered'])
    story += _contact_line(data, styles['contact_centered'], interactive)
    if story:
        story.append(HRFlowable(width="100%", thickness=1.5 * scale, color=styles['accent'],
                                spaceAfter=6 * scale))
    story += summary(data.personal, styles, scale)
    return story + _sections(data, styles, interactive, scale, rule=True, upper=True)


def professional_blue(data: CVData, styles, interactive: bool, scale: float, width: float) -> List:
    """Solid accent band with inverse header text"""
    header = []
    name = full_name(data.personal)
    if name:
        header.append(Paragraph(name, styles['name_inverse']))
    if data.personal.jobTitle:
        header.append(Paragraph(plain(data.personal.jobTitle), styles['inverse']))
    parts = contact_parts(data.personal, interactive)
    if parts:
        header.append(Paragraph(" | ".join(parts), styles['inverse']))

    story = []
    if header:
        band = Table([[header]], colWidths=[width])
        band.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, -1), styles['accent']),
            ('LEFTPADDING', (0, 0), (-1, -1), 14 * scale),
            ('RIGHTPADDING', (0, 0), (-1, -1), 14 * scale),
            ('TOPPADDING', (0, 0), (-1, -1), 12 * scale),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 12 * scale),
        ]))
        story += [band, Spacer(1, 10 * scale)]
    story += summary(data.personal, styles, scale)
    return story + _sections(data, styles, interactive, scale, order=SIDEBAR_FIRST_ORDER, rule=True)


def elegant(data: CVData, styles, interactive: bool, scale: float, width: float) -> List:
    """Centered header between thin rules, quiet section titles"""
    rule_color = HexColor("#cbd5e1")
    story = [HRFlowable(width="100%", thickness=0.5 * scale, color=rule_color, spaceAfter=6 * scale)]
    story += _name_block(data, styles['name_centered'], styles['job_title_centered'])
    story += _contact_line(data, styles['contact_centered'], interactive)
    story.append(HRFlowable(width="100%", thickness=0.5 * scale, color=rule_color, spaceAfter=8 * scale))
    story += summary(data.personal, styles, scale)
    return story + _sections(data, styles, interactive, scale, upper=True)


def executive(data: CVData, styles, interactive: bool, scale: float, width: float) -> List:
    """Heavy accent bar under a left-aligned header"""
    story = _name_block(data, styles['name'], styles['job_title'])
    story += _contact_line(data, styles['contact'], interactive)
    story.append(HRFlowable(width="100%", thickness=4 * scale, color=styles['accent'],
                            spaceBefore=4 * scale, spaceAfter=8 * scale))
    story += summary(data.personal, styles, scale)
    return story + _sections(data, styles, interactive, scale, rule=True)


def _timeline_rows(items, title_of, subtitle_of, styles, scale: float, width: float) -> List:
    story = []
    date_width = 1.3 * inch * scale
    for item in items:
        dates = format_date_range(item.startDate, item.endDate, item.current)
        cell = [Paragraph(plain(title_of(item)), styles['entry_title'])]
        subtitle = plain(subtitle_of(item))
        if subtitle:
            cell.append(Paragraph(subtitle, styles['meta']))
        row = Table([[Paragraph(plain(dates), styles['meta']), cell]],
                    colWidths=[date_width, width - date_width])
        row.setStyle(TableStyle([
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
            ('LINEBEFORE', (1, 0), (1, 0), 1.5 * scale, styles['accent']),
            ('LEFTPADDING', (1, 0), (1, 0), 8 * scale),
            ('LEFTPADDING', (0, 0), (0, 0), 0),
        ]))
        story.append(row)
        if item.description:
            # Kept outside the row so long descriptions can split across pages
            story += _description(item.description, styles, date_width)
    return story


def _description(description: str, styles, indent: float) -> List:
    markup = to_paragraph_markup(description)
    if not markup:
        return []
    style = styles['body'].clone('CVTimelineBody', leftIndent=indent)
    return [Paragraph(markup, style)]


def timeline(data: CVData, styles, interactive: bool, scale: float, width: float) -> List:
    """Dated entries on a vertical accent line"""
    story = _name_block(data, styles['name'], styles['job_title'])
    story += _contact_line(data, styles['contact'], interactive)
    story.append(Spacer(1, 6 * scale))
    story += summary(data.personal, styles, scale)

    if data.experience:
        story += _heading(SECTION_TITLES[SectionKind.EXPERIENCE], styles, True, scale)
        story += _timeline_rows(data.experience, lambda e: e.title,
                                lambda e: ", ".join(p for p in (e.company, e.location) if p),
                                styles, scale, width)
    if data.education:
        story += _heading(SECTION_TITLES[SectionKind.EDUCATION], styles, True, scale)
        story += _timeline_rows(data.education, lambda e: e.degree,
                                lambda e: e.school, styles, scale, width)

    rest = [k for k in DEFAULT_ORDER if k not in (SectionKind.EXPERIENCE, SectionKind.EDUCATION)]
    return story + _sections(data, styles, interactive, scale, order=rest, rule=True)


LAYOUTS: Dict[str, Callable] = {
    'modern': modern,
    'classic': classic,
    'professional_blue': professional_blue,
    'elegant': elegant,
    'executive': executive,
    'timeline': timeline,
}
