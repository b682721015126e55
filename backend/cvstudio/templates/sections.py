"""
Section builders shared by all layouts

A section is rendered only when it has at least one entry; builders never
read anything beyond the CVData they are given.
"""
from typing import Callable, Dict, List

from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, Spacer

from cvstudio.models.cv_document import CVData, PersonalInfo
from cvstudio.models.enums import SectionKind
from cvstudio.templates.markup import plain, to_paragraph_markup
from cvstudio.utils.dates import format_date, format_date_range

SECTION_TITLES = {
    SectionKind.EXPERIENCE: "Experience",
    SectionKind.EDUCATION: "Education",
    SectionKind.SKILLS: "Skills",
    SectionKind.LANGUAGES: "Languages",
    SectionKind.PROJECTS: "Projects",
    SectionKind.CERTIFICATIONS: "Certifications",
    SectionKind.VOLUNTEERING: "Volunteering",
    SectionKind.COURSES: "Courses",
    SectionKind.MILITARY: "Military Service",
    SectionKind.REFERENCES: "References",
    SectionKind.HOBBIES: "Hobbies",
    SectionKind.LINKS: "Links",
    SectionKind.GDPR: "",
}


def _para(markup: str, style) -> List:
    return [Paragraph(markup, style)] if markup else []


def _join(*parts: str, sep: str = " | ") -> str:
    return sep.join(p for p in parts if p)


def _link(url: str, label: str, interactive: bool) -> str:
    if not url:
        return plain(label)
    if not interactive:
        return plain(label or url)
    href = url if url.startswith(('http://', 'https://', 'mailto:')) else f"https://{url}"
    return f'<link href="{plain(href)}">{plain(label or url)}</link>'


def _experience(data: CVData, styles, interactive: bool) -> List:
    story = []
    for exp in data.experience:
        story += _para(plain(exp.title), styles['entry_title'])
        story += _para(_join(plain(exp.company), plain(exp.location),
                             format_date_range(exp.startDate, exp.endDate, exp.current)), styles['meta'])
        story += _para(to_paragraph_markup(exp.description), styles['body'])
    return story


def _education(data: CVData, styles, interactive: bool) -> List:
    story = []
    for edu in data.education:
        story += _para(_join(plain(edu.degree), plain(edu.field), sep=", "), styles['entry_title'])
        story += _para(_join(plain(edu.school),
                             format_date_range(edu.startDate, edu.endDate, edu.current)), styles['meta'])
        story += _para(to_paragraph_markup(edu.description), styles['body'])
    return story


def _skills(data: CVData, styles, interactive: bool) -> List:
    return _para(", ".join(plain(s) for s in data.skills if s and s.strip()), styles['body'])


def _languages(data: CVData, styles, interactive: bool) -> List:
    return _para("<br/>".join(
        _join(f"<b>{plain(lang.name)}</b>" if lang.name else "", plain(lang.level), sep=" - ")
        for lang in data.languages if lang.name or lang.level
    ), styles['body'])


def _projects(data: CVData, styles, interactive: bool) -> List:
    story = []
    for project in data.projects:
        story += _para(plain(project.name), styles['entry_title'])
        story += _para(_link(project.url, project.url, interactive), styles['meta'])
        story += _para(to_paragraph_markup(project.description), styles['body'])
    return story


def _certifications(data: CVData, styles, interactive: bool) -> List:
    story = []
    for cert in data.certifications:
        story += _para(plain(cert.name), styles['entry_title'])
        story += _para(_join(plain(cert.issuer), format_date(cert.date)), styles['meta'])
    return story


def _role_entries(items, styles) -> List:
    story = []
    for item in items:
        story += _para(plain(item.role), styles['entry_title'])
        story += _para(plain(item.organization), styles['meta'])
        story += _para(to_paragraph_markup(getattr(item, 'description', '')), styles['body'])
    return story


def _volunteering(data: CVData, styles, interactive: bool) -> List:
    return _role_entries(data.volunteering, styles)


def _military(data: CVData, styles, interactive: bool) -> List:
    return _role_entries(data.military, styles)


def _courses(data: CVData, styles, interactive: bool) -> List:
    story = []
    for course in data.courses:
        story += _para(plain(course.name), styles['entry_title'])
        story += _para(plain(course.institution), styles['meta'])
    return story


def _references(data: CVData, styles, interactive: bool) -> List:
    story = []
    for ref in data.references:
        story += _para(plain(ref.name), styles['entry_title'])
        story += _para(plain(ref.contact), styles['body'])
    return story


def _hobbies(data: CVData, styles, interactive: bool) -> List:
    return _para(", ".join(plain(h.name) for h in data.hobbies if h.name), styles['body'])


def _links(data: CVData, styles, interactive: bool) -> List:
    return _para("<br/>".join(
        _join(f"<b>{plain(link.name)}:</b>" if link.name else "", _link(link.url, link.url, interactive), sep=" ")
        for link in data.links if link.name or link.url
    ), styles['body'])


def _gdpr(data: CVData, styles, interactive: bool) -> List:
    story = []
    for consent in data.gdpr:
        story += _para(plain(consent.text), styles['small'])
    return story


SECTION_BUILDERS: Dict[SectionKind, Callable] = {
    SectionKind.EXPERIENCE: _experience,
    SectionKind.EDUCATION: _education,
    SectionKind.SKILLS: _skills,
    SectionKind.LANGUAGES: _languages,
    SectionKind.PROJECTS: _projects,
    SectionKind.CERTIFICATIONS: _certifications,
    SectionKind.VOLUNTEERING: _volunteering,
    SectionKind.COURSES: _courses,
    SectionKind.MILITARY: _military,
    SectionKind.REFERENCES: _references,
    SectionKind.HOBBIES: _hobbies,
    SectionKind.LINKS: _links,
    SectionKind.GDPR: _gdpr,
}


def section_body(data: CVData, kind: SectionKind, styles, interactive: bool = True) -> List:
    """Flowables for one section, or [] when the section has no entries"""
    if not data.section(kind):
        return []
    return SECTION_BUILDERS[kind](data, styles, interactive)


def contact_parts(personal: PersonalInfo, interactive: bool = True) -> List[str]:
    parts = [
        _link(f"mailto:{personal.email}", personal.email, interactive) if personal.email else "",
        plain(personal.phone),
        plain(personal.location or _join(personal.city, personal.country, sep=", ")),
        _link(personal.linkedin, personal.linkedin, interactive) if personal.linkedin else "",
        _link(personal.website, personal.website, interactive) if personal.website else "",
    ]
    return [p for p in parts if p]


def full_name(personal: PersonalInfo) -> str:
    return plain(_join(personal.firstName.strip(), personal.lastName.strip(), sep=" "))


def summary(personal: PersonalInfo, styles, scale: float = 1.0) -> List:
    markup = to_paragraph_markup(personal.summary)
    if not markup:
        return []
    return [Paragraph(markup, styles['body']), Spacer(1, 0.08 * inch * scale)]
