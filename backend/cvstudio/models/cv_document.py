"""
CV document models and schemas

Each section kind has a fixed item model; CVData assembles them into one
record so renderers and the editor never branch on a missing section.
"""
from typing import Any, Dict, List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from cvstudio.config import (
    DEFAULT_SETTINGS,
    DEFAULT_TEMPLATE_KEY,
    DEFAULT_TITLE,
    GDPR_CONSENT_TEXT,
)
from cvstudio.models.enums import SectionKind


class CVModel(BaseModel):
    """Base model: unknown keys ignored, nulls replaced by field defaults"""
    model_config = ConfigDict(extra='ignore', populate_by_name=True)

    @field_validator('*', mode='before')
    @classmethod
    def _fill_missing(cls, v, info):
        field = cls.model_fields.get(info.field_name)
        if field is None:
            return v
        if v is None:
            if field.is_required():
                return v
            default = field.get_default(call_default_factory=True)
            return v if default is None else default
        # Persisted numbers (e.g. a bare year) arrive where text is expected
        if field.annotation is str and isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


class PersonalInfo(CVModel):
    firstName: str = ""
    lastName: str = ""
    jobTitle: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    summary: str = ""
    photo: Optional[str] = None
    city: str = ""
    country: str = ""
    address: str = ""
    zipCode: str = ""
    idNumber: str = ""
    birthDate: str = ""
    nationality: str = ""
    driversLicense: str = ""
    linkedin: str = ""
    website: str = ""


class ExperienceItem(CVModel):
    title: str = ""
    company: str = ""
    location: str = ""
    startDate: str = ""
    endDate: str = ""
    current: bool = False
    description: str = ""


class EducationItem(CVModel):
    school: str = ""
    degree: str = ""
    field: str = ""
    startDate: str = ""
    endDate: str = ""
    current: bool = False
    description: str = ""


class LanguageItem(CVModel):
    name: str = ""
    level: str = "Native"


class ProjectItem(CVModel):
    name: str = ""
    description: str = ""
    url: str = Field("", validation_alias=AliasChoices('url', 'link'))


class CertificationItem(CVModel):
    name: str = ""
    issuer: str = ""
    date: str = ""


class VolunteeringItem(CVModel):
    role: str = ""
    organization: str = ""
    description: str = ""


class CourseItem(CVModel):
    name: str = ""
    institution: str = ""


class MilitaryItem(CVModel):
    role: str = ""
    organization: str = ""


class ReferenceItem(CVModel):
    name: str = ""
    contact: str = ""


class HobbyItem(CVModel):
    name: str = ""


class LinkItem(CVModel):
    name: str = ""
    url: str = ""


class GdprItem(CVModel):
    text: str = GDPR_CONSENT_TEXT


# Item model per section; skills are plain strings
SECTION_MODELS: Dict[SectionKind, Any] = {
    SectionKind.EXPERIENCE: ExperienceItem,
    SectionKind.EDUCATION: EducationItem,
    SectionKind.SKILLS: str,
    SectionKind.LANGUAGES: LanguageItem,
    SectionKind.PROJECTS: ProjectItem,
    SectionKind.CERTIFICATIONS: CertificationItem,
    SectionKind.VOLUNTEERING: VolunteeringItem,
    SectionKind.COURSES: CourseItem,
    SectionKind.MILITARY: MilitaryItem,
    SectionKind.REFERENCES: ReferenceItem,
    SectionKind.HOBBIES: HobbyItem,
    SectionKind.LINKS: LinkItem,
    SectionKind.GDPR: GdprItem,
}


def new_section_item(kind: Union[SectionKind, str]):
    """Default entry appended when the user adds an item to a section"""
    kind = SectionKind(kind)
    model = SECTION_MODELS[kind]
    if model is str:
        return ""
    return model()


class CVData(CVModel):
    personal: PersonalInfo = Field(default_factory=PersonalInfo)
    experience: List[ExperienceItem] = Field(default_factory=list)
    education: List[EducationItem] = Field(default_factory=list)
    skills: List[str] = Field(default_factory=list)
    languages: List[LanguageItem] = Field(default_factory=list)
    projects: List[ProjectItem] = Field(default_factory=list)
    certifications: List[CertificationItem] = Field(default_factory=list)
    volunteering: List[VolunteeringItem] = Field(default_factory=list)
    courses: List[CourseItem] = Field(default_factory=list)
    military: List[MilitaryItem] = Field(default_factory=list)
    references: List[ReferenceItem] = Field(default_factory=list)
    hobbies: List[HobbyItem] = Field(default_factory=list)
    links: List[LinkItem] = Field(default_factory=list)
    gdpr: List[GdprItem] = Field(default_factory=list)

    @field_validator('skills', mode='before')
    @classmethod
    def _flatten_skills(cls, v):
        # Stored skills may be {name, level} objects
        if not isinstance(v, list):
            return v
        flattened = []
        for skill in v:
            if isinstance(skill, dict):
                flattened.append(skill.get('name') or '')
            elif skill is None:
                flattened.append('')
            else:
                flattened.append(str(skill))
        return flattened

    def section(self, kind: Union[SectionKind, str]) -> list:
        return getattr(self, SectionKind(kind).value)


class StyleSettings(CVModel):
    themeColor: str = DEFAULT_SETTINGS['themeColor']
    font: str = DEFAULT_SETTINGS['font']
    lineSpacing: int = DEFAULT_SETTINGS['lineSpacing']
    fontSize: int = DEFAULT_SETTINGS['fontSize']


class CVDocument(CVModel):
    id: Optional[str] = Field(None, validation_alias=AliasChoices('id', '_id'))
    title: str = DEFAULT_TITLE
    templateId: Optional[str] = None
    templateKey: str = DEFAULT_TEMPLATE_KEY
    settings: StyleSettings = Field(default_factory=StyleSettings)
    data: CVData = Field(default_factory=CVData)
    isPaid: bool = False

    def to_payload(self) -> Dict[str, Any]:
        """Body sent to the collaborator API on create/update"""
        return {
            'title': self.title,
            'data': self.data.model_dump(),
            'settings': self.settings.model_dump(),
            'templateId': self.templateId,
        }
