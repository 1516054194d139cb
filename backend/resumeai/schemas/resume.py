from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Literal, Optional, List, Dict, Any
from datetime import datetime


class CamelModel(BaseModel):
    # Resume content travels camelCase on the wire (firstName, startDate, ...)
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PersonalInfo(CamelModel):
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    summary: str = ""
    portfolio: Optional[str] = None


class ExperienceEntry(CamelModel):
    title: str = ""
    company: str = ""
    start_date: str = ""
    end_date: str = ""
    description: str = ""


class EducationEntry(CamelModel):
    school: str = ""
    degree: str = ""
    field: str = ""
    graduation_date: str = ""


class ResumeData(CamelModel):
    template: Literal["modern", "classic", "minimal"] = "modern"
    personal: PersonalInfo = Field(default_factory=PersonalInfo)
    experience: List[ExperienceEntry] = Field(default_factory=list)
    education: List[EducationEntry] = Field(default_factory=list)
    skills: List[str] = Field(default_factory=list)

    def as_content(self) -> Dict[str, Any]:
        """Plain dict in wire format, as stored and as scored."""
        return self.model_dump(by_alias=True)


# For POST /api/resumes
class ResumeCreate(BaseModel):
    title: str = "My Resume"
    data: ResumeData = Field(default_factory=ResumeData)


# For PUT /api/resumes/{id}: supplied fields replace the stored ones wholesale
class ResumeUpdate(BaseModel):
    title: Optional[str] = None
    data: Optional[ResumeData] = None


# Base response model
class Resume(BaseModel):
    id: int
    user_id: int
    title: str
    data: Dict[str, Any]
    scores: Optional[Dict[str, Any]] = None
    download_count: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
