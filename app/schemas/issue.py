from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, Literal, Union

from app.models.issue import IssueStatus, IssueType, IssuePriority

All = Literal["all"]
Order = Literal["newest", "triage"]


class Location(BaseModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    address: Optional[str] = Field(default=None, max_length=300)


class Coordinate(BaseModel):
    latitude: float
    longitude: float


class IssueCreate(BaseModel):
    """Citizen submission. id, status and timestamps are assigned by the store."""
    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    title: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1, max_length=500)
    type: IssueType
    location: Location
    reported_by_id: str = Field(min_length=1, max_length=120, alias="reportedById")
    priority: Optional[IssuePriority] = None
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    due_date: Optional[int] = Field(default=None, ge=0, alias="dueDate")


class IssueOut(BaseModel):
    id: str
    title: str
    description: str
    type: IssueType
    location: Location
    status: IssueStatus
    priority: Optional[IssuePriority] = None

    reported_by_id: str
    reported_at: int
    resolved_at: Optional[int] = None
    due_date: Optional[int] = None

    assigned_to: Optional[str] = None
    image_url: Optional[str] = None

    @classmethod
    def from_model(cls, obj) -> "IssueOut":
        return cls(
            id=obj.id,
            title=obj.title,
            description=obj.description,
            type=obj.type,
            location=Location(latitude=obj.lat, longitude=obj.lng, address=obj.address),
            status=obj.status,
            priority=obj.priority,
            reported_by_id=obj.reported_by_id,
            reported_at=obj.reported_at,
            resolved_at=obj.resolved_at,
            due_date=obj.due_date,
            assigned_to=obj.assigned_to,
            image_url=obj.image_url,
        )


class IssueStatusPatch(BaseModel):
    status: IssueStatus


class IssueUpdate(BaseModel):
    assigned_to: Optional[str] = Field(default=None, max_length=120)
    priority: Optional[IssuePriority] = None
    due_date: Optional[int] = Field(default=None, ge=0)

    @field_validator("assigned_to")
    @classmethod
    def _blank_is_unassigned(cls, v):
        if v is not None and not v.strip():
            return None
        return v.strip() if v else v


class IssueFilter(BaseModel):
    """Conjunctive filter; "all" or None disables a field."""
    status: Optional[Union[IssueStatus, All]] = None
    type: Optional[Union[IssueType, All]] = None
    priority: Optional[Union[IssuePriority, All]] = None
    reported_by_id: Optional[str] = None
    search: Optional[str] = None


class IssueSummary(BaseModel):
    total: int
    pending: int
    in_progress: int
    resolved: int
    by_type: dict[str, int]


class ImageSuggestion(BaseModel):
    detected_type: IssueType = Field(alias="detectedType")
    suggested_title: str = Field(alias="suggestedTitle")
    suggested_description: str = Field(alias="suggestedDescription")

    model_config = ConfigDict(populate_by_name=True)
