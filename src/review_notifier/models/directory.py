"""
Identity Directory Data Models

GitHub username → Slack identity 매핑 모델
"""

from dataclasses import dataclass

from pydantic import BaseModel, StrictStr, field_validator


@dataclass(frozen=True)
class DirectoryEntry:
    """Mapping of one GitHub username to a Slack member or channel id"""
    username: str
    slack_id: str

    def __post_init__(self):
        """데이터 검증"""
        if not self.username.strip():
            raise ValueError("Username cannot be empty")
        if not self.slack_id.strip():
            raise ValueError("Slack id cannot be empty")


# Pydantic model for payload validation
class DirectoryEntryRecord(BaseModel):
    """Decoded payload record: {"username": ..., "id": ...}"""
    username: StrictStr
    id: StrictStr

    @field_validator('username', 'id')
    @classmethod
    def validate_not_blank(cls, v):
        if not v.strip():
            raise ValueError('Field cannot be blank')
        return v

    def to_entry(self) -> DirectoryEntry:
        return DirectoryEntry(username=self.username, slack_id=self.id)
