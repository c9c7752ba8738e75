from pydantic import AliasChoices, BaseModel, Field
from datetime import datetime
from typing import Optional, List, Literal


class IndexRequest(BaseModel):
    repo_url: Optional[str] = Field(default=None, validation_alias=AliasChoices("repo_url", "repoUrl"))


class IndexResponse(BaseModel):
    namespace: str
    status: Literal["ready", "accepted"]
    message: str


class NamespaceListResponse(BaseModel):
    namespaces: List[str]


class JobResponse(BaseModel):
    namespace: str
    repo_url: str
    status: str
    total_files: int
    total_chunks: int
    embedded_chunks: int
    error: Optional[str]
    started_at: datetime
    finished_at: Optional[datetime]

    class Config:
        from_attributes = True


class AskRequest(BaseModel):
    namespace: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("namespace", "repoId", "repo_id")
    )
    question: Optional[str] = None


class SourceDocument(BaseModel):
    path: str
    text: str
    score: float
