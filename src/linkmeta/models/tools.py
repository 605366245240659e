from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class ExtractMetadataInput(BaseModel):
    url: str = Field(min_length=1, max_length=2048)


class ExtractMetadataOutput(BaseModel):
    url: str
    title: str
    description: str
    thumbnail: str


class SuggestTagsInput(BaseModel):
    url: str = Field(min_length=1, max_length=2048)
    existing_tags: list[str] = []

    @field_validator("existing_tags")
    @classmethod
    def strip_tags(cls, v: list[str]) -> list[str]:
        return [tag.strip() for tag in v]


class SuggestTagsOutput(BaseModel):
    url: str
    tags: list[str]
