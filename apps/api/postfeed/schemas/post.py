"""Post API schemas."""

from datetime import datetime

from pydantic import BaseModel


class PostInput(BaseModel):
    title: str
    content: str
    image_url: str


class PostCreator(BaseModel):
    id: str
    name: str


class Post(BaseModel):
    id: str
    title: str
    content: str
    image_url: str
    creator: PostCreator | None
    created_at: datetime
    updated_at: datetime


class PostPage(BaseModel):
    posts: list[Post]
    total_posts: int


class DeletePostResponse(BaseModel):
    deleted: bool


class ImageUploadResponse(BaseModel):
    message: str
    file_path: str | None = None
