from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class Post(BaseModel):
    id: str
    title: str = ""
    body: str = ""
    author: str = ""
    createdAt: datetime
    updatedAt: Optional[datetime] = None


class PostCreate(BaseModel):
    title: str = ""
    body: str = ""
    author: str = ""


class PostUpdate(BaseModel):
    # Unknown keys, including id/createdAt/updatedAt, are dropped by pydantic.
    title: Optional[str] = None
    body: Optional[str] = None
    author: Optional[str] = None
