from pydantic import BaseModel


class UserCreate(BaseModel):
    username: str
    email: str
    password_hash: str  # already hashed by the auth layer
    first_name: str
    last_name: str


class UserRead(BaseModel):
    id: int
    username: str
    email: str
    first_name: str
    last_name: str
