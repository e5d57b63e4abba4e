from pydantic import BaseModel, ConfigDict


class UserModel(BaseModel):
    """This class is used to create a user model for basic authentication."""
    model_config = ConfigDict(from_attributes=True)

    username: str
    hash_password: str
    salt: str
