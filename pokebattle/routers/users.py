import logging

from fastapi import APIRouter, HTTPException, status

from pokebattle.authentication.basic_authentication import basic_auth
from pokebattle.models.dc_models import RegisterUserModel

user_router = APIRouter()


class UserAPI:
    @staticmethod
    @user_router.post("/register", status_code=status.HTTP_201_CREATED)
    async def register(request: RegisterUserModel) -> dict:
        """Register a user for HTTP Basic authentication

        Args:
            request (RegisterUserModel):
                    username: str
                    password: str
        """
        if not request.username or not request.password:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Username and password are required",
            )
        created = await basic_auth.store_user_data(request.username, request.password)
        if not created:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Username already exists",
            )
        logging.info(f"Registered user: {request.username}")
        return {"success": True, "username": request.username}
