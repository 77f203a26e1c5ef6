"""
api/routes/users.py -- Registration and login endpoints.

Routes:
  POST /register   -- create an account; returns the user without its hash
  POST /login      -- exchange email + password for a bearer token

Both routes are public. Errors are raised by UserDirectory as core.errors
types and rendered by the exception handlers in api/main.py.

Security:
  Login returns one message for unknown email and wrong password.
  Cache-Control: no-store on login responses so the token is not cached.
"""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from api.models import LoginRequest, RegisterRequest, UserResponse
from auth.directory import UserDirectory

# Auth policy:
# - POST /register: public -- account creation needs no prior auth
# - POST /login:    public -- login endpoint must be unauthenticated
router = APIRouter()


@router.post("/register", response_model=UserResponse)
def register(request: Request, body: RegisterRequest) -> UserResponse:
    """Register a new user.

    Returns 400 "Email already in use" when the email is taken, including when
    a concurrent registration wins the race and the unique index rejects this
    insert.
    """
    directory: UserDirectory = request.app.state.directory
    user = directory.register(
        username=body.username,
        email=body.email,
        password=body.password,
        phonenumber=body.phonenumber,
    )
    return UserResponse.from_user(user)


@router.post("/login", response_model=str)
def login(request: Request, body: LoginRequest) -> JSONResponse:
    """Authenticate with email and password; the body is the token as a JSON string."""
    directory: UserDirectory = request.app.state.directory
    token = directory.login(body.email, body.password)
    resp = JSONResponse(status_code=200, content=token)
    resp.headers["Cache-Control"] = "no-store"
    return resp
