"""
Auth API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from . import dependencies, schemas, service

router = APIRouter()


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    payload: schemas.RegisterRequest,
    auth: service.AuthService = Depends(dependencies.get_auth_service),
) -> dict:
    user = await auth.register(payload)
    return {"message": "User registered successfully", "user": user}


@router.post("/login")
async def login(
    payload: schemas.LoginRequest,
    auth: service.AuthService = Depends(dependencies.get_auth_service),
) -> dict:
    return await auth.login(payload)


@router.post("/logout")
async def logout(auth: service.AuthService = Depends(dependencies.get_auth_service)) -> dict:
    return await auth.logout()


@router.get("/me")
async def me(
    current_user: dict = Depends(dependencies.get_current_user),
    auth: service.AuthService = Depends(dependencies.get_auth_service),
) -> dict:
    return await auth.me(current_user)


@router.post("/refresh")
async def refresh(auth: service.AuthService = Depends(dependencies.get_auth_service)) -> dict:
    return await auth.refresh()
