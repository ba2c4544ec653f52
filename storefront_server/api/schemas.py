# Copyright (C) 2024 Storefront Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Pydantic schemas for API request/response. Wire names are camelCase."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Auth
class LoginRequest(CamelModel):
    email: EmailStr
    password: str


class SignupRequest(CamelModel):
    # Bounds follow the users table columns; email-validator caps addresses at 254 characters
    email: EmailStr
    password: str
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    phone_number: str = Field(min_length=1, max_length=32)


class VerifyEmailRequest(CamelModel):
    user_id: str | None = None
    otp: str | None = None


class ForgotPasswordRequest(CamelModel):
    email: str | None = None


class ResetPasswordRequest(CamelModel):
    password: str


class UserResponse(CamelModel):
    """Public view of a user. Password hash and refresh token are never part of it."""

    id: uuid.UUID
    email: str
    first_name: str
    last_name: str
    phone_number: str
    email_verified: bool
    created_at: datetime

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class LoginResponse(CamelModel):
    access_token: str
    user: UserResponse


class AccessTokenResponse(CamelModel):
    access_token: str


class SignupResponse(CamelModel):
    success: bool = True
    message: str
    user_id: uuid.UUID


class StatusResponse(BaseModel):
    """``{"Status": "Success", "message": ...}`` body used by the verification and reset flows."""

    Status: str = "Success"
    message: str | None = None
