"""
Error types raised by the API.

Each one is an HTTPException so FastAPI renders it as {"detail": ...}
with the matching status code.
"""

from fastapi import HTTPException


class Conflict(HTTPException):
    def __init__(self, detail: str = "User already exists. Please login"):
        super().__init__(status_code=409, detail=detail)


class InvalidCredentials(HTTPException):
    def __init__(self, detail: str = "Invalid Credentials"):
        super().__init__(status_code=400, detail=detail)


class NotFound(HTTPException):
    def __init__(self, detail: str = "User not found"):
        super().__init__(status_code=404, detail=detail)


class BadRequest(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=400, detail=detail)


class ServerError(HTTPException):
    def __init__(self, detail: str = "Internal Server Error"):
        super().__init__(status_code=500, detail=detail)
