import json
import logging
import uuid
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, EmailStr
from pymongo.database import Database
from pymongo.errors import PyMongoError

from auth import create_token, hash_password, verify_password
from config import JWT_SECRET, LOG_LEVEL, PORT
from database import (
    append_match,
    close_client,
    find_messages,
    find_user,
    find_user_by_email,
    find_users_by_fields,
    find_users_by_ids,
    get_db,
    insert_message,
    insert_user,
    ping,
    update_user,
)
from errors import BadRequest, Conflict, InvalidCredentials, NotFound, ServerError
from matching import match_cards, resolve_mutual_matches
from schemas import Message, Profile, User

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if JWT_SECRET == "changeme":
        logger.warning("JWT_SECRET is still 'changeme'. Set a secure secret in your .env")
    yield
    close_client()


app = FastAPI(title="Dating API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PyMongoError)
async def store_error_handler(request: Request, exc: PyMongoError):
    logger.exception("Store failure on %s %s", request.method, request.url.path)
    error = ServerError()
    return JSONResponse(status_code=error.status_code, content={"detail": error.detail})


# Utility

def update_receipt(result) -> dict:
    return {
        "acknowledged": result.acknowledged,
        "matchedCount": result.matched_count,
        "modifiedCount": result.modified_count,
    }


def parse_user_ids(raw: Optional[str]) -> List[str]:
    """Decode the JSON array passed as ?userIds=..."""
    if not raw:
        raise BadRequest("No user IDs provided")
    try:
        user_ids = json.loads(raw)
    except (ValueError, RecursionError):
        raise BadRequest("Invalid user IDs format")
    if not isinstance(user_ids, list):
        raise BadRequest("User IDs should be an array")
    if not all(isinstance(u, str) for u in user_ids):
        raise BadRequest("User IDs should be strings")
    return user_ids


# Pydantic models
class SignupRequest(BaseModel):
    email: EmailStr
    password: str


class LoginRequest(BaseModel):
    email: str
    password: str


class ProfileForm(Profile):
    user_id: str


class UpdateUserRequest(BaseModel):
    formData: ProfileForm


class AddMatchRequest(BaseModel):
    userId: str
    matchedUserId: str


class MessageRequest(BaseModel):
    message: Message


@app.get("/")
def root():
    return "Hello to my app"


@app.get("/test")
def test_database(db: Database = Depends(get_db)):
    response = {
        "backend": "✅ Running",
        "database": "❌ Not Available",
        "database_name": db.name,
        "connection_status": "Not Connected",
        "collections": [],
    }
    try:
        ping(db)
        response["database"] = "✅ Connected & Working"
        response["connection_status"] = "Connected"
        response["collections"] = db.list_collection_names()
    except PyMongoError as e:
        response["database"] = f"❌ Error: {str(e)[:80]}"
    return response


# Auth endpoints
@app.post("/signup")
def signup(payload: SignupRequest, db: Database = Depends(get_db)):
    email = payload.email.lower()
    if find_user_by_email(db, email):
        raise Conflict()

    user = User(
        user_id=str(uuid.uuid4()),
        email=email,
        hashed_password=hash_password(payload.password),
    )
    insert_user(db, user)
    logger.info("User %s signed up", user.user_id)
    return {"token": create_token(user.user_id), "userId": user.user_id}


@app.post("/login")
def login(payload: LoginRequest, db: Database = Depends(get_db)):
    user = find_user_by_email(db, payload.email.lower())
    if not user or not verify_password(payload.password, user.get("hashed_password")):
        raise InvalidCredentials()

    logger.info("User %s logged in", user["user_id"])
    return {"token": create_token(user["user_id"]), "userId": user["user_id"]}


# Profile endpoints
@app.get("/user")
def get_user(userId: str = Query(...), db: Database = Depends(get_db)):
    user = find_user(db, userId)
    if not user:
        raise NotFound()
    return user


@app.put("/user")
def put_user(payload: UpdateUserRequest, db: Database = Depends(get_db)):
    form = payload.formData
    updates = form.model_dump(exclude_none=True, exclude={"user_id"})
    if not updates:
        if not find_user(db, form.user_id):
            raise NotFound()
        return {"acknowledged": True, "matchedCount": 1, "modifiedCount": 0}

    result = update_user(db, form.user_id, updates)
    if result.matched_count == 0:
        raise NotFound()
    return update_receipt(result)


@app.get("/users")
def get_users(userIds: Optional[str] = Query(None), db: Database = Depends(get_db)):
    return find_users_by_ids(db, parse_user_ids(userIds))


@app.get("/gendered-users")
def gendered_users(gender: Optional[str] = Query(None), db: Database = Depends(get_db)):
    return find_users_by_fields(db, {"gender_identity": gender})


# Matches
@app.put("/addmatch")
def add_match(payload: AddMatchRequest, db: Database = Depends(get_db)):
    result = append_match(db, payload.userId, payload.matchedUserId)
    if result.modified_count == 0:
        raise NotFound()
    return update_receipt(result)


def _mutual_matches(db: Database, user_id: str) -> List[dict]:
    user = find_user(db, user_id)
    if not user:
        raise NotFound()
    return resolve_mutual_matches(db, user_id, user.get("matches"))


@app.get("/matches")
def get_matches(userId: str = Query(...), db: Database = Depends(get_db)):
    return _mutual_matches(db, userId)


@app.get("/match-cards")
def get_match_cards(userId: str = Query(...), db: Database = Depends(get_db)):
    return match_cards(_mutual_matches(db, userId))


# Messages
@app.get("/messages")
def get_messages(
    userId: str = Query(...),
    correspondingUserId: str = Query(...),
    db: Database = Depends(get_db),
):
    return find_messages(db, userId, correspondingUserId)


@app.post("/message")
def post_message(payload: MessageRequest, db: Database = Depends(get_db)):
    inserted_id = insert_message(db, payload.message)
    return {"acknowledged": True, "insertedId": inserted_id}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=PORT)
