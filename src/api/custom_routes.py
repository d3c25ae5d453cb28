# relationship, search and auth routes; mounted ahead of the collection router
import time
from datetime import datetime, timezone
from typing import Dict, List, Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException

from api.deps import get_store, parse_id
from api.schemas import (
    AuthResponse,
    LoginRequest,
    PublicUser,
    RegisterRequest,
    SearchResponse,
)
from db.store import RecordStore
from utils.logger import get_logger

_logger = get_logger("server")

router = APIRouter()

SEARCH_FIELDS = {
    "users": ("name", "email"),
    "posts": ("title", "content"),
    "products": ("name", "description"),
}


def fabricate_token() -> str:
    """Placeholder bearer token; it authorizes nothing."""
    return f"fake-jwt-token-{int(time.time() * 1000)}"


def avatar_url(name: str) -> str:
    return f"https://ui-avatars.com/api/?name={quote(name)}&background=random&color=fff"


def auth_response(user: Dict) -> AuthResponse:
    return AuthResponse(
        token=fabricate_token(),
        user=PublicUser(
            id=user["id"],
            name=user["name"],
            email=user["email"],
            avatar=user.get("avatar"),
        ),
    )


# ---------------------------
# Relationships
# ---------------------------


@router.get("/users/{user_id}/posts")
async def user_posts(user_id: str, store: RecordStore = Depends(get_store)) -> List[Dict]:
    uid = parse_id(user_id)
    if uid is None:
        return []
    return await store.filter_by("posts", "userId", uid)


@router.get("/posts/{post_id}/comments")
async def post_comments(post_id: str, store: RecordStore = Depends(get_store)) -> List[Dict]:
    pid = parse_id(post_id)
    if pid is None:
        return []
    return await store.filter_by("comments", "postId", pid)


@router.get("/products/category/{category}")
async def products_by_category(
    category: str, store: RecordStore = Depends(get_store)
) -> List[Dict]:
    return await store.filter_by("products", "category", category)


# ---------------------------
# Search
# ---------------------------


@router.get("/search", response_model=SearchResponse)
async def search(q: Optional[str] = None, store: RecordStore = Depends(get_store)):
    if not q:
        raise HTTPException(status_code=400, detail='Query parameter "q" is required')

    found = {
        collection: await store.search(collection, q, fields)
        for collection, fields in SEARCH_FIELDS.items()
    }
    return SearchResponse(**found)


# ---------------------------
# Auth (simulated)
# ---------------------------


@router.post("/auth/login", response_model=AuthResponse)
async def login(payload: LoginRequest, store: RecordStore = Depends(get_store)):
    if not payload.email or not payload.password:
        raise HTTPException(status_code=400, detail="Email and password are required")

    user = await store.find_one("users", "email", payload.email)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")

    # the password is never compared; login only proves the email exists
    return auth_response(user)


@router.post("/auth/register", response_model=AuthResponse, status_code=201)
async def register(payload: RegisterRequest, store: RecordStore = Depends(get_store)):
    if not payload.name or not payload.email or not payload.password:
        raise HTTPException(
            status_code=400, detail="Name, email and password are required"
        )

    user = await store.insert_unique(
        "users",
        {
            "name": payload.name,
            "email": payload.email,
            "avatar": avatar_url(payload.name),
            "createdAt": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
        },
        field="email",
    )
    if user is None:
        raise HTTPException(status_code=409, detail="User already exists")

    _logger.info(f"Registered user {user['id']} <{user['email']}>")
    return auth_response(user)
