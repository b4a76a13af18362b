from __future__ import annotations

import logging
import os
from datetime import date
from pathlib import Path
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from pymongo.errors import DuplicateKeyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from database import check_db, close_db, create_indexes, get_db
from deps import get_user_or_404, request_body
from exercise_log import filter_log, format_day
from models import ExerciseCreate, ExerciseResponse, LogResponse, UserCreate, UserResponse


logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent

app = FastAPI(title="Exercise Tracker")


# --- CORS (landing page and external test runners call the API cross-origin)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.mount("/public", StaticFiles(directory=BASE_DIR / "public"), name="public")


# ------------------------- ERRORS -------------------------


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning("Validation error on %s: %s", request.url.path, exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "message": "Invalid request data",
            "errors": [
                {"field": ".".join(str(loc) for loc in e["loc"]), "message": e["msg"]}
                for e in exc.errors()
            ],
        },
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    # Never leak internals to the client.
    logger.error("Unhandled exception on %s: %s", request.url.path, exc, exc_info=exc)
    return JSONResponse(status_code=500, content={"message": "Server error"})


@app.on_event("startup")
async def startup_db_client():
    await check_db()
    await create_indexes()


@app.on_event("shutdown")
async def shutdown_db_client():
    close_db()


@app.get("/", include_in_schema=False)
async def root():
    return FileResponse(BASE_DIR / "views" / "index.html")


# ------------------------- USERS -------------------------


@app.post("/api/users", status_code=201, response_model=UserResponse)
async def create_user(user: UserCreate = Depends(request_body(UserCreate)), db=Depends(get_db)):
    existing_user = await db.users.find_one({"username": user.username})
    if existing_user:
        raise HTTPException(status_code=400, detail="Username already exists")

    try:
        result = await db.users.insert_one(user.model_dump())
    except DuplicateKeyError:
        # lost a race against a concurrent insert of the same name
        raise HTTPException(status_code=400, detail="Username already exists")

    logger.info("Created user %s", user.username)
    return {"username": user.username, "_id": str(result.inserted_id)}


@app.get("/api/users", response_model=List[UserResponse])
async def list_users(db=Depends(get_db)):
    cursor = db.users.find({}, {"username": 1}).sort("_id", 1)
    users = await cursor.to_list(length=None)
    return [{"_id": str(u["_id"]), "username": u["username"]} for u in users]


# ------------------------- EXERCISES -------------------------


@app.post("/api/users/{_id}/exercises", status_code=201, response_model=ExerciseResponse)
async def add_exercise(
    exercise: ExerciseCreate = Depends(request_body(ExerciseCreate)),
    user=Depends(get_user_or_404),
    db=Depends(get_db),
):
    exercise_doc = {
        "userId": user["_id"],  # reference to users collection
        "description": exercise.description,
        "duration": exercise.duration,
        "date": format_day(exercise.date),
    }
    await db.exercises.insert_one(exercise_doc)

    # _id echoes the user's id; the exercise id is never exposed
    return {
        "username": user["username"],
        "description": exercise_doc["description"],
        "duration": exercise_doc["duration"],
        "date": exercise_doc["date"],
        "_id": user["_id"],
    }


@app.get("/api/users/{_id}/logs", response_model=LogResponse)
async def get_exercise_log(
    date_from: Optional[date] = Query(None, alias="from"),
    date_to: Optional[date] = Query(None, alias="to"),
    limit: Optional[int] = Query(None, gt=0),
    user=Depends(get_user_or_404),
    db=Depends(get_db),
):
    # creation order, so `limit` keeps the oldest entries
    cursor = db.exercises.find({"userId": user["_id"]}).sort("_id", 1)
    exercises = await cursor.to_list(length=None)

    log = filter_log(exercises, date_from=date_from, date_to=date_to, limit=limit)
    return {
        "username": user["username"],
        "count": len(log),
        "_id": user["_id"],
        "log": [
            {"description": e["description"], "duration": e["duration"], "date": e["date"]}
            for e in log
        ],
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=os.getenv("HOST", "0.0.0.0"), port=int(os.getenv("PORT", "3000")))
