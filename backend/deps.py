import json
import logging

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import Depends, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from database import get_db


logger = logging.getLogger(__name__)

FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def get_user_or_404(_id: str, db=Depends(get_db)):
    """Loads the user named by the `_id` path parameter.

    A malformed id can't match any document, so it is reported the same
    way as an unknown one.
    """
    try:
        oid = ObjectId(_id)
    except (InvalidId, TypeError):
        oid = None

    user = await db.users.find_one({"_id": oid}) if oid is not None else None
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User with id {_id} not found",
        )

    user["_id"] = str(user["_id"])
    return user


def request_body(model):
    """Dependency factory: validate a JSON or form-encoded body against `model`.

    The landing page posts HTML forms while API clients send JSON, so both
    are accepted. Failures surface as RequestValidationError (-> 400).
    """

    async def _parse(request: Request):
        content_type = request.headers.get("content-type", "")
        if content_type.startswith(FORM_TYPES):
            form = await request.form()
            payload = {k: v for k, v in form.items()}
        else:
            raw = await request.body()
            try:
                payload = json.loads(raw) if raw else {}
            except ValueError:
                raise RequestValidationError(
                    [{"loc": ("body",), "msg": "Malformed JSON body", "type": "json_invalid"}]
                )

        if not isinstance(payload, dict):
            raise RequestValidationError(
                [{"loc": ("body",), "msg": "Body must be an object", "type": "dict_type"}]
            )

        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            raise RequestValidationError(
                [{**e, "loc": ("body", *e["loc"])} for e in exc.errors()]
            )

    return _parse
