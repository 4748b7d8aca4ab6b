"""Request payload parsing for routes that may carry an upload.

Learn: Routes that accept an image or icon take multipart form data; the
same routes also accept plain JSON when there is no file. FastAPI can't
declare "either" in a signature, so these routes read the body here and
validate it against the same pydantic schema either way.

Form fields repeated under one name (``authors=a&authors=b``) become a
list; file parts are returned separately and only for the declared
upload field names.
"""

import json
from typing import Optional, TypeVar

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError
from starlette.datastructures import UploadFile

ModelT = TypeVar("ModelT", bound=BaseModel)

_FORM_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


async def read_payload(
    request: Request,
    schema: type[ModelT],
    file_fields: tuple[str, ...] = (),
) -> tuple[ModelT, dict[str, Optional[UploadFile]]]:
    """Parse a JSON or form body into ``schema`` plus any uploaded files."""
    content_type = request.headers.get("content-type", "")
    files: dict[str, Optional[UploadFile]] = {name: None for name in file_fields}

    if content_type.startswith(_FORM_TYPES):
        form = await request.form()
        data = {}
        for key in form.keys():
            values = form.getlist(key)
            if key in file_fields:
                uploads = [v for v in values if isinstance(v, UploadFile)]
                files[key] = uploads[0] if uploads else None
                continue
            texts = [v for v in values if not isinstance(v, UploadFile)]
            if texts:
                data[key] = texts if len(texts) > 1 else texts[0]
    else:
        raw = await request.body()
        try:
            data = json.loads(raw) if raw else {}
        except json.JSONDecodeError:
            raise HTTPException(status_code=422, detail="Request body is not valid JSON")
        if not isinstance(data, dict):
            raise HTTPException(status_code=422, detail="Request body must be an object")

    try:
        return schema.model_validate(data), files
    except ValidationError as e:
        raise RequestValidationError(e.errors())
