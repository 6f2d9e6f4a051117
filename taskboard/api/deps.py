"""
API dependencies.

The storage backend is built once at startup and kept on ``app.state``;
routes receive it through ``StorageDep`` instead of importing a global.
"""

from typing import Annotated

from fastapi import Depends, Request

from taskboard.storage import Storage


def get_storage(request: Request) -> Storage:
    return request.app.state.storage


StorageDep = Annotated[Storage, Depends(get_storage)]
