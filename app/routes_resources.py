# routes_resources.py
"""
CRUD routes, built once per resource from its repository.

    GET    /api/{resource}            list
    GET    /api/{resource}/schema     form / column descriptor
    GET    /api/{resource}/{id}       one record
    POST   /api/{resource}            create  -> 201
    PUT    /api/{resource}/{id}       full replace
    DELETE /api/{resource}/{id}       delete
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session

from app.deps import get_db, require_session
from app.repository import ResourceRepository, REPOSITORIES


def build_resource_router(repo: ResourceRepository) -> APIRouter:
    schema = repo.schema

    router = APIRouter(
        prefix=f"/api/{schema.name}",
        tags=[schema.name],
        dependencies=[Depends(require_session)],
    )

    @router.get("")
    def list_records(db: Session = Depends(get_db)):
        return [schema.dump(obj) for obj in repo.list(db)]

    @router.get("/schema")
    def describe_resource():
        """
        Field and column configuration, so a client can render the
        list table and the create/edit form from one definition.
        """
        return schema.describe()

    @router.get("/{item_id}")
    def get_record(item_id: int, db: Session = Depends(get_db)):
        return schema.dump(repo.get(db, item_id))

    @router.post("", status_code=status.HTTP_201_CREATED)
    def create_record(payload: Any = Body(None), db: Session = Depends(get_db)):
        return schema.dump(repo.create(db, payload))

    @router.put("/{item_id}")
    def update_record(item_id: int, payload: Any = Body(None), db: Session = Depends(get_db)):
        return schema.dump(repo.update(db, item_id, payload))

    @router.delete("/{item_id}")
    def delete_record(item_id: int, db: Session = Depends(get_db)):
        repo.delete(db, item_id)
        return {"message": f"{schema.item_name} deleted successfully"}

    return router


routers = [build_resource_router(repo) for repo in REPOSITORIES.values()]
