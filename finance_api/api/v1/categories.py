"""Custom category endpoints"""

import uuid
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from finance_api.api.dependencies import ensure_same_user, get_current_user_id
from finance_api.api.v1.schemas import (
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
    MessageResponse,
)
from finance_api.domain.exceptions import ConflictError, NotFoundError
from finance_api.infrastructure.database.repositories import CategoryRepository, TransactionRepository
from finance_api.infrastructure.database.session import get_db

router = APIRouter()


@router.get("/categories/user/{user_id}", response_model=List[CategoryResponse])
def list_categories(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user_id: uuid.UUID = Depends(get_current_user_id),
):
    ensure_same_user(user_id, current_user_id)
    return CategoryRepository(db).list_by_user(user_id)


@router.post("/categories", response_model=CategoryResponse, status_code=201)
def create_category(
    body: CategoryCreate,
    db: Session = Depends(get_db),
    current_user_id: uuid.UUID = Depends(get_current_user_id),
):
    ensure_same_user(body.user_id, current_user_id)
    repo = CategoryRepository(db)
    if repo.get_by_name(body.user_id, body.name):
        raise ConflictError("A category with this name already exists")

    category = repo.create(**body.model_dump())
    db.commit()
    db.refresh(category)
    return category


@router.put("/categories/{category_id}", response_model=MessageResponse)
def update_category(
    category_id: uuid.UUID,
    body: CategoryUpdate,
    db: Session = Depends(get_db),
    current_user_id: uuid.UUID = Depends(get_current_user_id),
):
    repo = CategoryRepository(db)
    category = repo.get_owned(category_id, current_user_id)
    if category is None:
        raise NotFoundError("Category not found")

    values = body.model_dump(exclude_unset=True, exclude_none=True)
    if "name" in values:
        existing = repo.get_by_name(current_user_id, values["name"])
        if existing is not None and existing.id != category.id:
            raise ConflictError("A category with this name already exists")

    repo.update(category, values)
    db.commit()
    return MessageResponse(message="Category updated")


@router.delete("/categories/{category_id}", response_model=MessageResponse)
def delete_category(
    category_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user_id: uuid.UUID = Depends(get_current_user_id),
):
    """Delete a category that no transaction references"""
    repo = CategoryRepository(db)
    category = repo.get_owned(category_id, current_user_id)
    if category is None:
        raise NotFoundError("Category not found")

    count = TransactionRepository(db).count(custom_category_id=category_id)
    if count > 0:
        raise ConflictError(f"Cannot delete: {count} transactions use this category", count=count)

    repo.delete(category)
    db.commit()
    return MessageResponse(message="Category deleted")
