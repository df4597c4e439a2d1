"""
API endpoints для заданий.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.security import verify_api_key
from app.schemas.assignment import (
    AssignmentCreate,
    AssignmentUpdate,
    AssignmentResponse,
    AssignmentListResponse,
)
from app.services.assignment_service import AssignmentService

router = APIRouter(
    prefix="/assignments",
    tags=["assignments"],
    dependencies=[Depends(verify_api_key)],
)


@router.get("", response_model=AssignmentListResponse)
def list_assignments(
    user_id: int = Query(..., description="Владелец заданий"),
    include_done: bool = Query(False),
    status_filter: Optional[str] = Query(None, alias="status", pattern="^(pending|done)$"),
    search: Optional[str] = Query(None, max_length=200),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
):
    """Получить задания пользователя."""
    service = AssignmentService(db)
    assignments = service.get_for_user(
        user_id,
        include_done=include_done,
        status=status_filter,
        search=search,
        skip=skip,
        limit=limit,
    )
    return AssignmentListResponse(
        items=[AssignmentResponse.model_validate(a) for a in assignments],
        total=len(assignments),
    )


@router.post("", response_model=AssignmentResponse, status_code=status.HTTP_201_CREATED)
def create_assignment(data: AssignmentCreate, db: Session = Depends(get_db)):
    """Создать задание."""
    service = AssignmentService(db)
    assignment = service.create(data)
    return AssignmentResponse.model_validate(assignment)


@router.get("/{assignment_id}", response_model=AssignmentResponse)
def get_assignment(assignment_id: int, db: Session = Depends(get_db)):
    """Получить задание по ID."""
    service = AssignmentService(db)
    assignment = service.get_by_id(assignment_id)

    if not assignment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Задание с ID {assignment_id} не найдено",
        )

    return AssignmentResponse.model_validate(assignment)


@router.patch("/{assignment_id}", response_model=AssignmentResponse)
def update_assignment(
    assignment_id: int,
    data: AssignmentUpdate,
    db: Session = Depends(get_db),
):
    """Обновить задание."""
    service = AssignmentService(db)
    assignment = service.get_by_id(assignment_id)

    if not assignment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Задание с ID {assignment_id} не найдено",
        )

    updated = service.update(assignment, data)
    return AssignmentResponse.model_validate(updated)


@router.post("/{assignment_id}/done", response_model=AssignmentResponse)
def mark_assignment_done(assignment_id: int, db: Session = Depends(get_db)):
    """Отметить задание выполненным."""
    service = AssignmentService(db)
    assignment = service.get_by_id(assignment_id)

    if not assignment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Задание с ID {assignment_id} не найдено",
        )

    done = service.mark_done(assignment)
    return AssignmentResponse.model_validate(done)


@router.delete("/{assignment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_assignment(assignment_id: int, db: Session = Depends(get_db)):
    """Удалить задание."""
    service = AssignmentService(db)
    assignment = service.get_by_id(assignment_id)

    if not assignment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Задание с ID {assignment_id} не найдено",
        )

    service.delete(assignment)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
