from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from academy.api.deps import AdminViewer
from academy.db.session import get_db
from academy.schemas.courses import Course, CourseDocument, CourseSummary, CoverResponse
from academy.services.course_service import (
    create_course,
    delete_course,
    get_cover,
    list_course_summaries,
    to_full,
    update_course,
)
from academy.services.lookup import get_course_or_404

router = APIRouter(prefix="/v1/courses", tags=["courses"])

NO_STORE_HEADERS = {"Cache-Control": "no-cache, no-store, must-revalidate"}


@router.get("", response_model=list[CourseSummary])
def list_courses(db: Session = Depends(get_db)) -> JSONResponse:
    summaries = list_course_summaries(db)
    return JSONResponse(
        content=[summary.model_dump(mode="json") for summary in summaries],
        headers=NO_STORE_HEADERS,
    )


@router.get("/{course_id}", response_model=Course)
def get_course(course_id: str, db: Session = Depends(get_db)) -> Course:
    return to_full(get_course_or_404(db, course_id))


@router.get("/{course_id}/cover", response_model=CoverResponse)
def get_course_cover(course_id: str, db: Session = Depends(get_db)) -> CoverResponse:
    return CoverResponse(ecover_url=get_cover(db, course_id))


@router.post("", response_model=Course, status_code=status.HTTP_201_CREATED)
def create_course_endpoint(payload: CourseDocument, _: AdminViewer, db: Session = Depends(get_db)) -> Course:
    return to_full(create_course(db, payload))


@router.put("/{course_id}", response_model=Course)
def update_course_endpoint(
    course_id: str,
    payload: CourseDocument,
    _: AdminViewer,
    db: Session = Depends(get_db),
) -> Course:
    return to_full(update_course(db, course_id, payload))


@router.delete("/{course_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_course_endpoint(course_id: str, _: AdminViewer, db: Session = Depends(get_db)) -> Response:
    delete_course(db, course_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
