"""
REST API implementation for MarkTrack using FastAPI.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Dict, Any, List, Union

from pydantic import BaseModel, Field

from fastapi import FastAPI, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from .. import __version__
from ..core.entities import Course, Mark
from ..core.exceptions import (
    InvalidInputError, NotFoundError, DuplicateEntityError, MarkTrackException
)
from ..services import MAX_SEED_COUNT, CatalogService


logger = logging.getLogger(__name__)


# Pydantic models for API
class CourseCreate(BaseModel):
    code: str = Field(..., min_length=1, max_length=20)
    name: str = Field(..., min_length=1, max_length=200)


class CourseUpdate(BaseModel):
    code: Optional[str] = None
    name: Optional[str] = None


class MarkCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    score: Union[float, str]
    max_score: Union[float, str]
    weightage: Union[float, str]


class MarkUpdate(BaseModel):
    """Raw form values; an empty or missing field is left unchanged."""
    name: Optional[str] = None
    score: Optional[Union[float, str]] = None
    max_score: Optional[Union[float, str]] = None
    weightage: Optional[Union[float, str]] = None


class MarkResponse(BaseModel):
    id: str
    name: str
    score: float
    max_score: float
    percentage: float
    weightage: float
    weighted: float
    created_at: datetime
    updated_at: datetime
    version: int


class CourseResponse(BaseModel):
    id: str
    code: str
    name: str
    marks: List[MarkResponse] = []
    total_weightage: float
    total_weighted: float
    created_at: datetime
    updated_at: datetime
    version: int


class TotalsResponse(BaseModel):
    course_id: str
    total_weightage: float
    total_weighted: float
    total_weightage_display: str
    total_weighted_display: str


class StatisticsResponse(BaseModel):
    success: bool
    message: str
    statistics: Dict[str, Any]


ERROR_STATUS = {
    InvalidInputError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    DuplicateEntityError: status.HTTP_409_CONFLICT,
}


class MarkTrackRestAPI:
    """REST API around a CatalogService."""

    def __init__(self, service: CatalogService):
        self._service = service

        self.app = FastAPI(
            title="MarkTrack API",
            description="Course and assessment mark tracking with weighted totals",
            version=__version__,
            docs_url="/docs",
            redoc_url="/redoc"
        )

        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        self.app.add_exception_handler(MarkTrackException, self._handle_error)

        self._setup_routes()

    @property
    def service(self) -> CatalogService:
        return self._service

    async def _handle_error(self, request: Request, exc: MarkTrackException) -> JSONResponse:
        """Map core errors onto HTTP status codes."""
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        for error_type, code in ERROR_STATUS.items():
            if isinstance(exc, error_type):
                status_code = code
                break
        if status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        else:
            logger.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=status_code,
            content={"detail": exc.message, "error_code": exc.error_code, "details": exc.details}
        )

    def _setup_routes(self):
        """Setup API routes."""

        @self.app.get("/", response_model=Dict[str, str])
        async def root():
            """Root endpoint."""
            return {
                "message": "MarkTrack API",
                "version": __version__,
                "docs": "/docs"
            }

        @self.app.get("/health", response_model=Dict[str, str])
        async def health_check():
            """Health check endpoint."""
            return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}

        @self.app.get("/crow", response_class=PlainTextResponse)
        async def crow():
            return "crow"

        # Course and mark endpoints convert entities while holding the
        # service lock, so a response never mixes old totals with new marks.
        @self.app.get("/courses", response_model=List[CourseResponse])
        def list_courses(skip: int = Query(0, ge=0), limit: int = Query(100, ge=1)):
            """List all courses."""
            with self._service.locked():
                courses = self._service.list_courses()[skip:skip + limit]
                return [self._course_to_response(course) for course in courses]

        @self.app.post("/courses/seed", response_model=List[CourseResponse],
                       status_code=status.HTTP_201_CREATED)
        def seed_courses(count: int = Query(3, le=MAX_SEED_COUNT)):
            """Add ``count`` random courses."""
            with self._service.locked():
                return [self._course_to_response(course) for course in self._service.seed_courses(count)]

        @self.app.post("/courses", response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
        def create_course(course_data: Optional[CourseCreate] = None):
            """Create a course; without a body a random one is seeded."""
            with self._service.locked():
                if course_data is None:
                    course = self._service.add_random_course()
                else:
                    course = self._service.add_course(course_data.code, course_data.name)
                return self._course_to_response(course)

        @self.app.get("/courses/{course_id}", response_model=CourseResponse)
        def get_course(course_id: str):
            with self._service.locked():
                return self._course_to_response(self._service.get_course(course_id))

        @self.app.put("/courses/{course_id}", response_model=CourseResponse)
        def update_course(course_id: str, course_data: CourseUpdate):
            with self._service.locked():
                course = self._service.update_course(course_id, code=course_data.code, name=course_data.name)
                return self._course_to_response(course)

        @self.app.delete("/courses/{course_id}", response_model=CourseResponse)
        def delete_course(course_id: str):
            with self._service.locked():
                return self._course_to_response(self._service.remove_course(course_id))

        @self.app.get("/courses/{course_id}/totals", response_model=TotalsResponse)
        def get_totals(course_id: str):
            return TotalsResponse(**self._service.get_totals(course_id).to_dict())

        # Mark endpoints
        @self.app.post("/courses/{course_id}/marks", response_model=MarkResponse,
                       status_code=status.HTTP_201_CREATED)
        def create_mark(course_id: str, mark_data: Optional[MarkCreate] = None):
            """Add a mark; without a body a random one is seeded."""
            with self._service.locked():
                if mark_data is None:
                    mark = self._service.add_random_mark(course_id)
                else:
                    mark = self._service.add_mark(
                        course_id, mark_data.name, mark_data.score,
                        mark_data.max_score, mark_data.weightage
                    )
                return self._mark_to_response(mark)

        @self.app.get("/courses/{course_id}/marks/{mark_id}", response_model=MarkResponse)
        def get_mark(course_id: str, mark_id: str):
            with self._service.locked():
                return self._mark_to_response(self._service.get_mark(course_id, mark_id))

        @self.app.put("/courses/{course_id}/marks/{mark_id}", response_model=MarkResponse)
        def update_mark(course_id: str, mark_id: str, mark_data: MarkUpdate):
            with self._service.locked():
                mark = self._service.update_mark(
                    course_id, mark_id,
                    name=mark_data.name,
                    score=mark_data.score,
                    max_score=mark_data.max_score,
                    weightage=mark_data.weightage
                )
                return self._mark_to_response(mark)

        @self.app.delete("/courses/{course_id}/marks/{mark_id}", response_model=MarkResponse)
        def delete_mark(course_id: str, mark_id: str):
            with self._service.locked():
                return self._mark_to_response(self._service.remove_mark(course_id, mark_id))

        # Statistics endpoints
        @self.app.get("/statistics", response_model=StatisticsResponse)
        def get_statistics():
            """Get catalog statistics."""
            return StatisticsResponse(
                success=True,
                message="Statistics retrieved successfully",
                statistics=self._service.get_statistics()
            )

    def _mark_to_response(self, mark: Mark) -> MarkResponse:
        """Convert Mark entity to response model."""
        return MarkResponse(
            id=mark.id,
            name=mark.name,
            score=mark.score,
            max_score=mark.max_score,
            percentage=mark.percentage,
            weightage=mark.weightage,
            weighted=mark.weighted,
            created_at=mark.created_at,
            updated_at=mark.updated_at,
            version=mark.version
        )

    def _course_to_response(self, course: Course) -> CourseResponse:
        """Convert Course entity to response model."""
        return CourseResponse(
            id=course.id,
            code=course.code,
            name=course.name,
            marks=[self._mark_to_response(mark) for mark in course.marks],
            total_weightage=course.total_weightage,
            total_weighted=course.total_weighted,
            created_at=course.created_at,
            updated_at=course.updated_at,
            version=course.version
        )
