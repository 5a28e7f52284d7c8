from contextlib import asynccontextmanager
from http import HTTPStatus
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from task_service import schemas
from task_service.config import Settings, get_settings
from task_service.crud import TaskStore
from task_service.database import Database, get_db
from task_service.exceptions import DuplicateKeyError, TaskValidationError
from task_service.logger import configure_logging, logger

TASK_NOT_FOUND = "Task does not exist"
TASK_ALREADY_EXISTS = "Task already exists"


def error_response(status_code: int, message, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "statusCode": status_code,
            "message": message,
            "error": HTTPStatus(status_code).phrase,
        },
        headers=headers,
    )


def get_task_store(db: Session = Depends(get_db)) -> TaskStore:
    """Task store dependency, bound to the request's session"""
    return TaskStore(db)


def task_not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=TASK_NOT_FOUND)


def task_already_exists() -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=TASK_ALREADY_EXISTS)


# Task endpoints

def list_tasks(store: TaskStore = Depends(get_task_store)):
    """Get all tasks"""
    return store.list_all()


def read_task(task_id: str, store: TaskStore = Depends(get_task_store)):
    """Get a specific task by ID"""
    db_task = store.get_by_id(task_id)
    if db_task is None:
        raise task_not_found()
    return db_task


def create_task(task: schemas.TaskCreate, store: TaskStore = Depends(get_task_store)):
    """Create a new task"""
    try:
        return store.create(task)
    except DuplicateKeyError:
        raise task_already_exists()


def update_task(
        task_id: str,
        task: schemas.TaskUpdate,
        store: TaskStore = Depends(get_task_store)
):
    """Update the supplied fields of a task"""
    try:
        db_task = store.update_by_id(task_id, task)
    except DuplicateKeyError:
        raise task_already_exists()
    if db_task is None:
        raise task_not_found()
    return db_task


def delete_task(task_id: str, store: TaskStore = Depends(get_task_store)):
    """Delete a task"""
    if store.delete_by_id(task_id) is None:
        raise task_not_found()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def build_task_router() -> APIRouter:
    router = APIRouter(prefix="/tasks", tags=["Tasks"])
    not_found = {404: {"model": schemas.ErrorResponse, "description": TASK_NOT_FOUND}}
    conflict = {409: {"model": schemas.ErrorResponse, "description": TASK_ALREADY_EXISTS}}
    invalid = {400: {"model": schemas.ErrorResponse, "description": "Invalid request body"}}

    router.add_api_route(
        "", list_tasks, methods=["GET"],
        response_model=List[schemas.Task], summary="Get all tasks",
    )
    router.add_api_route(
        "/{task_id}", read_task, methods=["GET"],
        response_model=schemas.Task, summary="Get a task by ID", responses=not_found,
    )
    router.add_api_route(
        "", create_task, methods=["POST"],
        response_model=schemas.Task, status_code=status.HTTP_201_CREATED,
        summary="Create a new task", responses={**conflict, **invalid},
    )
    router.add_api_route(
        "/{task_id}", update_task, methods=["PUT"],
        response_model=schemas.Task, summary="Update a task by ID",
        responses={**not_found, **conflict, **invalid},
    )
    router.add_api_route(
        "/{task_id}", delete_task, methods=["DELETE"],
        status_code=status.HTTP_204_NO_CONTENT, response_class=Response,
        summary="Delete a task by ID", responses=not_found,
    )
    return router


# Health and root endpoints

def read_root(request: Request):
    """Root endpoint"""
    settings = request.app.state.settings
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.version,
        "docs": settings.docs_url,
    }


def health_check(request: Request):
    """Basic health check"""
    return {"status": "healthy", "service": request.app.state.settings.app_name}


def readiness_check(request: Request, db: Session = Depends(get_db)):
    """Check if service is ready (including database)"""
    try:
        db.execute(text("SELECT 1"))
        return {
            "status": "ready",
            "service": request.app.state.settings.app_name,
            "database": "connected"
        }
    except SQLAlchemyError as e:
        logger.error(f"Readiness check failed: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not ready"
        )


# Exception handlers

async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, exc.detail, getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"] if part != "body")
        messages.append(f"{location}: {error['msg']}" if location else error["msg"])
    return error_response(status.HTTP_400_BAD_REQUEST, messages)


async def task_validation_exception_handler(request: Request, exc: TaskValidationError):
    return error_response(status.HTTP_400_BAD_REQUEST, [str(exc)])


async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database error: {str(exc)}")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


async def general_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unexpected error: {str(exc)}")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle startup and shutdown events"""
    settings = app.state.settings
    logger.info(f"Starting {settings.app_name}")
    try:
        app.state.database.init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize database: {str(e)}")
        raise

    yield

    logger.info(f"Shutting down {settings.app_name}")
    app.state.database.dispose()


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """Build the application with its own database handle"""
    settings = settings or get_settings()
    configure_logging(settings)
    database = database or Database(settings.database_url, echo=settings.debug)

    app = FastAPI(
        title=settings.app_name,
        version=settings.version,
        description="API for managing tasks",
        docs_url=settings.docs_url,
        redoc_url=None,
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.database = database

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_credentials,
        allow_methods=settings.cors_methods,
        allow_headers=settings.cors_headers,
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(TaskValidationError, task_validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.add_api_route("/", read_root, methods=["GET"], tags=["Root"])
    app.add_api_route("/health", health_check, methods=["GET"], tags=["Health"])
    app.add_api_route("/health/ready", readiness_check, methods=["GET"], tags=["Health"])
    app.include_router(build_task_router())

    return app
