"""
Book REST API routes
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from fastapi.exceptions import RequestValidationError

from book_service.config.settings import Settings, get_settings
from book_service.models.book import ENTITY_NAME, Book, BookDTO, BookPatchDTO
from book_service.models.pagination import Order, Page, Pageable
from book_service.services.book_service import BookService, get_book_service
from book_service.utils.auth import AuthConfig, AuthContext
from book_service.utils.exceptions import BadRequestAlertException, RowNotFoundError
from book_service.utils.headers import (
    create_entity_creation_alert,
    create_entity_deletion_alert,
    create_entity_update_alert,
    generate_pagination_headers,
)

router = APIRouter()
logger = logging.getLogger(__name__)


def get_pageable(
    page: int = Query(0, ge=0, description="Zero-based page index"),
    size: Optional[int] = Query(None, ge=1, description="Page size"),
    sort: List[str] = Query([], description="Sort expression: property[,asc|desc]"),
    settings: Settings = Depends(get_settings)
) -> Pageable:
    """Build a Pageable from the page, size and repeated sort query params"""
    if size is None:
        size = settings.default_page_size
    size = min(size, settings.max_page_size)

    orders = []
    for expression in sort:
        try:
            order = Order.parse(expression)
        except ValueError as e:
            raise RequestValidationError([
                {"loc": ("query", "sort"), "msg": str(e), "type": "value_error"}
            ]) from e
        if order.property not in Book.COLUMNS:
            raise RequestValidationError([
                {"loc": ("query", "sort"), "msg": f"Unknown sort property: {order.property}", "type": "value_error"}
            ])
        orders.append(order)

    return Pageable(page=page, size=size, sort=orders)


def _check_id(path_id: int, body_id) -> None:
    if body_id is None:
        raise BadRequestAlertException("Invalid id", ENTITY_NAME, "idnull")
    if path_id != body_id:
        raise BadRequestAlertException("Invalid ID", ENTITY_NAME, "idinvalid")


@router.post("/books", status_code=201, response_model=BookDTO)
async def create_book(
    book_dto: BookDTO,
    response: Response,
    service: BookService = Depends(get_book_service),
    settings: Settings = Depends(get_settings),
    _: AuthContext = Depends(AuthConfig.get_auth_dependency())
):
    """Create a new book; the payload must not carry an id"""
    logger.debug(f"REST request to save Book : {book_dto}")

    if book_dto.id is not None:
        raise BadRequestAlertException("A new book cannot already have an ID", ENTITY_NAME, "idexists")

    result = await service.save(book_dto)

    response.headers["Location"] = f"/api/books/{result.id}"
    response.headers.update(
        create_entity_creation_alert(settings.application_name, ENTITY_NAME, str(result.id))
    )
    return result


@router.put("/books/{id}", response_model=BookDTO)
async def update_book(
    id: int,
    book_dto: BookDTO,
    response: Response,
    service: BookService = Depends(get_book_service),
    settings: Settings = Depends(get_settings),
    _: AuthContext = Depends(AuthConfig.get_auth_dependency())
):
    """Replace every field of an existing book"""
    logger.debug(f"REST request to update Book : {id}, {book_dto}")

    _check_id(id, book_dto.id)

    if not await service.exists(id):
        raise BadRequestAlertException("Entity not found", ENTITY_NAME, "idnotfound")

    try:
        result = await service.update(book_dto)
    except RowNotFoundError:
        raise HTTPException(status_code=404, detail="Book not found")

    response.headers.update(
        create_entity_update_alert(settings.application_name, ENTITY_NAME, str(result.id))
    )
    return result


@router.patch("/books/{id}", response_model=BookDTO)
async def partial_update_book(
    id: int,
    book_dto: BookPatchDTO,
    response: Response,
    service: BookService = Depends(get_book_service),
    settings: Settings = Depends(get_settings),
    _: AuthContext = Depends(AuthConfig.get_auth_dependency())
):
    """
    Partially update a book

    Accepts application/json and application/merge-patch+json. Fields that
    are absent or null in the payload keep their stored value.
    """
    logger.debug(f"REST request to partial update Book partially : {id}, {book_dto}")

    _check_id(id, book_dto.id)

    if not await service.exists(id):
        raise BadRequestAlertException("Entity not found", ENTITY_NAME, "idnotfound")

    try:
        result = await service.partial_update(book_dto)
    except RowNotFoundError:
        result = None

    if result is None:
        raise HTTPException(status_code=404, detail="Book not found")

    response.headers.update(
        create_entity_update_alert(settings.application_name, ENTITY_NAME, str(result.id))
    )
    return result


@router.get("/books", response_model=List[BookDTO])
async def get_all_books(
    request: Request,
    response: Response,
    pageable: Pageable = Depends(get_pageable),
    service: BookService = Depends(get_book_service),
    _: AuthContext = Depends(AuthConfig.get_auth_dependency())
):
    """Get a page of books with X-Total-Count and Link headers"""
    logger.debug("REST request to get a page of Books")

    total = await service.count_all()
    content = [book async for book in service.find_all(pageable)]

    response.headers.update(generate_pagination_headers(request.url, Page(content, pageable, total)))
    return content


@router.get("/books/{id}", response_model=BookDTO)
async def get_book(
    id: int,
    service: BookService = Depends(get_book_service),
    _: AuthContext = Depends(AuthConfig.get_auth_dependency())
):
    """Get a book by id; 404 with an empty body if it does not exist"""
    logger.debug(f"REST request to get Book : {id}")

    book = await service.find_one(id)
    if book is None:
        return Response(status_code=404)
    return book


@router.delete("/books/{id}", status_code=204)
async def delete_book(
    id: int,
    service: BookService = Depends(get_book_service),
    settings: Settings = Depends(get_settings),
    _: AuthContext = Depends(AuthConfig.get_auth_dependency())
):
    """Delete a book; succeeds whether or not it existed"""
    logger.debug(f"REST request to delete Book : {id}")

    await service.delete(id)

    return Response(
        status_code=204,
        headers=create_entity_deletion_alert(settings.application_name, ENTITY_NAME, str(id))
    )
