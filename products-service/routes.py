from typing import Annotated, List, Union
from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.engine import Engine
from repository import ProductRepository
from schemas import (
    ErrorResponse,
    ProductCreate,
    ProductFilter,
    ProductResponse,
    ProductUpdate,
    parse_product_id,
)
from services import ProductService

router = APIRouter(tags=["products"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def get_engine(request: Request) -> Engine:
    return request.app.state.engine


def get_repository(engine: Engine = Depends(get_engine)) -> ProductRepository:
    return ProductRepository(engine)


def get_product_service(repository: ProductRepository = Depends(get_repository)) -> ProductService:
    return ProductService(repository)


def product_id_param(product_id: str) -> Union[int, float]:
    """Paramètre :id validé avant le corps de la requête."""
    return parse_product_id(product_id)


@router.get("/", response_model=List[ProductResponse], responses=ERROR_RESPONSES)
def list_products(
    filters: Annotated[ProductFilter, Query()],
    service: ProductService = Depends(get_product_service),
):
    return service.list(filters)


@router.post("/", status_code=201, response_class=Response, responses=ERROR_RESPONSES)
def create_product(product: ProductCreate, service: ProductService = Depends(get_product_service)):
    service.create(product)
    return Response(status_code=201)


@router.put("/{product_id}", response_class=Response, responses=ERROR_RESPONSES)
def update_product(
    target_id: Annotated[Union[int, float], Depends(product_id_param)],
    product: ProductUpdate,
    service: ProductService = Depends(get_product_service),
):
    service.update(target_id, product)
    return Response()


@router.delete("/{product_id}", response_class=Response, responses=ERROR_RESPONSES)
def delete_product(
    target_id: Annotated[Union[int, float], Depends(product_id_param)],
    service: ProductService = Depends(get_product_service),
):
    service.remove(target_id)
    return Response()
