"""Product catalog endpoints."""

from fastapi import APIRouter, Depends, Query, status

from stockroom.api.dependencies import (
    get_create_product_use_case,
    get_deactivate_product_use_case,
    get_prod_store,
    get_set_reorder_point_use_case,
    get_update_product_use_case,
)
from stockroom.application.dto.requests import (
    CreateProductRequest,
    ReorderPointRequest,
    UpdateProductRequest,
)
from stockroom.application.dto.responses import (
    ErrorResponse,
    ProductListResponse,
    ProductResponse,
    ReorderPointResponse,
)
from stockroom.application.use_cases import (
    CreateProductUseCase,
    DeactivateProductUseCase,
    SetReorderPointUseCase,
    UpdateProductUseCase,
)
from stockroom.core.entities.product import ProductStatus
from stockroom.core.exceptions import NotFoundError, ProductNotFoundError
from stockroom.infrastructure.storage.sqlite import SQLiteProductStore

router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("", response_model=ProductListResponse)
async def list_products(
    category: str | None = None,
    product_status: ProductStatus | None = Query(default=None, alias="status"),
    search: str | None = None,
    active: bool = True,
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    store: SQLiteProductStore = Depends(get_prod_store),
) -> ProductListResponse:
    """List products with optional filters."""
    products = await store.list_products(
        category=category,
        status=product_status,
        search=search,
        active_only=active,
        limit=limit,
        offset=offset,
    )
    return ProductListResponse(
        products=[ProductResponse.from_entity(p) for p in products],
        count=len(products),
    )


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_product(
    product_id: int,
    store: SQLiteProductStore = Depends(get_prod_store),
) -> ProductResponse:
    """Get a product by ID."""
    product = await store.get_product(product_id)
    if product is None:
        raise ProductNotFoundError(product_id)
    return ProductResponse.from_entity(product)


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def create_product(
    request: CreateProductRequest,
    use_case: CreateProductUseCase = Depends(get_create_product_use_case),
) -> ProductResponse:
    """Create a product. Opening stock is booked as an ADJUSTMENT movement."""
    product = await use_case.execute(request)
    return ProductResponse.from_entity(product)


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_product(
    product_id: int,
    request: UpdateProductRequest,
    use_case: UpdateProductUseCase = Depends(get_update_product_use_case),
) -> ProductResponse:
    """Update product details. Stock changes go through movements."""
    product = await use_case.execute(product_id, request)
    return ProductResponse.from_entity(product)


@router.delete(
    "/{product_id}",
    response_model=ProductResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_product(
    product_id: int,
    use_case: DeactivateProductUseCase = Depends(get_deactivate_product_use_case),
) -> ProductResponse:
    """Soft-delete a product; its history is kept."""
    product = await use_case.execute(product_id)
    return ProductResponse.from_entity(product)


@router.get(
    "/{product_id}/reorder-point",
    response_model=ReorderPointResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_reorder_point(
    product_id: int,
    store: SQLiteProductStore = Depends(get_prod_store),
) -> ReorderPointResponse:
    """Get the reorder point of a product."""
    reorder_point = await store.get_reorder_point(product_id)
    if reorder_point is None:
        raise NotFoundError(
            f"No reorder point for product {product_id}",
            code="REORDER_POINT_NOT_FOUND",
            details={"product_id": product_id},
        )
    return ReorderPointResponse.from_entity(reorder_point)


@router.put(
    "/{product_id}/reorder-point",
    response_model=ReorderPointResponse,
    responses={404: {"model": ErrorResponse}},
)
async def set_reorder_point(
    product_id: int,
    request: ReorderPointRequest,
    use_case: SetReorderPointUseCase = Depends(get_set_reorder_point_use_case),
) -> ReorderPointResponse:
    """Create or replace the reorder point of a product."""
    reorder_point = await use_case.execute(product_id, request)
    return ReorderPointResponse.from_entity(reorder_point)
