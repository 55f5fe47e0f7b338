"""
kassa/api/products.py

Purpose: Product catalog endpoints
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, status

from kassa.api.deps import get_current_user, get_product_service
from kassa.schemas.product import Product, ProductCreate, ProductUpdate
from kassa.schemas.response import MessageResponse
from kassa.services.product_service import ProductService
from kassa.utils import constants

router = APIRouter(prefix="/products", tags=["Products"])


@router.get("", response_model=List[Product])
async def list_products(
    user: Dict[str, Any] = Depends(get_current_user),
    products: ProductService = Depends(get_product_service),
) -> List[Product]:
    return await products.list_products(user["_id"])


@router.post("", response_model=Product, status_code=status.HTTP_201_CREATED)
async def create_product(
    request: ProductCreate,
    user: Dict[str, Any] = Depends(get_current_user),
    products: ProductService = Depends(get_product_service),
) -> Product:
    return await products.create_product(user["_id"], request)


@router.get("/{product_id}", response_model=Product)
async def get_product(
    product_id: str,
    user: Dict[str, Any] = Depends(get_current_user),
    products: ProductService = Depends(get_product_service),
) -> Product:
    return await products.get_product(user["_id"], product_id)


@router.put("/{product_id}", response_model=Product)
async def update_product(
    product_id: str,
    request: ProductUpdate,
    user: Dict[str, Any] = Depends(get_current_user),
    products: ProductService = Depends(get_product_service),
) -> Product:
    return await products.update_product(user["_id"], product_id, request)


@router.delete("/{product_id}", response_model=MessageResponse)
async def delete_product(
    product_id: str,
    user: Dict[str, Any] = Depends(get_current_user),
    products: ProductService = Depends(get_product_service),
) -> MessageResponse:
    await products.delete_product(user["_id"], product_id)
    return MessageResponse(message=constants.MSG_PRODUCT_DELETED)
