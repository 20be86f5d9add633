from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from returns.result import Failure, Result

from cart_service.core.domain.model.errors import (
    CartError,
    CustomerNotFound,
    OperationTimedOut,
    PersistenceError,
    ProductNotFound,
    ValidationError,
)
from cart_service.core.ports.inbound.cart import (
    CartProductInput,
    CartSnapshot,
    CartUseCase,
    CheckOutResult,
)
from cart_service.utils.logging import add_context, clear_context

# ---- HTTP DTOs (adapter layer) ---------------------------------------------


class CartItemIn(BaseModel):
    product_id: str = Field(min_length=1, examples=["00000000-0000-4000-8000-0000000000a1"])
    quantity: int = Field(gt=0, examples=[2])


class CartLineOut(BaseModel):
    product_id: str
    quantity: int


class CartResponse(BaseModel):
    cart_id: str
    customer_id: str
    items: list[CartLineOut]


class CheckOutResponse(BaseModel):
    purchase_id: str | None = None
    total: str | None = None
    currency: str | None = None
    issue: str | None = None


class ErrorResponse(BaseModel):
    type: str
    message: str
    details: list[dict[str, Any]] | None = None


# ---- Mapping helpers -------------------------------------------------------


def _to_cart_response(snapshot: CartSnapshot) -> CartResponse:
    return CartResponse(
        cart_id=str(snapshot.cart_id.value),
        customer_id=str(snapshot.customer_id.value),
        items=[
            CartLineOut(product_id=str(ln.product_id.value), quantity=ln.quantity)
            for ln in snapshot.lines
        ],
    )


def _to_checkout_response(result: CheckOutResult) -> CheckOutResponse:
    if result.issue is not None:
        return CheckOutResponse(issue=result.issue.value)
    return CheckOutResponse(
        purchase_id=str(result.purchase_id.value),
        total=str(result.total.amount) if result.total else None,
        currency=result.total.currency if result.total else None,
    )


def _map_error_to_http(err: CartError) -> tuple[int, ErrorResponse]:
    if isinstance(err, ValidationError):
        return 400, ErrorResponse(type=type(err).__name__, message=str(err))

    if isinstance(err, (CustomerNotFound, ProductNotFound)):
        return 404, ErrorResponse(type=type(err).__name__, message=str(err))

    if isinstance(err, OperationTimedOut):
        return 504, ErrorResponse(type=type(err).__name__, message=str(err))

    if isinstance(err, PersistenceError):
        return 500, ErrorResponse(type=type(err).__name__, message=str(err))

    return 500, ErrorResponse(type=type(err).__name__, message=str(err))


def _error_response(result: Result) -> JSONResponse:
    status, body = _map_error_to_http(result.failure())
    return JSONResponse(status_code=status, content=body.model_dump())


# ---- App factory -----------------------------------------------------------


def create_app(cart_uc: CartUseCase) -> FastAPI:
    app = FastAPI(title="cart_service")

    @app.middleware("http")
    async def bind_request_context(request: Request, call_next):
        clear_context()
        add_context(method=request.method, path=request.url.path)
        return await call_next(request)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        _: Request, exc: RequestValidationError
    ) -> JSONResponse:
        body = ErrorResponse(
            type="RequestValidationError",
            message="invalid request",
            details=[{"loc": list(e["loc"]), "msg": e["msg"]} for e in exc.errors()],
        )
        return JSONResponse(status_code=400, content=body.model_dump())

    @app.exception_handler(Exception)
    async def handle_unexpected(_: Request, exc: Exception) -> JSONResponse:
        body = ErrorResponse(type=type(exc).__name__, message="internal server error")
        return JSONResponse(status_code=500, content=body.model_dump())

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get(
        "/customers/{customer_id}/cart",
        response_model=CartResponse,
        responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    )
    def get_cart(customer_id: str) -> Any:
        result = cart_uc.get(customer_id)
        if isinstance(result, Failure):
            return _error_response(result)
        return _to_cart_response(result.unwrap())

    @app.post(
        "/customers/{customer_id}/cart/items",
        response_model=CartResponse,
        responses={
            400: {"model": ErrorResponse},
            404: {"model": ErrorResponse},
            500: {"model": ErrorResponse},
            504: {"model": ErrorResponse},
        },
    )
    def add_to_cart(customer_id: str, req: CartItemIn) -> Any:
        result = cart_uc.add(
            customer_id,
            CartProductInput(product_id=req.product_id, quantity=req.quantity),
        )
        if isinstance(result, Failure):
            return _error_response(result)
        return _to_cart_response(result.unwrap())

    @app.delete(
        "/customers/{customer_id}/cart/items/{product_id}",
        response_model=CartResponse,
        responses={
            400: {"model": ErrorResponse},
            404: {"model": ErrorResponse},
            500: {"model": ErrorResponse},
            504: {"model": ErrorResponse},
        },
    )
    def remove_from_cart(customer_id: str, product_id: str) -> Any:
        result = cart_uc.remove(customer_id, product_id)
        if isinstance(result, Failure):
            return _error_response(result)
        return _to_cart_response(result.unwrap())

    @app.post(
        "/customers/{customer_id}/cart/checkout",
        response_model=CheckOutResponse,
        responses={
            400: {"model": ErrorResponse},
            404: {"model": ErrorResponse},
            500: {"model": ErrorResponse},
            504: {"model": ErrorResponse},
        },
    )
    def check_out(customer_id: str) -> Any:
        result = cart_uc.check_out(customer_id)
        if isinstance(result, Failure):
            return _error_response(result)
        return _to_checkout_response(result.unwrap())

    return app
