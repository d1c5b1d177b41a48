"""FastAPI приложение: меню, корзина и оформление пред-заказа."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Union

from fastapi import Depends, FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel, Field

from cafe_api import CafeAPIClient
from cart import EXTRAS, CartError, CartRegistry, CartStore, MilkType, Preparation, ProteinType
from cart import ModifierRequiredError, PriceRequiredError, SizeUnavailableError
from checkout import CheckoutDraft, CheckoutService, ServiceType, compute_totals
from menu import Category, MenuCatalog, format_price

logger = logging.getLogger(__name__)

ROOT_DIR = Path(__file__).resolve().parents[2]
STATIC_DIR = ROOT_DIR / "static"
TEMPLATES_DIR = ROOT_DIR / "templates"

SESSION_COOKIE = "cart_session"


class AddToCartIn(BaseModel):
    product_id: Union[int, str]
    size: Optional[str] = None
    quantity: int = Field(1, ge=1)
    preparation: Optional[Preparation] = None
    milk_type: Optional[MilkType] = None
    extras: List[str] = Field(default_factory=list)
    protein_type: Optional[ProteinType] = None


class QuantityIn(BaseModel):
    quantity: int


class CheckoutIn(BaseModel):
    customer_name: Optional[str] = None
    service_type: ServiceType = ServiceType.EAT_IN
    comments: Optional[str] = None


def get_cart(request: Request) -> CartStore:
    """Корзина текущей сессии (сессию выставляет middleware); заводится при добавлении."""
    registry: CartRegistry = request.app.state.carts
    return registry.get(request.state.session_id)


def view_cart(request: Request) -> CartStore:
    """Корзина сессии без регистрации: для чтения и правки уже существующих позиций."""
    registry: CartRegistry = request.app.state.carts
    return registry.peek(request.state.session_id)


def get_catalog(request: Request) -> MenuCatalog:
    return request.app.state.catalog


def get_checkout(request: Request) -> CheckoutService:
    return request.app.state.checkout


def _cart_payload(store: CartStore) -> dict:
    data = store.to_dict()
    data["checkout"] = compute_totals(store.lines).to_dict()
    return data


def _cart_error_status(exc: CartError) -> int:
    if isinstance(exc, (PriceRequiredError, ModifierRequiredError, SizeUnavailableError)):
        return 422
    return 409


def create_app(client: Optional[CafeAPIClient] = None) -> FastAPI:
    """Собрать приложение; клиент бэкенда берётся из .env, если не передан."""

    client = client or CafeAPIClient.from_env()

    app = FastAPI(title="Café - Pre-órdenes")
    app.state.client = client
    app.state.catalog = MenuCatalog(client)
    app.state.carts = CartRegistry(validator=client.validate_product)
    app.state.checkout = CheckoutService(client)

    if STATIC_DIR.exists():
        app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
    templates.env.filters["price"] = format_price

    @app.middleware("http")
    async def session_middleware(request: Request, call_next):
        session_id = request.cookies.get(SESSION_COOKIE)
        is_new = not session_id
        if is_new:
            session_id = CartRegistry.new_session_id()
        request.state.session_id = session_id
        response = await call_next(request)
        if is_new:
            response.set_cookie(SESSION_COOKIE, session_id, httponly=True, samesite="lax")
        return response

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.get("/", response_class=HTMLResponse)
    def index(
        request: Request,
        catalog: MenuCatalog = Depends(get_catalog),
        store: CartStore = Depends(view_cart),
    ):
        """Страница меню с корзиной."""
        sections = [
            (category, products)
            for category, products in catalog.by_category().items()
            if products
        ]
        return templates.TemplateResponse(
            request,
            "menu.html",
            {
                "sections": sections,
                "menu_error": catalog.error,
                "cart": store,
                "totals": compute_totals(store.lines),
                "prepared_category": Category.COLD_DRINKS,
                "preparations": list(Preparation),
                "milk_types": list(MilkType),
                "protein_types": list(ProteinType),
                "extras": list(EXTRAS.values()),
                "service_types": list(ServiceType),
            },
        )

    @app.get("/api/menu")
    def get_menu(catalog: MenuCatalog = Depends(get_catalog)):
        """Меню, разложенное по разделам."""
        grouped = catalog.by_category()
        if catalog.error:
            return JSONResponse({"error": catalog.error}, status_code=502)
        return {
            "success": True,
            "categories": [
                {
                    "id": category.value,
                    "name": category.label,
                    "products": [product.to_dict() for product in grouped[category]],
                }
                for category in Category
            ],
        }

    @app.get("/api/cart")
    def get_cart_state(store: CartStore = Depends(view_cart)):
        return _cart_payload(store)

    @app.post("/api/cart/items")
    def add_to_cart(
        body: AddToCartIn,
        catalog: MenuCatalog = Depends(get_catalog),
        store: CartStore = Depends(get_cart),
    ):
        product = catalog.get(str(body.product_id))
        if product is None:
            return JSONResponse(
                {"error": "El producto no está disponible en este momento"}, status_code=404
            )
        try:
            store.add(
                product,
                selected_size=body.size,
                quantity=body.quantity,
                preparation=body.preparation,
                milk_type=body.milk_type,
                extras=body.extras,
                protein_type=body.protein_type,
            )
        except CartError as exc:
            return JSONResponse({"error": str(exc)}, status_code=_cart_error_status(exc))
        return _cart_payload(store)

    @app.patch("/api/cart/items/{line_id}")
    def update_quantity(line_id: str, body: QuantityIn, store: CartStore = Depends(view_cart)):
        store.set_quantity(line_id, body.quantity)
        return _cart_payload(store)

    @app.delete("/api/cart/items/{line_id}")
    def remove_from_cart(line_id: str, store: CartStore = Depends(view_cart)):
        store.remove(line_id)
        return _cart_payload(store)

    @app.delete("/api/cart")
    def clear_cart(store: CartStore = Depends(view_cart)):
        store.clear()
        return _cart_payload(store)

    @app.get("/api/checkout/summary")
    def checkout_summary(store: CartStore = Depends(view_cart)):
        """Итоги для окна оформления: подытог и доплаты."""
        return compute_totals(store.lines).to_dict()

    @app.post("/api/checkout")
    def checkout(
        body: CheckoutIn,
        store: CartStore = Depends(view_cart),
        service: CheckoutService = Depends(get_checkout),
    ):
        """Создать пред-заказ; оплата на кассе."""
        draft = CheckoutDraft(
            customer_name=body.customer_name,
            service_type=body.service_type,
            comments=body.comments,
        )
        outcome = service.submit(store, draft)
        if outcome.success:
            return outcome.to_dict()
        status_code = 502 if outcome.submitted else 400
        return JSONResponse(outcome.to_dict(), status_code=status_code)

    return app


app = create_app()
