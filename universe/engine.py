from __future__ import annotations

from importlib import import_module
from pathlib import Path
from typing import Any, Dict

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from universe.logger import setup_logger
from universe.registry import ModuleManifest, load_modules, mount_map
from universe.settings import configure_templates

logger = structlog.get_logger(__name__)

CATEGORY_DESCRIPTIONS = {
    "Money": "Cash handling helpers for the till and the counter.",
    "Other": "Useful modules that do not fit a core category.",
}
DEFAULT_CATEGORY_DESCRIPTION = "Practical utilities for quick tasks."


def _slugify(value: str) -> str:
    return value.strip().lower().replace(" ", "-")


def build_categories(
    modules: Dict[str, ModuleManifest] | None = None,
) -> list[dict[str, Any]]:
    if modules is None:
        modules = load_modules()
    grouped: dict[str, list[ModuleManifest]] = {}
    for module in modules.values():
        if module.public:
            grouped.setdefault(module.category or "Other", []).append(module)

    categories: list[dict[str, Any]] = []
    for category, items in sorted(grouped.items(), key=lambda item: item[0].lower()):
        items.sort(key=lambda item: item.title or item.name)
        categories.append(
            {
                "name": category,
                "slug": _slugify(category),
                "description": CATEGORY_DESCRIPTIONS.get(
                    category, DEFAULT_CATEGORY_DESCRIPTION
                ),
                "modules": items,
            }
        )
    return categories


def import_attr(path: str) -> Any:
    if ":" not in path:
        raise ValueError(f"Invalid entrypoint '{path}'. Expected module:attr.")
    module_path, attr = path.split(":", 1)
    module = import_module(module_path)
    return getattr(module, attr)


def build_app() -> FastAPI:
    setup_logger()
    app = FastAPI(title="Sparky Universe")

    brand_dir = Path(__file__).parent.parent / "brand"
    if brand_dir.exists():
        app.mount("/brand", StaticFiles(directory=str(brand_dir)), name="brand")

    templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))
    configure_templates(templates)

    @app.get("/", response_class=HTMLResponse)
    def universe_index(request: Request):
        base_path = request.scope.get("root_path", "").rstrip("/")
        return templates.TemplateResponse(
            request,
            "index.html",
            {"categories": build_categories(), "base_path": base_path},
        )

    @app.get("/category/{slug}", response_class=HTMLResponse)
    def category_index(request: Request, slug: str):
        category = next(
            (item for item in build_categories() if item["slug"] == slug), None
        )
        if not category:
            raise HTTPException(status_code=404, detail="Category not found")
        base_path = request.scope.get("root_path", "").rstrip("/")
        return templates.TemplateResponse(
            request,
            "category.html",
            {"category": category, "base_path": base_path},
        )

    for mount, module in mount_map(load_modules()):
        if not module.api:
            continue
        app.mount(mount, import_attr(module.api))
        logger.info("universe.module_mounted", module=module.name, mount=mount)

    return app
