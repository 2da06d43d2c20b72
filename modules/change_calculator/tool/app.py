from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

import structlog
from fastapi import FastAPI, Form, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from modules.change_calculator.core.denominations import DenominationSet, is_canonical
from modules.change_calculator.core.render import render_settlement
from modules.change_calculator.core.settle import settle
from modules.change_calculator.tool.config import ChangeSettings, load_change_settings
from universe.errors import ValidationNormalizeMiddleware
from universe.flows import resolve_flow_links
from universe.settings import configure_templates, shared_templates_dir

logger = structlog.get_logger(__name__)

app = FastAPI(title="Change Calculator")
app.add_middleware(ValidationNormalizeMiddleware)

BASE_DIR = Path(__file__).parent
ROOT_DIR = BASE_DIR.parents[2]
BRAND_DIR = ROOT_DIR / "brand"
SHARED_TEMPLATES = shared_templates_dir(ROOT_DIR)

templates = Jinja2Templates(
    directory=[str(BASE_DIR / "templates"), str(SHARED_TEMPLATES)]
)
configure_templates(templates)

if BRAND_DIR.exists():
    app.mount("/brand", StaticFiles(directory=BRAND_DIR), name="brand")

FLOW_BASE_URL = os.getenv("SPARKY_FLOW_BASE_URL")


@lru_cache(maxsize=8)
def _canonical(denominations: DenominationSet) -> bool:
    canonical = is_canonical(denominations)
    if not canonical:
        logger.warning(
            "change.denominations_not_canonical",
            denominations=list(denominations),
        )
    return canonical


def _settings() -> ChangeSettings:
    settings = load_change_settings()
    _canonical(settings.denominations)
    return settings


@app.get("/", response_class=HTMLResponse)
def index(request: Request):
    settings = _settings()
    base_path = request.url.path.rstrip("/")
    flow_links = resolve_flow_links("change_calculator", base_url=FLOW_BASE_URL)
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "flow_links": flow_links,
            "base_path": base_path,
            "currency_symbol": settings.currency_symbol,
            "denominations": list(settings.denominations),
        },
    )


@app.get("/denominations")
def denominations():
    settings = _settings()
    return {
        "currency_symbol": settings.currency_symbol,
        "denominations": list(settings.denominations),
        "canonical": _canonical(settings.denominations),
    }


@app.post("/calculate")
def calculate(
    bill_amount: str | None = Form(None),
    cash_given: str | None = Form(None),
):
    settings = _settings()
    settlement = settle(
        bill_amount,
        cash_given,
        denominations=settings.denominations,
        currency_symbol=settings.currency_symbol,
    )
    payload = render_settlement(
        settlement,
        currency_symbol=settings.currency_symbol,
        coin_threshold=settings.coin_threshold,
    )

    validation = settlement.validation
    if not validation.accepted and not validation.exact:
        logger.info(
            "change.rejected",
            reasons=[code.value for code in validation.codes],
        )
        return JSONResponse(payload, status_code=400)

    if validation.exact:
        logger.info("change.exact", bill=str(validation.bill))
    else:
        logger.info(
            "change.calculated",
            change=str(settlement.change),
            total_notes=payload["summary"]["total_notes"],
        )
    return payload
