from __future__ import annotations

import argparse
import logging
import os
from decimal import Decimal
from typing import Literal, Sequence

from fastapi import FastAPI, HTTPException, Request
from rich.console import Console
from rich.table import Table

from nesthunt.config import get_settings
from nesthunt.core.affordability import (
    HouseholdMember,
    HouseholdSummary,
    compute_affordable_rent,
    rent_tiers,
    summarize_household,
)
from nesthunt.core.expenses import estimate_monthly_costs
from nesthunt.core.jurisdictions import (
    JurisdictionConfig,
    UnknownJurisdictionError,
    get_jurisdiction,
    list_jurisdictions,
)
from nesthunt.core.models import ExpenseRequest, HouseholdRequest, RecommendationStoreRequest
from nesthunt.core.takehome import InvalidAmountError, compute_take_home, effective_tax_rate, to_amount
from nesthunt.lifespan import build_application_lifespan
from nesthunt.preferences import Preferences, RecommendationCache, compute_preferences_hash

logger = logging.getLogger("nesthunt")


async def _announce_jurisdiction(_: FastAPI) -> None:
    settings = get_settings()
    logger.info(
        "Budget service ready; jurisdiction=%s supported=%s",
        settings.jurisdiction,
        ",".join(list_jurisdictions()),
    )


app = FastAPI(
    title="Nesthunt Budget",
    version="0.1.0",
    description="Take-home pay and rent affordability for apartment hunting households.",
    lifespan=build_application_lifespan("budget", startup_hook=_announce_jurisdiction),
)


def _resolve_jurisdiction(request: Request, code: str | None) -> JurisdictionConfig:
    if code:
        try:
            return get_jurisdiction(code)
        except UnknownJurisdictionError as exc:
            raise HTTPException(status_code=404, detail=str(exc.args[0])) from exc
    active = getattr(request.app.state, "jurisdiction", None)
    if active is not None:
        return active
    return get_settings().jurisdiction_config()


def _recommendation_cache(request: Request) -> RecommendationCache:
    cache = getattr(request.app.state, "recommendation_cache", None)
    if cache is None:
        cache = RecommendationCache()
        request.app.state.recommendation_cache = cache
    return cache


@app.get("/health")
def health(request: Request):
    settings = getattr(request.app.state, "settings", get_settings())
    active = _resolve_jurisdiction(request, None)
    return {
        "ok": True,
        "build": {
            "version": settings.build_version,
            "sha": settings.build_sha,
        },
        "jurisdiction": active.code,
        "tax_year": active.tax_year,
        "supported_jurisdictions": list_jurisdictions(),
    }


@app.get("/jurisdictions")
def jurisdictions():
    rows = []
    for code in list_jurisdictions():
        config = get_jurisdiction(code)
        rows.append(
            {
                "code": config.code,
                "name": config.name,
                "tax_year": config.tax_year,
                "currency": config.currency,
                "provincial_label": config.provincial.name,
            }
        )
    return {"jurisdictions": rows}


@app.get("/budget/take-home")
def take_home(request: Request, salary: float, jurisdiction: str | None = None):
    config = _resolve_jurisdiction(request, jurisdiction)
    try:
        result = compute_take_home(salary, config)
        effective = effective_tax_rate(result.total_tax, salary)
    except InvalidAmountError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {
        "jurisdiction": config.code,
        "annual_salary": salary,
        **result.as_dict(),
        "effective_rate": effective,
    }


@app.get("/budget/affordable-rent")
def affordable_rent(monthly: float):
    try:
        rent = compute_affordable_rent(monthly)
        tiers = rent_tiers(monthly)
    except InvalidAmountError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {"monthly_take_home": monthly, "affordable_rent": rent, "tiers": tiers}


@app.post("/budget/household")
def household(request: Request, payload: HouseholdRequest):
    config = _resolve_jurisdiction(request, payload.jurisdiction)
    settings = getattr(request.app.state, "settings", get_settings())
    budget_min = payload.budget_min if payload.budget_min is not None else settings.default_budget_min
    budget_max = payload.budget_max if payload.budget_max is not None else settings.default_budget_max
    try:
        summary = summarize_household(
            [member.to_member() for member in payload.members],
            config,
            budget_min=budget_min,
            budget_max=budget_max,
        )
    except InvalidAmountError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    logger.info(
        "Household summary: members=%s counted=%s partial=%s status=%s",
        len(summary.members),
        sum(1 for m in summary.members if m.breakdown is not None),
        summary.partial,
        summary.budget_status.value if summary.budget_status else None,
    )
    return summary


@app.post("/budget/expenses")
def expenses(payload: ExpenseRequest):
    try:
        return estimate_monthly_costs(
            payload.rent,
            payload.monthly_take_home,
            has_parking=payload.has_parking,
            overrides=payload.overrides,
        )
    except InvalidAmountError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@app.put("/recommendations")
def store_recommendations(request: Request, payload: RecommendationStoreRequest):
    digest = _recommendation_cache(request).put(payload.preferences, payload.items)
    return {"preferences_hash": digest, "stored": len(payload.items)}


@app.post("/recommendations/lookup")
def lookup_recommendations(request: Request, preferences: Preferences):
    cache = _recommendation_cache(request)
    items = cache.get(preferences)
    return {
        "preferences_hash": compute_preferences_hash(preferences),
        "stale": items is None,
        "items": list(items) if items is not None else [],
    }


ColorPreference = Literal["auto", "always", "never"]


def _get_console(pref: ColorPreference) -> Console:
    if pref == "auto" and os.getenv("NO_COLOR"):
        pref = "never"
    if pref == "never":
        return Console(no_color=True, highlight=False)
    return Console(force_terminal=pref == "always")


def _format_currency(value: int | float | Decimal) -> str:
    return f"${value:,.0f}"


def _print_household(summary: HouseholdSummary, console: Console) -> None:
    table = Table(title=f"Take-home pay ({summary.jurisdiction})", expand=False)
    for column in ("Person", "Salary", "Federal", "Provincial", "Total tax", "Rate", "Annual", "Monthly"):
        table.add_column(column)
    for row in summary.members:
        if row.breakdown is None:
            table.add_row(row.display_name, "not set", "", "", "", "", "", "")
            continue
        result = row.breakdown
        table.add_row(
            row.display_name,
            _format_currency(row.annual_salary or 0),
            _format_currency(result.federal_tax),
            _format_currency(result.provincial_tax),
            _format_currency(result.total_tax),
            f"{row.effective_rate:.1f}%",
            _format_currency(result.annual_take_home),
            _format_currency(result.monthly_take_home),
        )
    console.print(table)

    console.print(f"Combined monthly take-home: {_format_currency(summary.combined_monthly_take_home)}")
    console.print(f"Affordable rent (33%): {_format_currency(summary.affordable_rent)}")
    if summary.budget_status is not None:
        console.print(f"Budget check: {summary.budget_status.value.replace('_', ' ')}")

    if summary.tiers:
        tiers = Table(title="Rent tiers", expand=False)
        for column in ("% of take-home", "Max rent", "Guidance"):
            tiers.add_column(column)
        for tier in summary.tiers:
            style = "bold" if tier.recommended else None
            tiers.add_row(f"{tier.percent}%", _format_currency(tier.max_rent), tier.label, style=style)
        console.print(tiers)


def _amount_arg(value: str) -> Decimal:
    try:
        return to_amount(value)
    except InvalidAmountError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="nesthunt",
        description="Estimate take-home pay and affordable rent for a household.",
    )
    parser.add_argument("salaries", nargs="+", type=_amount_arg, help="Annual salary for each person")
    parser.add_argument(
        "--jurisdiction",
        default=None,
        help=f"Tax jurisdiction code ({', '.join(list_jurisdictions())})",
    )
    parser.add_argument("--budget-max", type=_amount_arg, default=None, help="Upper end of your rent budget")
    parser.add_argument("--color", choices=("auto", "always", "never"), default="auto")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    console = _get_console(args.color)
    settings = get_settings()
    try:
        config = get_jurisdiction(args.jurisdiction or settings.jurisdiction)
    except UnknownJurisdictionError as exc:
        console.print(f"ERROR: {exc.args[0]}")
        return 2
    members = [
        HouseholdMember(f"p{index}", f"Person {index}", salary)
        for index, salary in enumerate(args.salaries, start=1)
    ]
    budget_max = args.budget_max if args.budget_max is not None else settings.default_budget_max
    try:
        summary = summarize_household(members, config, budget_max=budget_max)
    except InvalidAmountError as exc:
        console.print(f"ERROR: {exc}")
        return 2
    _print_household(summary, console)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
