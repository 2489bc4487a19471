"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...config import settings

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Liveness check with no collaborator calls."""
    return {"status": "ok"}


@router.get("/health/geocoder", status_code=status.HTTP_200_OK)
async def health_geocoder() -> dict:
    """Resolve a well-known address through the geocoder."""
    from ...services.distance.geocoder import check_health

    return {"service": "geocoder", "healthy": await check_health()}


@router.get("/health/database", status_code=status.HTTP_200_OK)
def check_database() -> dict:
    """Report where quotes are stored and, for Supabase, whether it answers."""
    from ...db.supabase import get_supabase_client

    supabase = get_supabase_client()
    if not supabase:
        return {
            "backend": "local",
            "records_root": str(settings.data_root / "records"),
            "message": "Supabase not configured (QUOTE_SUPABASE_URL / QUOTE_SUPABASE_KEY); using local JSON records.",
        }

    try:
        quotes = supabase.table("quotes").select("quote_id", count="exact").limit(1).execute()
        invoices = supabase.table("invoices").select("invoice_id", count="exact").limit(1).execute()
    except Exception as exc:
        return {"backend": "supabase", "connected": False, "error": str(exc)}
    return {
        "backend": "supabase",
        "connected": True,
        "quotes_count": quotes.count or 0,
        "invoices_count": invoices.count or 0,
    }
