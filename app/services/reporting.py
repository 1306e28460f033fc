from httpx import AsyncClient
from app.config import settings
from structlog import get_logger
from reportlab.lib.pagesizes import A4
from reportlab.platypus import SimpleDocTemplate, Table
from app.services.filters import FILTER_OPTIONS
from app.services.listings import fetch_all_listings, get_redis_client, normalize_listing
import pandas as pd
import base64
import io
import json

logger = get_logger()

_supabase_base = settings.SUPABASE_URL.rstrip("/")

REPORT_FORMATS = ("csv", "pdf")

REPORT_TITLES = {"id": "Laporan Properti", "en": "Listing Report"}

def summarize_listings(listings: list[dict], lang: str = "en") -> dict:
    """Counts per status, type and purpose plus engagement totals."""
    df = pd.DataFrame(listings, columns=["status", "type", "purpose", "views", "inquiries"])
    labels = lang == "id"

    def counts(column: str) -> dict:
        series = df[column].dropna().astype(str).value_counts()
        if labels:
            names = FILTER_OPTIONS[column]
            return {names.get(k, k): int(v) for k, v in series.items()}
        return {k: int(v) for k, v in series.items()}

    return {
        "title": REPORT_TITLES.get(lang, REPORT_TITLES["en"]),
        "total_listings": int(len(df)),
        "total_views": int(pd.to_numeric(df["views"], errors="coerce").fillna(0).sum()),
        "total_inquiries": int(pd.to_numeric(df["inquiries"], errors="coerce").fillna(0).sum()),
        "by_status": counts("status"),
        "by_type": counts("type"),
        "by_purpose": counts("purpose"),
    }

async def generate_listing_report(lang: str = "en") -> dict:
    redis = await get_redis_client()
    cache_key = f"report:listings:{lang}"
    cached = await redis.get(cache_key)
    if cached:
        return json.loads(cached)

    items = [listing for listing in (normalize_listing(i) for i in await fetch_all_listings()) if listing]
    report = summarize_listings(items, lang)
    await redis.setex(cache_key, 3600, json.dumps(report))
    logger.info("Generated listing report", lang=lang, total_listings=report["total_listings"])
    return report

def _report_rows(report: dict) -> list[list]:
    rows = [["metric", "value"]]
    for key in ("total_listings", "total_views", "total_inquiries"):
        rows.append([key, report[key]])
    for group in ("by_status", "by_type", "by_purpose"):
        for name, count in report[group].items():
            rows.append([f"{group}.{name}", count])
    return rows

def render_csv(report: dict) -> bytes:
    rows = _report_rows(report)
    df = pd.DataFrame(rows[1:], columns=rows[0])
    csv_buffer = io.StringIO()
    df.to_csv(csv_buffer, index=False)
    return csv_buffer.getvalue().encode("utf-8")

def render_pdf(report: dict) -> bytes:
    pdf_buffer = io.BytesIO()
    doc = SimpleDocTemplate(pdf_buffer, pagesize=A4, title=report["title"])
    doc.build([Table(_report_rows(report))])
    return pdf_buffer.getvalue()

async def export_report(fmt: str, lang: str = "en") -> str:
    if fmt not in REPORT_FORMATS:
        raise ValueError(f"Unsupported report format: {fmt}")
    report = await generate_listing_report(lang)
    content = render_csv(report) if fmt == "csv" else render_pdf(report)
    content_type = "text/csv" if fmt == "csv" else "application/pdf"
    object_path = f"reports/listings_{lang}.{fmt}"

    async with AsyncClient(timeout=20.0) as client:
        response = await client.post(
            f"{_supabase_base}/storage/v1/object/{object_path}",
            content=content,
            headers={
                "Authorization": f"Bearer {settings.SUPABASE_KEY}",
                "apikey": settings.SUPABASE_KEY,
                "Content-Type": content_type,
                "x-upsert": "true",
            },
        )
    if 200 <= response.status_code < 300:
        body = response.json()
        # Try common keys; if absent, assume a public bucket
        file_url = body.get("url") or body.get("publicURL") or body.get("Key")
        if not file_url:
            file_url = f"{_supabase_base}/storage/v1/object/public/{object_path}"
        return file_url
    # Fallback: return data URI so client can still download
    logger.warning("Report upload failed", status_code=response.status_code, format=fmt)
    b64 = base64.b64encode(content).decode("ascii")
    return f"data:{content_type};base64,{b64}"
