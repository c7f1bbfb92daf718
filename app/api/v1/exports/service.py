"""
CSV / XLSX exports of ambassadors, referrals and payouts.

Each export is a fixed list of columns; rows come from a column select so the
same query feeds both writers.
"""

import csv
import io
from datetime import datetime
from decimal import Decimal
from typing import Any, List, Sequence, Tuple

from openpyxl import Workbook
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ValidationError
from app.core.logging_config import get_logger
from app.core.models import Ambassador, Payout, Referral

logger = get_logger(__name__)

CSV_MEDIA_TYPE = "text/csv"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
FORMATS = ("csv", "xlsx")

AMBASSADOR_COLUMNS = (
    "name",
    "email",
    "phone",
    "referral_code",
    "total_referrals",
    "total_points_earned",
    "points_balance",
    "status",
    "joined_at",
)
REFERRAL_COLUMNS = (
    "student_name",
    "student_email",
    "student_id",
    "ambassador_name",
    "ambassador_code",
    "subscription_plan",
    "subscription_price",
    "points_awarded",
    "status",
    "registered_at",
)
PAYOUT_COLUMNS = (
    "ambassador_name",
    "amount",
    "points_deducted",
    "payment_method",
    "phone_number",
    "status",
    "transaction_reference",
    "created_at",
    "processed_at",
)


def _cell(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    return value


def to_csv(columns: Sequence[str], rows: Sequence[Sequence[Any]]) -> bytes:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=list(columns))
    writer.writeheader()
    for row in rows:
        writer.writerow({column: _cell(value) for column, value in zip(columns, row)})
    return buffer.getvalue().encode("utf-8")


def to_xlsx(title: str, columns: Sequence[str], rows: Sequence[Sequence[Any]]) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = title
    ws.append(list(columns))
    for row in rows:
        ws.append([_cell(value) for value in row])
    bio = io.BytesIO()
    wb.save(bio)
    return bio.getvalue()


def render(name: str, fmt: str, columns: Sequence[str], rows: Sequence[Sequence[Any]]) -> Tuple[bytes, str, str]:
    """Returns (content, media type, filename)."""
    if fmt not in FORMATS:
        raise ValidationError("format must be csv or xlsx")
    logger.info("export_generated", export=name, format=fmt, rows=len(rows))
    if fmt == "xlsx":
        return to_xlsx(name, columns, rows), XLSX_MEDIA_TYPE, f"{name}.xlsx"
    return to_csv(columns, rows), CSV_MEDIA_TYPE, f"{name}.csv"


async def ambassador_rows(db: AsyncSession) -> List[tuple]:
    stmt = select(
        Ambassador.name,
        Ambassador.email,
        Ambassador.phone,
        Ambassador.referral_code,
        Ambassador.total_referrals,
        Ambassador.total_points_earned,
        Ambassador.points_balance,
        Ambassador.status,
        Ambassador.joined_at,
    ).order_by(Ambassador.created_at.desc())
    return [tuple(row) for row in (await db.execute(stmt)).all()]


async def referral_rows(db: AsyncSession) -> List[tuple]:
    stmt = (
        select(
            Referral.student_name,
            Referral.student_email,
            Referral.student_id,
            Ambassador.name,
            Referral.ambassador_code,
            Referral.subscription_plan,
            Referral.subscription_price,
            Referral.points_awarded,
            Referral.status,
            Referral.registered_at,
        )
        .outerjoin(Ambassador, Referral.ambassador_id == Ambassador.id)
        .order_by(Referral.registered_at.desc())
    )
    return [tuple(row) for row in (await db.execute(stmt)).all()]


async def payout_rows(db: AsyncSession) -> List[tuple]:
    stmt = (
        select(
            Ambassador.name,
            Payout.amount,
            Payout.points_deducted,
            Payout.payment_method,
            Payout.phone_number,
            Payout.status,
            Payout.transaction_reference,
            Payout.created_at,
            Payout.processed_at,
        )
        .select_from(Payout)
        .outerjoin(Ambassador, Payout.ambassador_id == Ambassador.id)
        .order_by(Payout.created_at.desc())
    )
    return [tuple(row) for row in (await db.execute(stmt)).all()]
