"""
Find and fix client rows whose stored quotation_amount is missing or invalid.

Reads the raw column (bypassing the MonetaryAmount type) so rows written by other
tools are seen as they are stored: NULL, NaN, or text. Invalid values are rewritten
with the normalized amount.

Run with: python -m app.scripts.repair_quotation_amounts [--dry-run] [--client-id ID]
"""
import argparse
import asyncio
import logging
import math
import sys
from dataclasses import dataclass, field
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import Uuid, bindparam, text
from sqlalchemy.exc import SQLAlchemyError

from app.core.database import engine
from app.core.money import is_normalized_amount, normalize_amount

logger = logging.getLogger(__name__)


@dataclass
class RepairReport:
    checked: int = 0
    missing: int = 0
    invalid: int = 0
    ok: int = 0
    fixed: list[tuple[str, Any, float]] = field(default_factory=list)


def classify_raw_amount(raw: Any) -> str:
    """'missing', 'invalid' or 'ok' for a value as stored in the column."""
    if raw is None:
        return "missing"
    if isinstance(raw, int) and not isinstance(raw, bool):
        return "ok"
    if not is_normalized_amount(raw):
        return "invalid"
    return "ok"


async def repair_quotation_amounts(
    db_engine=None,
    dry_run: bool = False,
    client_id: Optional[UUID | str] = None,
) -> RepairReport:
    db_engine = db_engine or engine
    report = RepairReport()
    query = text("SELECT id, company_name, quotation_amount FROM clients")
    params = {}
    if client_id:
        query = text("SELECT id, company_name, quotation_amount FROM clients WHERE id = :client_id").bindparams(
            bindparam("client_id", type_=Uuid(as_uuid=True))
        )
        params["client_id"] = UUID(str(client_id))

    async with db_engine.connect() as conn:
        rows = (await conn.execute(query, params)).all()
        for row_id, company_name, raw in rows:
            report.checked += 1
            status = classify_raw_amount(raw)
            if status == "ok":
                report.ok += 1
                continue
            if status == "missing":
                report.missing += 1
            else:
                report.invalid += 1
            amount = normalize_amount(raw)
            report.fixed.append((str(row_id), raw, amount))
            logger.info("Client %s (%s): quotation_amount %r -> %s", company_name, row_id, raw, amount)
            if not dry_run:
                await conn.execute(
                    text("UPDATE clients SET quotation_amount = :amount WHERE id = :id"),
                    {"amount": amount, "id": row_id},
                )
        if not dry_run:
            await conn.commit()

    return report


def _print_report(report: RepairReport, dry_run: bool) -> None:
    print("SUMMARY:")
    print(f"Total clients checked: {report.checked}")
    print(f"Clients missing quotation_amount: {report.missing}")
    print(f"Clients with invalid quotation_amount: {report.invalid}")
    print(f"Clients with valid quotation_amount: {report.ok}")
    verb = "Would fix" if dry_run else "Fixed"
    for row_id, raw, amount in report.fixed:
        shown = "NaN" if isinstance(raw, float) and math.isnan(raw) else repr(raw)
        print(f"{verb} {row_id}: {shown} -> {amount}")


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Repair missing or invalid client quotation amounts.")
    parser.add_argument("--dry-run", action="store_true", help="Report what would change without writing")
    parser.add_argument("--client-id", type=UUID, help="Only check this client id")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)
    try:
        report = asyncio.run(repair_quotation_amounts(dry_run=args.dry_run, client_id=args.client_id))
    except SQLAlchemyError as e:
        logger.error("Repair failed: %s", e)
        return 1
    _print_report(report, args.dry_run)
    return 0


if __name__ == "__main__":
    sys.exit(main())
