import asyncio
import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional
from zoneinfo import ZoneInfo

import typer

from collector.api.client import CollectorBookingsClient
from collector.api.errors import (
    ApiRequestError,
    get_api_error_message,
    get_missing_patient_ids,
)
from collector.bookings.currency import format_aed_amount
from collector.commons.config import load_settings
from collector.commons.logger import setup_logging
from collector.services.bookings_service import BookingsService

app = typer.Typer(add_completion=False, help="Collector Bookings client")


def _bootstrap():
    settings = load_settings()
    logger = setup_logging(settings.paths.logs_root, os.getenv("LOG_LEVEL", "INFO"))
    client = CollectorBookingsClient(
        settings.api.base_url, settings.collector.party_id, timeout=settings.api.timeout_sec
    )
    return settings, logger, client


def _fail(error: ApiRequestError) -> None:
    typer.echo(get_api_error_message(error), err=True)
    missing = get_missing_patient_ids(error)
    if missing:
        typer.echo(f"Missing national ID: {', '.join(missing)}", err=True)
    if error.error_id:
        typer.echo(f"Error ID: {error.error_id}", err=True)
    raise typer.Exit(code=1)


@app.command()
def bookings(
    bucket: str = typer.Option("current", help="current | past"),
    limit: Optional[int] = typer.Option(None, help="1..200"),
    before_start_at: Optional[str] = typer.Option(None, help="cursor de paginacion"),
    status: Optional[List[str]] = typer.Option(None, help="CREATED, ACTIVE, FULFILLED, CANCELLED"),
):
    """Lista las reservas del colector con sus contadores."""
    settings, logger, client = _bootstrap()
    logger.log("INFO", f"Consultando reservas '{bucket}' de {settings.collector.party_id}")
    svc = BookingsService(client, ZoneInfo(settings.display.timezone))

    async def _amain():
        async with client:
            return await svc.load(bucket, limit, before_start_at, status)

    try:
        page = asyncio.run(_amain())
    except ApiRequestError as err:
        _fail(err)
        return

    for card in page.cards:
        typer.echo(f"{card.title}: {card.value} ({card.trend})")
    for row in page.rows:
        typer.echo(
            f"{row.booking_ref:<14} {row.date:<12} {row.slot:<12} {row.status:<13}"
            f" {row.patient_name:<24} {row.test_name:<10} {format_aed_amount(row.amount)}"
        )
    if page.next_before_start_at:
        typer.echo(f"next_before_start_at={page.next_before_start_at}")


@app.command()
def update_patients(
    booking_id: int = typer.Argument(..., help="booking_id numerico"),
    updates_file: Path = typer.Argument(..., exists=True, help="JSON con la lista de updates"),
):
    """Actualiza los pacientes de una reserva desde un archivo JSON."""
    settings, logger, client = _bootstrap()
    updates = json.loads(updates_file.read_text(encoding="utf-8"))
    if isinstance(updates, dict):
        updates = updates.get("updates", [])

    async def _amain():
        async with client:
            return await client.update_booking_patients(booking_id, updates)

    try:
        result = asyncio.run(_amain())
    except ApiRequestError as err:
        _fail(err)
        return

    logger.log("INFO", f"Reserva {result.booking_id}: {len(result.patients)} paciente(s) actualizados")
    for remap in result.remap or []:
        typer.echo(f"{remap.from_patient_id} -> {remap.to_patient_id}")


@app.command()
def mark_collected(
    booking_id: int = typer.Argument(..., help="booking_id numerico"),
    event_id: Optional[str] = typer.Option(None, help="id del evento"),
    collected_at: Optional[str] = typer.Option(None, help="ISO-8601, por defecto ahora"),
):
    """Marca la muestra de una reserva como recolectada."""
    settings, logger, client = _bootstrap()
    collected_at = collected_at or datetime.now(timezone.utc).isoformat()

    async def _amain():
        async with client:
            return await client.mark_sample_collected(
                booking_id, event_id=event_id, collected_at=collected_at
            )

    try:
        result = asyncio.run(_amain())
    except ApiRequestError as err:
        _fail(err)
        return

    logger.log("INFO", f"Muestra recolectada: reserva {result.booking_id} -> {result.status}")
    typer.echo(f"{result.status} {result.booking_status or ''} {result.workflow_run_id or ''}".strip())


if __name__ == "__main__":
    app()
