"""
JSON serialization of the ledger.

The encoded form is the source of truth between sessions, so decoding is
lenient: missing fields fall back to defaults, and the camelCase layout of
the browser-cached journal (a bare list of day logs keyed by `symbols`,
`holdingUnitCount`, `totalPrice`, ...) is still accepted.
"""

import json
from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Union

from dateutil import parser as date_parser

from trade_journal.core.exceptions import LedgerFormatError
from trade_journal.core.timezone import now_eastern, parse_datetime_eastern, to_eastern
from trade_journal.domain.models import (
    DayLedger,
    Fill,
    Instrument,
    InstrumentDayEntry,
    Ledger,
    Lot,
    ProfitFigures,
)
from trade_journal.domain.models.profit import ZERO

SCHEMA_VERSION = 1

_PROFIT_FIELDS = (
    "realised_cost",
    "realised_gain",
    "unrealised_cost",
    "unrealised_gain",
    "realised_profit_raw",
    "unrealised_profit_raw",
)


# -----------------------------------------------------------------------------
# Encoding
# -----------------------------------------------------------------------------


def encode_ledger(ledger: Ledger) -> str:
    """Serialize a ledger to a JSON string."""
    payload = {
        "schema_version": SCHEMA_VERSION,
        "epoch": ledger.epoch.isoformat(),
        "applied_fingerprints": sorted(ledger.applied_fingerprints),
        "days": [_encode_day(day) if day is not None else None for day in ledger.days],
    }
    return json.dumps(payload, separators=(",", ":"))


def _encode_day(day: DayLedger) -> dict[str, Any]:
    return {
        "date": day.date.isoformat(),
        "starting_account_balance": (
            str(day.starting_account_balance) if day.starting_account_balance is not None else None
        ),
        "profit": _encode_profit(day.profit),
        "entries": {symbol: _encode_entry(entry) for symbol, entry in day.entries.items()},
    }


def _encode_entry(entry: InstrumentDayEntry) -> dict[str, Any]:
    return {
        "instrument": {
            "id": entry.instrument.id,
            "symbol": entry.instrument.symbol,
            "name": entry.instrument.name,
        },
        "buys": [_encode_execution(lot) for lot in entry.buys],
        "sells": [_encode_execution(fill) for fill in entry.sells],
        "open_quantity": str(entry.open_quantity),
        "profit": _encode_profit(entry.profit),
    }


def _encode_execution(execution: Union[Lot, Fill]) -> dict[str, Any]:
    return {
        "order_id": execution.order_id,
        "unit_price": str(execution.unit_price),
        "unit_quantity": str(execution.unit_quantity),
        "total_cost": str(execution.total_cost),
        "date": to_eastern(execution.date).isoformat(),
    }


def _encode_profit(profit: ProfitFigures) -> dict[str, str]:
    return {name: str(getattr(profit, name)) for name in _PROFIT_FIELDS}


# -----------------------------------------------------------------------------
# Decoding
# -----------------------------------------------------------------------------


def decode_ledger(text: str) -> Ledger:
    """Deserialize a ledger, tolerating older persisted shapes."""
    try:
        payload = json.loads(text)
        if isinstance(payload, list):
            # Browser cache stored the bare day list
            payload = {"days": payload}
        if not isinstance(payload, dict):
            raise LedgerFormatError(f"expected an object, got {type(payload).__name__}")

        version = payload.get("schema_version", 0)
        if version > SCHEMA_VERSION:
            raise LedgerFormatError(f"unsupported schema version {version}")

        raw_days = payload.get("days") or []
        epoch = _decode_epoch(payload.get("epoch"), raw_days)
        days = tuple(
            _decode_day(raw, epoch + timedelta(days=index)) if raw else None
            for index, raw in enumerate(raw_days)
        )
        return Ledger(
            epoch=epoch,
            days=days,
            applied_fingerprints=frozenset(payload.get("applied_fingerprints") or ()),
        )
    except LedgerFormatError:
        raise
    except (ValueError, TypeError, KeyError, AttributeError, InvalidOperation) as exc:
        raise LedgerFormatError(str(exc)) from exc


def _decode_epoch(value: Optional[str], raw_days: list[Any]) -> date:
    if value:
        return date.fromisoformat(value)
    for index, raw in enumerate(raw_days):
        if raw and raw.get("date"):
            return _parse_day(raw["date"]) - timedelta(days=index)
    return now_eastern().date().replace(month=1, day=1)


def _decode_day(raw: dict[str, Any], fallback_date: date) -> DayLedger:
    raw_entries = _pick(raw, "entries", "symbols", default={}) or {}
    balance = _pick(raw, "starting_account_balance", "startingAccountBalance")
    return DayLedger(
        date=_parse_day(raw["date"]) if raw.get("date") else fallback_date,
        entries={symbol: _decode_entry(symbol, entry) for symbol, entry in raw_entries.items()},
        starting_account_balance=_decimal(balance) if balance is not None else None,
        profit=_decode_profit(raw.get("profit", raw)),
    )


def _decode_entry(symbol: str, raw: dict[str, Any]) -> InstrumentDayEntry:
    instrument = raw.get("instrument") or {}
    return InstrumentDayEntry(
        instrument=Instrument(
            id=str(instrument.get("id", "")),
            symbol=instrument.get("symbol") or symbol,
            name=instrument.get("name", "") or "",
        ),
        buys=tuple(_decode_execution(Lot, item) for item in raw.get("buys") or []),
        sells=tuple(_decode_execution(Fill, item) for item in raw.get("sells") or []),
        open_quantity=_decimal(_pick(raw, "open_quantity", "holdingUnitCount", default=0)),
        profit=_decode_profit(raw.get("profit", raw)),
    )


def _decode_execution(cls: type, raw: dict[str, Any]) -> Any:
    unit_price = _decimal(_pick(raw, "unit_price", "unitPrice", default=0))
    unit_quantity = _decimal(_pick(raw, "unit_quantity", "unitQuantity", default=0))
    total_cost = _pick(raw, "total_cost", "totalPrice")
    return cls(
        order_id=str(_pick(raw, "order_id", "orderId", default="")),
        unit_price=unit_price,
        unit_quantity=unit_quantity,
        total_cost=abs(_decimal(total_cost)) if total_cost is not None else unit_price * unit_quantity,
        date=parse_datetime_eastern(raw["date"]),
    )


def _decode_profit(raw: dict[str, Any]) -> ProfitFigures:
    realised_cost = _decimal(_pick(raw, "realised_cost", "realisedCost", default=0))
    unrealised_cost = _decimal(_pick(raw, "unrealised_cost", "unrealisedCost", default=0))
    realised_raw = _decimal(_pick(raw, "realised_profit_raw", "realisedProfitRaw", default=0))
    unrealised_raw = _decimal(_pick(raw, "unrealised_profit_raw", "unrealisedProfitRaw", default=0))
    realised_gain = raw.get("realised_gain")
    unrealised_gain = raw.get("unrealised_gain")
    return ProfitFigures(
        realised_cost=realised_cost,
        realised_gain=(
            _decimal(realised_gain) if realised_gain is not None else realised_cost + realised_raw
        ),
        unrealised_cost=unrealised_cost,
        unrealised_gain=(
            _decimal(unrealised_gain) if unrealised_gain is not None
            else (unrealised_cost + unrealised_raw if unrealised_raw else ZERO)
        ),
        realised_profit_raw=realised_raw,
        unrealised_profit_raw=unrealised_raw,
    )


def _pick(raw: dict[str, Any], *keys: str, default: Any = None) -> Any:
    """First present key among current and legacy names."""
    for key in keys:
        if key in raw and raw[key] is not None:
            return raw[key]
    return default


def _decimal(value: Any) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _parse_day(value: str) -> date:
    # Legacy day logs stored a local start-of-day timestamp; keep its calendar date
    parsed = date_parser.parse(value)
    return parsed.date() if isinstance(parsed, datetime) else parsed
