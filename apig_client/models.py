"""
Response models for the exchange-rate API.
"""

from dataclasses import dataclass, field
from typing import Any, Dict


def _text(value: Any) -> str:
    # JSON null decodes to None, which must not become "None"
    return "" if value is None else str(value)


@dataclass
class ExchangeRateItem:
    """A single currency conversion returned by the gateway."""

    money: str = ""
    to_name: str = ""
    from_: str = ""
    exchange: str = ""
    to: str = ""
    from_name: str = ""
    updatetime: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExchangeRateItem":
        return cls(
            money=_text(data.get("money")),
            to_name=_text(data.get("to_name")),
            from_=_text(data.get("from")),
            exchange=_text(data.get("exchange")),
            to=_text(data.get("to")),
            from_name=_text(data.get("from_name")),
            updatetime=_text(data.get("updatetime")),
        )


@dataclass
class ExchangeRateQueryResult:
    """Response envelope: ``{data, msg, success, code, taskNo}``."""

    data: ExchangeRateItem = field(default_factory=ExchangeRateItem)
    msg: str = ""
    success: bool = False
    code: int = 0
    task_no: str = ""

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "ExchangeRateQueryResult":
        data = payload.get("data") or {}
        return cls(
            data=ExchangeRateItem.from_dict(data if isinstance(data, dict) else {}),
            msg=_text(payload.get("msg")),
            success=payload.get("success") is True,
            code=int(payload.get("code") or 0),
            task_no=_text(payload.get("taskNo")),
        )
