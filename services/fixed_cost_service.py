"""
services/fixed_cost_service.py
-------------------------------
Fixed weekly costs that are ticked off rather than itemized:
fuel refills and the internet bill.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from config import GAS_SHORT_INTERVAL_DAYS, WIFI_CYCLE_DAYS
from models.filter import FilterState
from models.logs import GasLog
from models.session import BudgetSession
from utils.dates import days_between, describe_filter, format_datetime, is_in_filter_range, same_day
from utils.ids import new_id
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class GasInterval:
    days: int
    is_shorter: bool


# ── Fuel ──────────────────────────────────────────────────

def is_gas_filled_today(history: list[GasLog], now: datetime) -> bool:
    return bool(history) and same_day(history[-1].date, now)


def toggle_gas(history: list[GasLog], now: datetime) -> list[GasLog]:
    """Untick today's refill if there is one, otherwise record a refill now."""
    if is_gas_filled_today(history, now):
        return [log for log in history if not same_day(log.date, now)]
    return [*history, GasLog(id=new_id(), date=now)]


def gas_interval(history: list[GasLog], short_days: int = GAS_SHORT_INTERVAL_DAYS) -> Optional[GasInterval]:
    """Days between the last two refills; None with fewer than two."""
    if len(history) < 2:
        return None
    days = days_between(history[-2].date, history[-1].date)
    return GasInterval(days=days, is_shorter=days < short_days)


def filtered_gas_history(history: list[GasLog], flt: FilterState) -> list[GasLog]:
    return [log for log in history if is_in_filter_range(log.date, flt)]


# ── Internet ──────────────────────────────────────────────

def is_wifi_paid_recently(last_payment: Optional[datetime], now: datetime, cycle_days: int = WIFI_CYCLE_DAYS) -> bool:
    if last_payment is None:
        return False
    return days_between(last_payment, now) < cycle_days


def wifi_warning(last_payment: Optional[datetime], now: datetime, cycle_days: int = WIFI_CYCLE_DAYS) -> bool:
    """True from the last day of the cycle on: the bill is about to be due again."""
    if last_payment is None:
        return False
    return days_between(last_payment, now) >= cycle_days - 1


def toggle_wifi(last_payment: Optional[datetime], now: datetime) -> Optional[datetime]:
    """Clear a recent payment, or mark the bill paid now."""
    if is_wifi_paid_recently(last_payment, now):
        return None
    return now


class FixedCostService:
    """Fuel and internet ticks of one session, with chat replies."""

    def __init__(self, session: BudgetSession):
        self.session = session

    def toggle_gas(self, now: datetime) -> str:
        was_filled = is_gas_filled_today(self.session.gas_history, now)
        self.session.gas_history = toggle_gas(self.session.gas_history, now)
        if was_filled:
            logger.info("Removed today's fuel refill")
            return "↩️ Đã bỏ đánh dấu đổ xăng hôm nay."

        logger.info("Recorded fuel refill")
        msg = "⛽ Đã ghi nhận đổ xăng hôm nay."
        interval = gas_interval(self.session.gas_history)
        if interval:
            msg += f"\nLần trước cách đây {interval.days} ngày."
            if interval.is_shorter:
                msg += "\n⚠️ Hết xăng nhanh hơn bình thường!"
        return msg

    def toggle_wifi(self, now: datetime) -> str:
        self.session.last_wifi_payment = toggle_wifi(self.session.last_wifi_payment, now)
        if self.session.last_wifi_payment is None:
            return "↩️ Đã bỏ đánh dấu đóng tiền wifi."
        return "📶 Đã ghi nhận đóng tiền wifi tuần này."

    def get_status(self, now: datetime) -> str:
        """Fuel history for the active filter plus the internet bill state."""
        session = self.session
        logs = filtered_gas_history(session.gas_history, session.filter)

        lines = [f"⛽ *Lịch sử đổ xăng* - {describe_filter(session.filter)}\n"]
        if logs:
            for log in reversed(logs):
                lines.append(f"  • {format_datetime(log.date)}")
        else:
            lines.append("  Chưa có lần đổ xăng nào.")

        if is_wifi_paid_recently(session.last_wifi_payment, now):
            lines.append(f"\n📶 Wifi: đã đóng ({format_datetime(session.last_wifi_payment)})")
            if wifi_warning(session.last_wifi_payment, now):
                lines.append("⚠️ Sắp đến hạn đóng wifi!")
        else:
            lines.append("\n📶 Wifi: chưa đóng tuần này.")
        return "\n".join(lines)
