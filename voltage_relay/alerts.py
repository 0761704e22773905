from __future__ import annotations

# Battery voltage alerting.
#
# This module is pure logic (no MQTT), so it is easy to unit test. The
# dispatcher feeds it decoded text and publishes whatever it returns.
#
# Hysteresis: once a "low" alert has gone out, further low readings stay quiet
# until a reading above the threshold sends "good" and re-arms the alert.
# A reading exactly equal to the threshold changes nothing.

import logging
import math
from dataclasses import dataclass
from decimal import Decimal

logger = logging.getLogger(__name__)

DEFAULT_WARNING_VOLTAGE = 10.5


@dataclass
class SessionState:
    """In-memory state for the lifetime of the process."""

    last_voltage: float = 0.0
    warning_threshold: float = DEFAULT_WARNING_VOLTAGE
    warning_active: bool = False


def parse_reading(text: str) -> float | None:
    """Parse a telemetry payload, returning None if it is not a number.

    Stricter than `float()`: padding and digit separators such as "1_0" are
    rejected.
    """
    if text != text.strip() or "_" in text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def format_voltage(value: float) -> str:
    """Render a reading the way it appears in chat.

    Integral values drop the fraction (9.0 -> "9") and small or large values are
    written out in full rather than in exponent form (1e-07 -> "0.0000001").
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value.is_integer():
        return str(int(value))
    return format(Decimal(repr(value)), "f")


class AlertStateMachine:
    """Owns the session state and decides which messages to emit."""

    def __init__(self, state: SessionState | None = None) -> None:
        self.state = state or SessionState()

    def on_voltage(self, text: str) -> str | None:
        """Process a voltage reading. Returns the alert text to send, if any."""
        voltage = parse_reading(text)
        if voltage is None:
            return None

        st = self.state
        st.last_voltage = voltage
        message = None

        if voltage < st.warning_threshold and not st.warning_active:
            st.warning_active = True
            message = f"Voltage low: {format_voltage(voltage)}"

        if voltage > st.warning_threshold:
            if st.warning_active:
                message = f"Voltage good: {format_voltage(voltage)}"
            st.warning_active = False

        return message

    def on_warning_voltage(self, text: str) -> None:
        """Replace the warning threshold.

        The active flag is left alone; the next voltage reading is compared
        against the new threshold.
        """
        threshold = parse_reading(text)
        if threshold is None:
            return
        self.state.warning_threshold = threshold
        logger.info("Set new warning voltage of %s", format_voltage(threshold))

    def voltage_report(self) -> str:
        return f"Current voltage is {format_voltage(self.state.last_voltage)}"
