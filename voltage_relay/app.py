from __future__ import annotations

# Single-entrypoint runner.
#
#     python -m voltage_relay.app [--mqtt-host HOST] [--channel-id ID]
#
# Connects to the broker, subscribes to the telemetry and chat topics, and
# processes notifications until interrupted. A failed connection or
# subscription ends the process with a non-zero status.

import argparse
import logging
import random

from .alerts import DEFAULT_WARNING_VOLTAGE, AlertStateMachine, SessionState
from .errors import BrokerConnectionError, SubscriptionError
from .logging_setup import configure_logging
from .mqtt_topics import DEFAULT_CHANNEL_ID

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Voltage relay (MQTT) - telemetry alerts to chat")
    parser.add_argument("--mqtt-host", default="mqtt.local")
    parser.add_argument("--mqtt-port", type=int, default=1883)
    parser.add_argument("--channel-id", type=int, default=DEFAULT_CHANNEL_ID, help="chat channel to report to")
    parser.add_argument(
        "--warning-voltage",
        type=float,
        default=DEFAULT_WARNING_VOLTAGE,
        help="initial low-voltage threshold (can be changed over MQTT)",
    )
    parser.add_argument("--reconnect-delay", type=int, default=5, help="seconds between reconnect attempts")
    parser.add_argument("--connect-timeout", type=float, default=10.0)
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def main() -> None:
    args = build_parser().parse_args()
    configure_logging(args.log_level)

    # Import MQTT dependencies only when running the real service.
    from .dispatcher import TelemetryDispatcher
    from .mqtt_client import MqttClient

    mqtt_client = MqttClient(
        client_id=f"voltage_relay{random.getrandbits(64)}",
        host=args.mqtt_host,
        port=args.mqtt_port,
        reconnect_delay=args.reconnect_delay,
    )
    dispatcher = TelemetryDispatcher(
        session=mqtt_client,
        channel_id=args.channel_id,
        alerts=AlertStateMachine(SessionState(warning_threshold=args.warning_voltage)),
    )

    try:
        mqtt_client.start(timeout=args.connect_timeout)
        logger.info("Relaying to chat channel %s via %s:%s", args.channel_id, args.mqtt_host, args.mqtt_port)
        dispatcher.subscribe_all()
        dispatcher.run()
    except (BrokerConnectionError, SubscriptionError) as e:
        raise SystemExit(str(e)) from e
    except KeyboardInterrupt:
        pass
    finally:
        mqtt_client.stop()


if __name__ == "__main__":
    main()
