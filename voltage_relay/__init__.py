"""Telemetry-to-chat bridge (MQTT-based).

The relay subscribes to an MQTT broker and:
- tracks the battery voltage against an adjustable warning threshold
- posts "low" / "good" alerts to a chat channel via the broker
- answers the `voltage` chat command with the last reading

See `voltage_relay.app` for how to run.
"""
