"""Constants for the Liquid Three monitor."""

# Device defaults
DEFAULT_DEVICE_HOST = "192.168.5.9"
DEFAULT_DEVICE_PORT = 5500
DEVICE_DATA_PATH = "/data/get"

# Default configuration paths
DEFAULT_CONFIG_FILE = "liquid_monitor.yaml"
DEFAULT_CONFIG_EXAMPLE_FILE = "liquid_monitor.yaml.example"
CONFIG_ENV_VAR = "LIQUID_MONITOR_CONFIG"

# Response fields
FIELD_TEMPERATURE = "temperature"
FIELD_LIGHT_ON = "isGrowLightOn"
FIELD_BRIGHTNESS = "brightness"

# Poll interval (seconds)
POLL_INTERVAL = 5.0

# Timeouts (seconds)
DEVICE_REQUEST_TIMEOUT = 10.0

# Update pulse: horizontal offsets, one step each
PULSE_OFFSETS = (10, -10, 0)
PULSE_STEP_SECONDS = 0.1

# Display
DISPLAY_TITLE = "Liquid Three Monitor"
INVALID_ENDPOINT_ALERT = "Please enter a valid IP address."

# MQTT Topics and Payloads
DEFAULT_MQTT_BASE_TOPIC = "liquid_monitor"
MQTT_PAYLOAD_ON = "ON"
MQTT_PAYLOAD_OFF = "OFF"
MQTT_PAYLOAD_AVAILABLE = "true"
MQTT_PAYLOAD_UNAVAILABLE = "false"

# MQTT settings
DEFAULT_MQTT_HOST = "localhost"
DEFAULT_MQTT_PORT = 1883
MQTT_QOS = 1
MQTT_KEEPALIVE = 60
