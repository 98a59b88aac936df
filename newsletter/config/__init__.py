"""Configuration package.

Note: settings are not built at package import time so that test collection
stays free from environment requirements. Import from
``newsletter.config.settings`` directly where needed.
"""

__all__: list[str] = []
