"""Keep every test away from the real ~/.config/servopilot and ~/.servopilot."""

from pathlib import Path

import pytest

import servopilot.config as config_module
from servopilot.config import ConfigManager


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> ConfigManager:
    for var in (
        "SERVOPILOT_CONFIG_PATH",
        "SERVOPILOT_GPIO_PIN",
        "SERVOPILOT_MIN_PWM",
        "SERVOPILOT_MAX_PWM",
        "SERVOPILOT_DELAY_MS",
        "SERVOPILOT_LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("SERVOPILOT_DATA_DIR", str(tmp_path / "data"))

    manager = ConfigManager(tmp_path / "config.yaml")
    monkeypatch.setattr(config_module, "_config_manager", manager)
    return manager
