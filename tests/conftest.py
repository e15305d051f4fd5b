from __future__ import annotations

import os

import pytest

from micro_ini.settings import reset_settings_cache


@pytest.fixture(autouse=True)
def _isolated_settings():
    # load_dotenv writes straight into os.environ, bypassing monkeypatch.
    before = {key for key in os.environ if key.startswith("MICRO_INI_")}
    reset_settings_cache()
    yield
    for key in [key for key in os.environ if key.startswith("MICRO_INI_")]:
        if key not in before:
            os.environ.pop(key, None)
    reset_settings_cache()
