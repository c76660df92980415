from typing import Any, Dict

import pytest


@pytest.fixture
def booking_state() -> Dict[str, Any]:
    """Carries ids, the signed-in headers and the last response between steps"""
    return {}
