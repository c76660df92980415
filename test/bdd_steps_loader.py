"""
BDD Steps Import Module

Consolidates all Gherkin step definitions (Given/When/Then).
This module is imported by conftest.py to register all BDD steps with pytest-bdd.
"""

# =============================================================================
# Lab Booking Steps
# =============================================================================
from test.service.lab_booking.integration.steps.lab_booking.fixtures import *  # noqa: E402, F403
from test.service.lab_booking.integration.steps.lab_booking.given import *  # noqa: E402, F403
from test.service.lab_booking.integration.steps.lab_booking.then import *  # noqa: E402, F403
from test.service.lab_booking.integration.steps.lab_booking.when import *  # noqa: E402, F403
