"""
Gherkin scenarios for seat booking over HTTP.

Each scenario gets a fresh ``client`` whose lifespan resets the schema.
"""

from pytest_bdd import scenarios


scenarios('features/seat_booking.feature')
