"""Patient reviews for the appointment booking platform."""
