"""Static metadata describing Fintrex Quiz."""

APP_NAME = "Fintrex Quiz"
APP_VERSION = "0.1.0"
APP_ABOUT_TEXT = (
    "Fintrex Quiz is a timed trivia game for Customer Service Week. "
    "Players sign in with their NIC and mobile number, answer ten questions "
    "against the clock, and get exactly one attempt."
)
