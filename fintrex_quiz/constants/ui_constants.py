"""Qt UI constants used across player widgets."""

WINDOW_TITLE: str = "Fintrex Quiz"

AUTH_HEADING: str = "Enter Your Details"
AUTH_NIC_LABEL: str = "NIC"
AUTH_NIC_PLACEHOLDER: str = "Enter NIC"
AUTH_NAME_LABEL: str = "Name"
AUTH_NAME_PLACEHOLDER: str = "Enter Name"
AUTH_MOBILE_LABEL: str = "Mobile Number"
AUTH_MOBILE_PLACEHOLDER: str = "07XXXXXXXX"
AUTH_SUBMIT_BUTTON: str = "Start Game"
INVALID_NIC_MESSAGE: str = "Please enter a valid Sri Lankan NIC!"
INVALID_MOBILE_MESSAGE: str = "Please enter a valid Sri Lankan Mobile number!"
SERVER_UNREACHABLE_MESSAGE: str = "Server not reachable."

START_HEADING: str = "Fintrex Finance"
START_SUBHEADING: str = "Customer Service Week"
START_BUTTON: str = "Start Quiz"

QUESTION_PROGRESS_TEMPLATE: str = "Question {current} / {total}"
TIME_LEFT_TEMPLATE: str = "Time Left: {time}"
SUBMIT_ANSWER_BUTTON: str = "Submit Answer"
CORRECT_TITLE: str = "Correct!"
WRONG_TITLE: str = "Wrong!"
TIME_UP_TITLE: str = "Time's up!"
TIME_UP_MESSAGE: str = "Your time has run out."

WON_TITLE: str = "Congratulations, You WON!"
LOST_TITLE: str = "Better luck next time!"
FINAL_SCORE_TEMPLATE: str = "You scored {score} / {total}."
REVIEW_HEADING: str = "Review Your Answers"
LOGOUT_BUTTON: str = "Logout"

QUESTION_BANK_ERROR_TITLE: str = "Uh-oh!"
QUESTION_BANK_ERROR_MESSAGE: str = "Couldn't load questions. Try again later."
