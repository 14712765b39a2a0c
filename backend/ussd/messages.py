"""
Every string the USSD gateway puts on a handset.

Prompts and menus are part of the wire contract with the gateway and are
reproduced byte-for-byte; do not reword them.
"""

CON = "CON "
END = "END "

MAIN_MENU = (
    "CON CRMS Officer Portal\n"
    "1. Wanted Person Check\n"
    "2. Missing Person Check\n"
    "3. Background Summary\n"
    "4. Vehicle Check\n"
    "5. My Stats"
)

PROMPT_PIN = "CON Enter 4-digit Quick PIN:"
PROMPT_NIN = "CON Enter NIN (11 digits):"
PROMPT_PLATE = "CON Enter License Plate:"

# ── Terminal rejections ─────────────────────────────────────────────
INVALID_OPTION = "END Invalid option."
INVALID_REQUEST = "END Invalid request."
INVALID_PIN_FORMAT = "END Invalid PIN format. Must be 4 digits."
LOCKED_OUT = "END Too many failed attempts. Try again later."
AUTH_FAILED = "END Authentication failed."
DAILY_LIMIT = "END Daily limit reached ({limit} queries). Resets at midnight."
INVALID_NIN = "END Invalid NIN format. Must be 11 digits."
INVALID_PLATE = "END Invalid license plate format."
SERVICE_ERROR = "END Service error. Please try again later."
SERVICE_UNAVAILABLE = "END Service temporarily unavailable."
SESSION_BUSY = "END Request already in progress. Please retry."

# ── Result screens ──────────────────────────────────────────────────
WANTED_INSTRUCTION = "Do not approach alone. Call for backup."
MISSING_INSTRUCTION = "Contact station for details."


def is_terminal(response: str) -> bool:
    return response.startswith(END)
