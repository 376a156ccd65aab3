"""Константы комнат и сообщений."""
import re
import string

ROOM_ID_MIN_LEN = 4
ROOM_ID_MAX_LEN = 12
ROOM_ID_RE = re.compile(rf"^[A-Za-z0-9]{{{ROOM_ID_MIN_LEN},{ROOM_ID_MAX_LEN}}}$")

# Сгенерированные id: 8 символов, верхний регистр и цифры
GENERATED_ID_LEN = 8
GENERATED_ID_ALPHABET = string.ascii_uppercase + string.digits

DEFAULT_DISPLAY_NAME = "Player"
DEFAULT_OPPONENT_NAME = "Opponent"

MAX_PARTICIPANTS = 2
