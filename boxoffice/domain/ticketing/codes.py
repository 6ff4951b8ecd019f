import re
import secrets
from boxoffice.core.config import TICKET_CODE_ALPHABET, TICKET_CODE_LENGTH

TICKET_CODE_RE = re.compile(rf"[A-Z0-9]{{{TICKET_CODE_LENGTH}}}")


def generate_ticket_code() -> str:
    return "".join(secrets.choice(TICKET_CODE_ALPHABET) for _ in range(TICKET_CODE_LENGTH))


def generate_ticket_codes(count: int, *, exclude: set[str] | None = None) -> list[str]:
    """Distinct codes, none of them in `exclude`."""
    taken = set(exclude or ())
    codes: list[str] = []
    while len(codes) < count:
        code = generate_ticket_code()
        if code in taken:
            continue
        taken.add(code)
        codes.append(code)
    return codes


def is_valid_ticket_code(value: str | None) -> bool:
    return bool(value) and TICKET_CODE_RE.fullmatch(value) is not None
