"""Small string helpers shared by the shell."""

import errno

_DIGITS = "0123456789"


def remove_quotes(text: str) -> str:
    """Drop the quote characters that delimit quoted sections of ``text``.

    A double quote inside single quotes, or a single quote inside double
    quotes, is kept as an ordinary character.
    """
    singles = doubles = 0
    kept = []
    for char in text:
        if char == '"' and singles % 2 == 0:
            doubles += 1
        elif char == "'" and doubles % 2 == 0:
            singles += 1
        if (char != '"' or singles % 2) and (char != "'" or doubles % 2):
            kept.append(char)
    return "".join(kept)


def prefix_until(text: str, end: str) -> str:
    """Return the part of ``text`` before the first ``end`` character."""
    index = text.find(end) if end else -1
    return text if index < 0 else text[:index]


def digits_to_int(text: str) -> int:
    """Read the decimal digits of ``text`` as a number, skipping anything else."""
    number = 0
    for char in text:
        if char in _DIGITS:
            number = number * 10 + int(char)
    return number


def is_numeric(text: str) -> bool:
    """Return True if every character of ``text`` is an ASCII digit."""
    return all(char in _DIGITS for char in text)


def exit_status_for_errno(err: int) -> int:
    """Map an errno value to the exit status a shell reports for it."""
    if err == errno.ENOENT:
        return 127
    if err == errno.EACCES:
        return 126
    return err