"""EEPROM integrity checks for the MLX90641: Hamming decoding and device check."""

from __future__ import annotations

from collections.abc import Sequence

EEPROM_WORDS = 832
FIRST_PROTECTED_WORD = 16
DATA_MASK = 0x07FF
DEVICE_SELECT_WORD = 10
DEVICE_SELECT_BIT = 0x0040

_PARITY_MASKS = tuple(
    sum(1 << bit for bit in bits)
    for bits in (
        (0, 1, 3, 4, 6, 8, 10, 11),
        (0, 2, 3, 5, 6, 9, 10, 12),
        (1, 2, 3, 7, 8, 9, 10, 13),
        (4, 5, 6, 7, 8, 9, 10, 14),
        range(16),
    )
)

# Syndrome value -> bit in error.
_SYNDROME_BIT = {
    16: 15, 24: 14, 20: 13, 18: 12, 17: 11, 31: 10, 30: 9, 29: 8,
    28: 7, 27: 6, 26: 5, 25: 4, 23: 3, 22: 2, 21: 1, 19: 0,
}


class EepromError(Exception):
    """EEPROM content cannot be used.

    ``code`` is -10 for an uncorrectable Hamming error and -7 when the data
    does not belong to an MLX90641. After a Hamming failure ``words`` holds
    the decoded content and ``addresses`` the words that could not be fixed.
    """

    def __init__(self, message: str, code: int, words=None, addresses=()) -> None:
        super().__init__(message)
        self.code = code
        self.words = words
        self.addresses = tuple(addresses)


def _syndrome(word: int) -> int:
    return sum(
        (bin(word & mask).count("1") & 1) << index for index, mask in enumerate(_PARITY_MASKS)
    )


def hamming_decode(ee_data: Sequence[int]) -> tuple[list[int], list[int]]:
    """Correct and strip the Hamming code of an EEPROM dump.

    Returns the decoded words and the addresses where a single-bit error was
    corrected. Words below address 16 are returned unchanged; the others keep
    their 11 data bits. Raises :class:`EepromError` when a word holds an
    error that cannot be corrected.
    """
    if len(ee_data) != EEPROM_WORDS:
        raise ValueError(f"EEPROM dump must hold {EEPROM_WORDS} words, got {len(ee_data)}")
    words = list(ee_data)
    corrected: list[int] = []
    failed: list[int] = []
    for address in range(FIRST_PROTECTED_WORD, EEPROM_WORDS):
        data = words[address]
        check = _syndrome(data)
        if check:
            bit = _SYNDROME_BIT.get(check)
            if bit is None:
                failed.append(address)
            else:
                data ^= 1 << bit
                corrected.append(address)
        words[address] = data & DATA_MASK
    if failed:
        raise EepromError(
            f"uncorrectable EEPROM error at {len(failed)} word(s)",
            code=-10,
            words=words,
            addresses=failed,
        )
    return words, corrected


def check_eeprom_valid(ee_data: Sequence[int]) -> bool:
    """Return True when the dump is from an MLX90641; raise otherwise."""
    if not ee_data[DEVICE_SELECT_WORD] & DEVICE_SELECT_BIT:
        raise EepromError("EEPROM does not belong to an MLX90641", code=-7)
    return True