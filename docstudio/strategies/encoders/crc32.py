"""Table-driven CRC-32 (IEEE 802.3, reflected polynomial 0xEDB88320)."""

_POLYNOMIAL = 0xEDB88320

_crc_table: list[int] | None = None


def get_crc32_table() -> list[int]:
    """Return the 256-entry lookup table, building it on first use."""
    global _crc_table
    if _crc_table is None:
        table = []
        for i in range(256):
            c = i
            for _ in range(8):
                c = (c >> 1) ^ _POLYNOMIAL if c & 1 else c >> 1
            table.append(c)
        _crc_table = table
    return _crc_table


def crc32(data: bytes) -> int:
    """Compute the CRC-32 checksum of ``data`` as an unsigned 32-bit int."""
    table = get_crc32_table()
    crc = 0xFFFFFFFF
    for byte in data:
        crc = (crc >> 8) ^ table[(crc ^ byte) & 0xFF]
    return crc ^ 0xFFFFFFFF
