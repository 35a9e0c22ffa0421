MASK32 = 0xFFFFFFFF


def imul(a: int, b: int) -> int:
    return (a * b) & MASK32


def digest(text: str, seed: int = 0) -> int:
    """
    Fast non-cryptographic 53-bit string hash (cyrb53).
    Same text + seed -> same value in [0, 2**53).
    """
    h1 = (0xDEADBEEF ^ seed) & MASK32
    h2 = (0x41C6CE57 ^ seed) & MASK32
    for ch in text or "":
        c = ord(ch)
        h1 = imul(h1 ^ c, 2654435761)
        h2 = imul(h2 ^ c, 1597334677)
    h1 = imul(h1 ^ (h1 >> 16), 2246822507) ^ imul(h2 ^ (h2 >> 13), 3266489909)
    h2 = imul(h2 ^ (h2 >> 16), 2246822507) ^ imul(h1 ^ (h1 >> 13), 3266489909)
    return 4294967296 * (0x1FFFFF & h2) + h1
