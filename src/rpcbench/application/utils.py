import time


def to_hex_block(n: int) -> str:
    return hex(int(n))


def elapsed_ms(since: float) -> float:
    return (time.perf_counter() - since) * 1000.0
