from __future__ import annotations
from typing import NewType, Literal

Address = NewType("Address", str)   # 0x-prefixed, 40 hex chars
Topic   = NewType("Topic", str)     # 66-char 0x-hash
Method  = Literal["eth_getBlockByNumber", "eth_getBlockReceipts", "eth_getLogs"]
BenchKind = Literal["blocks", "receipts", "logs"]
DispatchPhase = Literal["idle", "running", "draining", "done"]
