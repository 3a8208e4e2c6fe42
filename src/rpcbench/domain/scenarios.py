# rpcbench/domain/scenarios.py
from __future__ import annotations

from dataclasses import dataclass

from eth_utils import is_hex, to_checksum_address

from .errors import ConfigurationError
from .models import LogFilter
from .value_types import Address, Topic


# ──────────────────────────────
# Topic0 constants
# ──────────────────────────────

APPROVAL_T0 = "0x8c5be1e5ebec7d5bd14f71427d1e84f3dd0314c0f7b2291e5b200ac8c7c3b925"
TRANSFER_T0 = "0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef"
DISCOUNT_APPLIED_T0 = "0xfe82878a5987cea7129c337d7aaa6a49585236fc104b066223bc5b5e49510e2b"

USDC_BASE = "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913"
BASENAMES_REGISTRAR = "0x2B7704f1cb9324cD8586B33C6c540CbD64E58237"

DEFAULT_SCENARIO = "usdc-approvals"


@dataclass(slots=True, frozen=True)
class Scenario:
    name: str
    description: str
    addresses: tuple[str, ...]
    topics: tuple[str, ...]
    start_block: int = 0
    end_block: int = 27_241_550

    def log_filter(self) -> LogFilter:
        return LogFilter(
            addresses=tuple(Address(to_checksum_address(a)) for a in self.addresses),
            topics=tuple(Topic(_normalize_topic(t)) for t in self.topics),
        )


def _normalize_topic(t: str) -> str:
    s = t.strip().lower()
    if not (s.startswith("0x") and len(s) == 66 and is_hex(s)):
        raise ConfigurationError(f"invalid topic: {t!r}")
    return s


def _topic_from_address(addr: str) -> str:
    return "0x" + addr.lower()[2:].rjust(64, "0")


SCENARIOS: dict[str, Scenario] = {s.name: s for s in (
    Scenario(
        name="usdc-approvals",
        description="All USDC Approval events on Base",
        addresses=(USDC_BASE,),
        topics=(APPROVAL_T0,),
    ),
    Scenario(
        name="usdc-aave-withdrawals",
        description="USDC transferred out of the Aave v3 pool",
        addresses=(USDC_BASE,),
        topics=(TRANSFER_T0, _topic_from_address("0x55b33c314560016688d4764f1eae288ad49576ac")),
    ),
    Scenario(
        name="usdc-user-transfers",
        description="Transfers from one user across several token contracts",
        addresses=(
            USDC_BASE,
            "0x4e65fE4DbA92790696d040ac24Aa414708F5c0AB",
            "0x53983F31E8E0D0c3Fd0b8d85654989A1336317d7",
            "0xE3B53AF74a4BF62Ae5511055290838050bf764Df",
            "0x8B8AfE27885eF024C053Fa831190c86FD56ae596",
            "0x904EfBBaAB6CF3e4499968af1B68aa54D5b586DF",
            "0x9704d2adBc02C085ff526a37ac64872027AC8a50",
            "0x623cD3a3EdF080057892aaF8D773Bbb7A5C9b6e9",
            "0x8e5C04F82d6464b420E2018362E7e7aB813cF190",
            "0x13aFd522018bdc5Da9Cce2f2Cb50B14621Aa99b7",
            "0x07c3233263063D0e9dF5F18719bf59Ea1465E0F5",
            "0x65F8609BEc7455a70248EdBA8884BA68Ca07f2A7",
            "0x5447C43A9869135E3840AdB4cB6243901eabb24d",
            "0x458AD5B487F4442245E4C5eA7249009E607A5583",
            "0xd09600475435CaB0E40DabDb161Fb5A3311EFcB3",
            "0x59dca05b6c26dbd64b5381374aAaC5CD05644C28",
            "0xEB466342C4d449BC9f53A865D5Cb90586f405215",
        ),
        topics=(TRANSFER_T0, _topic_from_address("0x14c5Ca9F70dFc36Ce5919A460CF2E48D7e933cEE")),
    ),
    Scenario(
        name="basenames-discounts",
        description="All DiscountApplied events on the Basenames registrar",
        addresses=(BASENAMES_REGISTRAR,),
        topics=(DISCOUNT_APPLIED_T0,),
    ),
)}


def get_scenario(name: str | None) -> Scenario:
    key = name or DEFAULT_SCENARIO
    try:
        return SCENARIOS[key]
    except KeyError:
        raise ConfigurationError(
            f'Scenario "{key}" not found. Available scenarios: {", ".join(SCENARIOS)}') from None
