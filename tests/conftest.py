"""Shared fixtures for the uestats tests."""

import pytest
from loguru import logger

# one complete MAC stats block of UE 928c, as printed by the gNB
UE_928C_BLOCK = [
    "[NR_MAC]   Frame.Slot 128.0",
    "UE RNTI 928c CU-UE-ID 1 in-sync PH 45 dB PCMAX 21 dBm, average RSRP -83 (17 meas)",
    "UE 928c: CQI 13, RI 2, PMI (0,0)",
    "UE 928c: UL-RI 1, TPMI 0",
    "UE 928c: dlsch_rounds 681/10/1/0, dlsch_errors 0, pucch0_DTX 9, BLER 0.02678 MCS (1) 22",
    "UE 928c: ulsch_rounds 1136/77/0/0, ulsch_errors 0, ulsch_DTX 0, BLER 0.07390 MCS (1) 6 (Qm 4 deltaMCS 0 dB) NPRB 106  SNR 17.5 dB",
    "UE 928c: MAC:    TX         344885 RX        2627890 bytes",
    "UE 928c: LCID 1: TX            369 RX           1074 bytes",
]

UE_6542_BLOCK = [
    "UE RNTI 6542 CU-UE-ID 2 out-of-sync PH 30 dB PCMAX 23 dBm, average RSRP -95 (4 meas)",
    "UE 6542: CQI 7, RI 1, PMI (0,0)",
    "UE 6542: UL-RI 1, TPMI 0",
    "UE 6542: dlsch_rounds 100/20/5/1, dlsch_errors 1, pucch0_DTX 3, BLER 0.15000 MCS (1) 9",
    "UE 6542: ulsch_rounds 200/30/2/0, ulsch_errors 2, ulsch_DTX 1, BLER 0.20000 MCS (1) 4 (Qm 2 deltaMCS 0 dB) NPRB 51  SNR 8.0 dB",
]


class FakeClock:
    """Returns 1000.0, 1001.0, ... on successive calls."""

    def __init__(self, start=1000.0):
        self.now = start
        self.calls = 0

    def __call__(self):
        value = self.now
        self.now = self.now + 1.0
        self.calls = self.calls + 1
        return value


@pytest.fixture
def ue_928c_block():
    return list(UE_928C_BLOCK)


@pytest.fixture
def ue_6542_block():
    return list(UE_6542_BLOCK)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def log_messages():
    """Collects loguru messages emitted during the test."""
    messages = []
    handler_id = logger.add(lambda msg: messages.append(msg.record), level="DEBUG")
    yield messages
    logger.remove(handler_id)
