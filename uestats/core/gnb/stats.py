import re
from collections import namedtuple

# Example of one gNB MAC stats block (printed once per UE every reporting period)
#
#   [NR_MAC]   Frame.Slot 128.0
#   UE RNTI 928c CU-UE-ID 1 in-sync PH 45 dB PCMAX 21 dBm, average RSRP -83 (17 meas)
#   UE 928c: CQI 13, RI 2, PMI (0,0)
#   UE 928c: UL-RI 1, TPMI 0
#   UE 928c: dlsch_rounds 681/10/1/0, dlsch_errors 0, pucch0_DTX 9, BLER 0.02678 MCS (1) 22
#   UE 928c: ulsch_rounds 1136/77/0/0, ulsch_errors 0, ulsch_DTX 0, BLER 0.07390 MCS (1) 6 (Qm 4 deltaMCS 0 dB) NPRB 106  SNR 17.5 dB
#   UE 928c: MAC:    TX         344885 RX        2627890 bytes
#   UE 928c: LCID 1: TX            369 RX           1074 bytes
#
# Lines of different UEs interleave, the ulsch line closes the block of a UE.

# columns of a UE stats record, in export order, with their zero values
UE_STATS_COLUMNS = [
    ('timestamp', 0.0),
    ('rnti', ''),
    ('ue_id', 0),
    ('state', ''),
    ('ph', 0),
    ('pcmax', 0),
    ('rsrp', 0),
    ('cqi', 0),
    ('dl_ri', 0),
    ('ul_ri', 0),
    ('dlsch_err', 0),
    ('pucch_dtx', 0),
    ('dl_bler', 0.0),
    ('dl_mcs', 0),
    ('ulsch_err', 0),
    ('ulsch_dtx', 0),
    ('ul_bler', 0.0),
    ('ul_mcs', 0),
    ('nprb', 0),
    ('snr', 0.0),
]
UE_STATS_FIELDS = [name for name, _ in UE_STATS_COLUMNS]

# numbers are captured as plain tokens, conversion decides if they are valid
NUM = r'([^,\s]+)'

INT_RE = re.compile(r'-?[0-9]+')
FLOAT_RE = re.compile(r'-?[0-9]+(\.[0-9]+)?')

def to_int(value : str) -> int:
    # int() alone would accept '1_3' or non ascii digits
    if not INT_RE.fullmatch(value):
        raise ValueError(f"invalid integer: '{value}'")
    return int(value)

def to_float(value : str) -> float:
    if not FLOAT_RE.fullmatch(value):
        raise ValueError(f"invalid number: '{value}'")
    return float(value)

StatsRule = namedtuple('StatsRule', ['name', 'pattern', 'fields', 'terminal'])

UE_STATS_RULES = [
    # UE RNTI 928c CU-UE-ID 1 in-sync PH 45 dB PCMAX 21 dBm, average RSRP -83 (17 meas)
    StatsRule(
        'basic',
        re.compile(rf'UE RNTI (\w+) CU-UE-ID {NUM} (\S+) PH {NUM} dB PCMAX {NUM} dBm, average RSRP {NUM}'),
        [('ue_id', to_int), ('state', str), ('ph', to_int), ('pcmax', to_int), ('rsrp', to_int)],
        False,
    ),
    # UE 928c: CQI 13, RI 2, PMI (0,0)
    StatsRule(
        'quality',
        re.compile(rf'UE (\w+): CQI {NUM}, RI {NUM}'),
        [('cqi', to_int), ('dl_ri', to_int)],
        False,
    ),
    # UE 928c: UL-RI 1, TPMI 0
    StatsRule(
        'ul_rank',
        re.compile(rf'UE (\w+): UL-RI {NUM}'),
        [('ul_ri', to_int)],
        False,
    ),
    # UE 928c: dlsch_rounds 681/10/1/0, dlsch_errors 0, pucch0_DTX 9, BLER 0.02678 MCS (1) 22
    StatsRule(
        'dl_sched',
        re.compile(rf'UE (\w+):.* dlsch_errors {NUM}, pucch0_DTX {NUM}, BLER {NUM} MCS \(\d+\) {NUM}'),
        [('dlsch_err', to_int), ('pucch_dtx', to_int), ('dl_bler', to_float), ('dl_mcs', to_int)],
        False,
    ),
    # UE 928c: ulsch_rounds 1136/77/0/0, ulsch_errors 0, ulsch_DTX 0, BLER 0.07390 MCS (1) 6 (Qm 4 deltaMCS 0 dB) NPRB 106  SNR 17.5 dB
    StatsRule(
        'ul_sched',
        re.compile(rf'UE (\w+):.* ulsch_errors {NUM}, ulsch_DTX {NUM}, BLER {NUM} MCS \(\d+\) {NUM} .*NPRB {NUM}\s+SNR {NUM}'),
        [('ulsch_err', to_int), ('ulsch_dtx', to_int), ('ul_bler', to_float), ('ul_mcs', to_int), ('nprb', to_int), ('snr', to_float)],
        True,
    ),
]


def new_ue_record(rnti : str, timestamp : float) -> dict:
    record = dict(UE_STATS_COLUMNS)
    record['rnti'] = rnti
    record['timestamp'] = timestamp
    return record


def match_line(line : str, rules=UE_STATS_RULES):
    """
    returns (rule, match) for the first rule that matches the line,
    None if no rule does
    """
    for rule in rules:
        match = rule.pattern.search(line)
        if match:
            return rule, match
    return None


def extract_fields(rule : StatsRule, match):
    """
    converts the captured groups of a matched line
    returns (rnti, fields dict), raises ValueError on malformed numbers
    """
    rnti = match.group(1)
    fields = {}
    for idx, (name, converter) in enumerate(rule.fields):
        value = match.group(idx + 2)
        try:
            fields[name] = converter(value)
        except ValueError as ex:
            raise ValueError(f"field '{name}' of '{rule.name}' line: {ex}") from ex
    return rnti, fields
