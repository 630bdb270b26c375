import sys
import time
from loguru import logger
from uestats.core.gnb.stats import UE_STATS_RULES, match_line, extract_fields, new_ue_record

import os
if not os.getenv('DEBUG'):
    logger.remove()
    logger.add(sys.stderr, level="INFO")

class UEStatsAssembler:
    """
    Reassembles the multi-line MAC stats blocks of the gNB into one record per UE.

    A record is opened on the first line that mentions an RNTI, filled by the
    following lines of that RNTI in any order and emitted when the terminal
    (ulsch) line arrives. The RNTI is then forgotten, so a later block with the
    same RNTI starts from a fresh record.
    """
    def __init__(self, rules=UE_STATS_RULES, clock=time.time):
        self.rules = rules
        self.clock = clock
        # in-progress records, only touched by the assembling thread
        self.ue_records = {}

        self.stats_matched_lines = 0
        self.stats_ignored_lines = 0
        self.stats_malformed_lines = 0
        self.stats_completed_records = 0

    def process_line(self, line : str):
        """
        returns the completed record if this line closed one, otherwise None
        """
        res = match_line(line, self.rules)
        if res is None:
            self.stats_ignored_lines = self.stats_ignored_lines + 1
            return None
        rule, match = res

        try:
            rnti, fields = extract_fields(rule, match)
        except ValueError as ex:
            self.stats_malformed_lines = self.stats_malformed_lines + 1
            logger.error(f"Error parsing line: {line}")
            logger.error(f"Exception: {ex}")
            return None
        self.stats_matched_lines = self.stats_matched_lines + 1

        if rnti not in self.ue_records:
            self.ue_records[rnti] = new_ue_record(rnti, self.clock())
            logger.debug(f"[assembler] new record for rnti {rnti}")
        record = self.ue_records[rnti]
        record.update(fields)

        if rule.terminal:
            del self.ue_records[rnti]
            self.stats_completed_records = self.stats_completed_records + 1
            logger.debug(f"[assembler] completed record for rnti {rnti}: {record}")
            return dict(record)
        return None

    def run(self, lines):
        records = []
        for line in lines:
            line = line.replace('\n', '')
            if not line:
                continue
            record = self.process_line(line)
            if record is not None:
                records.append(record)
        return records

    def pending_rntis(self):
        return list(self.ue_records.keys())

    def get_stats(self):
        return {
            'matched': self.stats_matched_lines,
            'ignored': self.stats_ignored_lines,
            'malformed': self.stats_malformed_lines,
            'completed': self.stats_completed_records,
        }
