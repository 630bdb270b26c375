import sys
from pathlib import Path
from loguru import logger
import pandas as pd
from uestats.core.gnb.stats import UE_STATS_FIELDS
from uestats.core.common.timestamp import format_timestamp

import os
if not os.getenv('DEBUG'):
    logger.remove()
    logger.add(sys.stderr, level="INFO")

COMBINED = None

class CSVSink:
    """
    Appends UE stats records to csv files.

    In combined mode every record goes to `output`, in per-UE mode each RNTI
    gets its own file named `<stem>_<rnti><suffix>` next to `output`, created
    when the first record of that RNTI arrives.
    A destination that fails to open or write is dropped, the others go on.
    """
    def __init__(self, output, per_ue=False):
        self.output = Path(output)
        self.per_ue = per_ue
        self.destinations = {}
        self.failed = set()
        self.stats_written_records = 0
        self.stats_dropped_records = 0

    def destination_path(self, rnti):
        if not self.per_ue:
            return self.output
        return self.output.with_name(f"{self.output.stem}_{rnti}{self.output.suffix}")

    def _open(self, key, path):
        fp = open(path, 'w', newline='')
        try:
            # header row
            pd.DataFrame(columns=UE_STATS_FIELDS).to_csv(fp, index=False)
        except OSError:
            fp.close()
            raise
        self.destinations[key] = fp
        logger.info(f"[writer] opened {path}")
        return fp

    def write(self, record : dict):
        key = record['rnti'] if self.per_ue else COMBINED
        if key in self.failed:
            self.stats_dropped_records = self.stats_dropped_records + 1
            logger.debug(f"[writer] destination of rnti {record['rnti']} has failed, dropping record")
            return False

        path = self.destination_path(record['rnti'])
        row = dict(record)
        row['timestamp'] = format_timestamp(record['timestamp'])
        try:
            fp = self.destinations.get(key)
            if fp is None:
                fp = self._open(key, path)
            pd.DataFrame([row], columns=UE_STATS_FIELDS).to_csv(fp, header=False, index=False)
            fp.flush()
        except OSError as ex:
            logger.error(f"[writer] failed to write to {path}: {ex}, dropping this destination")
            self.failed.add(key)
            self.stats_dropped_records = self.stats_dropped_records + 1
            fp = self.destinations.pop(key, None)
            if fp is not None:
                try:
                    fp.close()
                except OSError as cex:
                    logger.warning(f"[writer] failed to close {path}: {cex}")
            return False

        self.stats_written_records = self.stats_written_records + 1
        return True

    def close(self):
        for key, fp in self.destinations.items():
            try:
                fp.close()
            except OSError as ex:
                logger.error(f"[writer] failed to close {fp.name}: {ex}")
        self.destinations = {}
