import os, sys
from loguru import logger
import pandas as pd

if not os.getenv('DEBUG'):
    logger.remove()
    logger.add(sys.stderr, level="INFO")

SUMMARY_FIELDS = ['cqi', 'dl_mcs', 'ul_mcs', 'dl_bler', 'ul_bler', 'snr']


class UEStatsAnalyzer:
    def __init__(self, csv_addr):
        # rnti must stay a string, e.g. "6542" would otherwise load as an integer
        self.ue_stats_df = pd.read_csv(csv_addr, dtype={'rnti': str, 'state': str}, parse_dates=['timestamp'])
        self.ue_stats_df['state'] = self.ue_stats_df['state'].fillna('')
        logger.info(f"ue_stats_df: {self.ue_stats_df.columns.tolist()}, {len(self.ue_stats_df)} records")

        # check and report the first and last timestamps
        self.first_ts = self.ue_stats_df['timestamp'].min()
        self.last_ts = self.ue_stats_df['timestamp'].max()

    @property
    def rntis(self) -> list:
        return self.ue_stats_df['rnti'].unique().tolist()

    def find_records_from_ts(self, begin_ts, end_ts, rnti=None) -> list:
        """
        finds the UE stats records captured within the timestamps,
        optionally of one rnti only
        returns a list of dict
        """
        begin_ts = pd.Timestamp(begin_ts)
        end_ts = pd.Timestamp(end_ts)
        df = self.ue_stats_df[
            (self.ue_stats_df['timestamp'] < end_ts) &
            (self.ue_stats_df['timestamp'] >= begin_ts)
        ]
        if rnti is not None:
            df = df[df['rnti'] == rnti]
        logger.info(f"Number of UE stats records discovered: {df.shape[0]}")

        res_arr = []
        for j in range(df.shape[0]):
            res_arr.append(dict(df.iloc[j]))
        return res_arr

    def summary(self) -> pd.DataFrame:
        """
        per rnti record count and mean of the link quality indicators
        """
        grouped = self.ue_stats_df.groupby('rnti')
        res = grouped[SUMMARY_FIELDS].mean()
        res.insert(0, 'records', grouped.size())
        return res
