import os, sys
from loguru import logger
import matplotlib.pyplot as plt
import numpy as np
from uestats.core.analyze import UEStatsAnalyzer

if not os.getenv('DEBUG'):
    logger.remove()
    logger.add(sys.stdout, level="INFO")

# plots the link quality of every UE found in an exported csv file
# python plot.py ue_metrics.csv ue_metrics.png

SMOOTHING_WINDOW = 5 # records

def smooth(values, window=SMOOTHING_WINDOW):
    values = np.asarray(values, dtype=float)
    if len(values) < window:
        return values
    kernel = np.ones(window) / window
    return np.convolve(values, kernel, mode='same')

if __name__ == "__main__":

    if len(sys.argv) != 3:
        logger.error("Usage: python plot.py <ue_metrics_csv> <result_png>")
        sys.exit(1)

    analyzer = UEStatsAnalyzer(sys.argv[1])
    logger.info(f"Duration: {analyzer.last_ts - analyzer.first_ts}, UEs: {analyzer.rntis}")
    print(analyzer.summary())

    fig, axes = plt.subplots(4, 1, sharex=True, figsize=(10, 10))
    for rnti in analyzer.rntis:
        records = analyzer.find_records_from_ts(analyzer.first_ts, analyzer.last_ts + np.timedelta64(1, 's'), rnti)
        if len(records) == 0:
            continue
        ts = [rec['timestamp'] for rec in records]
        axes[0].plot(ts, smooth([rec['cqi'] for rec in records]), label=rnti)
        axes[1].plot(ts, [rec['dl_mcs'] for rec in records], label=f'{rnti} dl')
        axes[1].plot(ts, [rec['ul_mcs'] for rec in records], linestyle='--', label=f'{rnti} ul')
        axes[2].plot(ts, smooth([rec['dl_bler'] for rec in records]), label=f'{rnti} dl')
        axes[2].plot(ts, smooth([rec['ul_bler'] for rec in records]), linestyle='--', label=f'{rnti} ul')
        axes[3].plot(ts, smooth([rec['snr'] for rec in records]), label=rnti)

    axes[0].set_ylabel('CQI')
    axes[1].set_ylabel('MCS')
    axes[2].set_ylabel('BLER')
    axes[3].set_ylabel('UL SNR [dB]')
    axes[3].set_xlabel('Time')
    for ax in axes:
        ax.grid(True)
        ax.legend(loc='upper right', fontsize='small')

    fig.tight_layout()
    fig.savefig(sys.argv[2])
    logger.success(f"Figure saved to '{sys.argv[2]}'.")
