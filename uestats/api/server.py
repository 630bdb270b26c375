import threading, traceback, time, os, sys, json, socket
from loguru import logger

from uestats.core.common.utils import ClosableQueue
from uestats.core.gnb.gnb import UEStatsAssembler
from uestats.api.sink import CSVSink
from uestats.api.influx import InfluxSink

if not os.getenv('DEBUG'):
    logger.remove()
    logger.add(sys.stderr, level="INFO")

LOGGING_PERIOD_SEC = 2

DEFAULT_OUTPUT_FILE = "ue_metrics.csv"

org = "expeca"
bucket = "uestats"
influx_db_address = "http://0.0.0.0:8086"
auth_info_addr = "/uestats/influx_auth.json"
point_name = "ue_stats"


def read_lines(source, rawdata_queue : ClosableQueue):
    """
    pushes every non-empty line of the source to the raw line queue,
    closes the queue when the source is exhausted
    """
    stats_rcv_lines = 0
    stats_empty_lines = 0
    start_time = time.time()

    logger.info("[reader] starts.")
    try:
        for line in source:
            line = line.rstrip('\r\n')
            if not line:
                stats_empty_lines = stats_empty_lines + 1
                continue
            rawdata_queue.push(line)
            stats_rcv_lines = stats_rcv_lines + 1

            # print stats
            current_time = time.time()
            if int(current_time - start_time) >= LOGGING_PERIOD_SEC:
                logger.info(f"[reader] received lines: {stats_rcv_lines}, empty lines: {stats_empty_lines}")
                start_time = current_time
    except Exception as ex:
        logger.error(f"[reader] {ex}")
        logger.warning(traceback.format_exc())
    finally:
        rawdata_queue.close()

    logger.info(f"[reader] end of input, received lines: {stats_rcv_lines}, empty lines: {stats_empty_lines}")
    return stats_rcv_lines


def assemble_records(rawdata_queue : ClosableQueue, records_queue : ClosableQueue, assembler : UEStatsAssembler):
    """
    feeds the raw lines to the assembler and pushes the completed records,
    closes the records queue once the raw line queue is closed and drained
    """
    start_time = time.time()

    logger.info("[assembler] starts.")
    try:
        while True:
            line = rawdata_queue.blocking_pop()
            if line is None:
                break
            try:
                record = assembler.process_line(line)
            except Exception as ex:
                logger.error(f"[assembler] {ex}")
                logger.warning(traceback.format_exc())
                continue
            if record is not None:
                records_queue.push(record)

            # print stats
            current_time = time.time()
            if int(current_time - start_time) >= LOGGING_PERIOD_SEC:
                logger.info(f"[assembler] {assembler.get_stats()}, queued lines: {rawdata_queue.get_length()}")
                start_time = current_time
    finally:
        records_queue.close()

    pending = assembler.pending_rntis()
    if len(pending) > 0:
        logger.warning(f"[assembler] input ended with incomplete records for rntis {pending}, discarding them")
    logger.info(f"[assembler] done, {assembler.get_stats()}")
    return assembler.stats_completed_records


def write_records(records_queue : ClosableQueue, sinks : list):
    """
    hands every completed record to all the sinks, closes them once the
    records queue is closed and drained
    """
    stats_written_records = 0
    start_time = time.time()

    logger.info("[writer] starts.")
    try:
        while True:
            record = records_queue.blocking_pop()
            if record is None:
                break
            for sink in sinks:
                try:
                    sink.write(record)
                except Exception as ex:
                    logger.error(f"[writer] {ex}")
                    logger.warning(traceback.format_exc())
            stats_written_records = stats_written_records + 1

            # print stats
            current_time = time.time()
            if int(current_time - start_time) >= LOGGING_PERIOD_SEC:
                logger.info(f"[writer] records: {stats_written_records}, queued records: {records_queue.get_length()}")
                start_time = current_time
    finally:
        for sink in sinks:
            try:
                sink.close()
            except Exception as ex:
                logger.error(f"[writer] failed to close sink: {ex}")

    logger.info(f"[writer] done, records: {stats_written_records}")
    return stats_written_records


class UEStatsPipeline:
    """
    reader -> raw lines -> assembler -> completed records -> writer,
    one thread per stage
    """
    def __init__(self, source, sinks, assembler=None):
        self.source = source
        self.sinks = sinks
        self.assembler = assembler if assembler is not None else UEStatsAssembler()
        self.rawdata_queue = ClosableQueue()
        self.records_queue = ClosableQueue()
        self.stats = {}

    def _reader(self):
        self.stats['lines'] = read_lines(self.source, self.rawdata_queue)

    def _assembler(self):
        self.stats['completed'] = assemble_records(self.rawdata_queue, self.records_queue, self.assembler)

    def _writer(self):
        self.stats['written'] = write_records(self.records_queue, self.sinks)

    def run(self):
        threads = [
            threading.Thread(target=self._reader, name="reader", daemon=True),
            threading.Thread(target=self._assembler, name="assembler", daemon=True),
            threading.Thread(target=self._writer, name="writer", daemon=True),
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        return self.stats.get('written', 0)


def env_flag(name):
    var_str = os.environ.get(name)
    if var_str is not None:
        return var_str.lower() in ['true', '1', 'yes']
    return False


def read_influx_token(auth_file):
    try:
        # Read the JSON file
        with open(auth_file) as f:
            data = json.load(f)
        # Extract token
        return data[0]['token']
    except FileNotFoundError:
        return None


def accept_connection(port):
    server = socket.create_server(('0.0.0.0', port))
    logger.info(f"[reader] waiting for the gnb on {server.getsockname()}")
    conn, addr = server.accept()
    server.close()
    logger.info(f"[reader] connection from {addr}.")
    return conn


def serve():

    # get version
    from .. import __version__
    logger.info(f"[main] Running uestats v{__version__}")

    output_file = sys.argv[1] if len(sys.argv) > 1 else DEFAULT_OUTPUT_FILE
    input_file = sys.argv[2] if len(sys.argv) > 2 else None

    per_ue = env_flag("PER_UE")
    logger.info(f"[main] Per UE output:{per_ue}")

    sinks = [CSVSink(output_file, per_ue=per_ue)]
    token = read_influx_token(os.environ.get("INFLUX_AUTH", auth_info_addr))
    if token:
        sinks.append(InfluxSink(influx_db_address, token, bucket, org, point_name))
        logger.info("[main] influxDB sink initialized")
    else:
        logger.warning("[main] influxDB sink NONE")

    conn = None
    listen_port = os.environ.get("LISTEN_PORT")
    if listen_port:
        conn = accept_connection(int(listen_port))
        source = conn.makefile('r', errors='ignore')
    elif input_file:
        source = open(input_file, 'r', errors='ignore')
    else:
        # gnb logs may carry stray non utf-8 bytes
        sys.stdin.reconfigure(errors='ignore')
        source = sys.stdin

    try:
        written = UEStatsPipeline(source, sinks).run()
        logger.success(f"[main] {written} records written to '{output_file}'.")
    except KeyboardInterrupt:
        logger.warning("Caught KeyboardInterrupt, terminating")
    finally:
        if source is not sys.stdin:
            source.close()
        if conn is not None:
            conn.close()
