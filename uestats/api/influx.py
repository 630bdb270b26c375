from datetime import datetime
from loguru import logger
from influxdb_client import InfluxDBClient, Point, WritePrecision
from influxdb_client.client.write_api import SYNCHRONOUS

class InfluxSink:
    """
    pushes every UE stats record as one point, tagged with its rnti
    """
    def __init__(self, influx_db_address, token, bucket, org, point_name = "ue_stats", time_key = "timestamp"):
        self.point_name = point_name
        self.bucket = bucket
        self.org = org
        self.time_key = time_key
        self.influx_db_address = influx_db_address
        self.token = token
        self.client = InfluxDBClient(url=influx_db_address, token=token)
        self.write_api = self.client.write_api(write_options=SYNCHRONOUS)
        self.failed = False

    def record_to_point(self, record : dict):
        point = Point(self.point_name).tag("rnti", record["rnti"])
        for key, value in record.items():
            if key in ("rnti", self.time_key):
                continue
            point.field(key, value)
        point.time(datetime.fromtimestamp(record[self.time_key]), WritePrecision.NS)
        return point

    def write(self, record : dict):
        if self.failed:
            return False
        try:
            self.write_api.write(self.bucket, self.org, self.record_to_point(record))
        except Exception as ex:
            logger.error(f"[writer] failed to push record of rnti {record['rnti']} to influxDB: {ex}, disabling the influx sink")
            self.failed = True
            return False
        return True

    def close(self):
        self.client.close()
