from aqring import area
from aqring.area import assess_area
from aqring.data_ingest import AirQualityClient, Reading
from aqring.utils_geo import GeoPoint

CENTER = GeoPoint(51.1657, 10.4515)


class UniformClient:
    """Returns the same PM2.5 reading for every point except those listed in ``failing``."""

    def __init__(self, pm2_5=40.0, failing=()):
        self.pm2_5 = pm2_5
        self.failing = set(failing)
        self.requested = []

    def fetch_readings(self, points):
        self.requested.extend(points)
        return [
            Reading(point=p, aqi_category=3, component_concentrations={"pm2_5": self.pm2_5}, observed_at_epoch_seconds=1)
            for p in points
            if p.sample_id not in self.failing
        ]


def test_uniform_pm25_scenario():
    client = UniformClient(pm2_5=40.0)
    result = assess_area(client, CENTER, radius_km=10.0, parameter="pm2_5")

    assert len(client.requested) == 81
    assert result.mean_value == 40.0
    assert result.band.label == "Unhealthy"
    assert result.sample_count == 81
    assert result.requested_count == 81
    assert result.center_point == CENTER


def test_partial_failures_reduce_sample_count():
    client = UniformClient(failing={"center", "ring5-00", "ring5-15"})
    result = assess_area(client, CENTER, radius_km=10.0, parameter="pm2_5")

    assert result.sample_count == 78
    assert result.requested_count == 81
    assert result.mean_value == 40.0


def test_total_failure_yields_no_data():
    client = UniformClient()
    client.failing = {p.sample_id for p in area.generate_sample_points(CENTER, 10.0)}
    result = assess_area(client, CENTER, radius_km=10.0, parameter="aqi")

    assert result.sample_count == 0
    assert result.mean_value is None


def test_end_to_end_with_http_layer(monkeypatch):
    class Response:
        status_code = 200
        text = ""

        def json(self):
            return {"list": [{"main": {"aqi": 3}, "components": {"pm2_5": 40.0}, "dt": 1}]}

    class Session:
        def get(self, url, params=None, timeout=None):
            return Response()

        def close(self):
            pass

    client = AirQualityClient("key", session=Session())
    result = assess_area(client, CENTER, radius_km=10.0, parameter="pm2_5")

    assert result.sample_count == 81
    assert result.mean_value == 40.0
    assert result.band.label == "Unhealthy"
