class InternalURIs:
    API = "/api"
    V1 = API + "/v1"
    AUTOHIDE_STATUS = V1 + "/autohide/status"
    AUTOHIDE_RUN = V1 + "/autohide/run"
    METRIC_STATUS = V1 + "/metrics/status"


class MetricTree:
    ALL_PATTERN = "*"
    LEVEL_SPLITTER = "."
