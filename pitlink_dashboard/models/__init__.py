from pitlink_dashboard.models.responses import HealthResponse, NoDataResponse

__all__ = ["HealthResponse", "NoDataResponse"]
