from venue_pulse.models.requests import PingRequest, VibeReportRequest

__all__ = ["PingRequest", "VibeReportRequest"]
