from .fakes import FakeTrackingClient, TrackingCall
from .mlflow_client import MlflowTrackingClient

__all__ = [
    "FakeTrackingClient",
    "TrackingCall",
    "MlflowTrackingClient",
]
