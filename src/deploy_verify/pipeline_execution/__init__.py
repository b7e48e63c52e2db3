"""Pipeline execution exports."""

from .deployment_pipeline_use_case import PipelineExecutionError, execute_deployment_pipeline
from .pipeline_contracts import PipelineOutcome, PipelineRequest, PipelineStage

__all__ = [
    "PipelineRequest",
    "PipelineOutcome",
    "PipelineStage",
    "PipelineExecutionError",
    "execute_deployment_pipeline",
]
