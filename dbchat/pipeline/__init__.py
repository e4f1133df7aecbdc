"""
Pipeline package for DBChat.

Connects schema introspection, SQL generation and execution into one request flow.
"""

from dbchat.pipeline.orchestrator import DBChatPipeline, PipelineResult

__all__ = ["DBChatPipeline", "PipelineResult"]
