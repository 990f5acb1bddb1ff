"""
todo_pipeline — asynchronous request pipelines for a users/login/todos REST backend.

Every call is a composable, cancellable computation:

    build request → execute → validate status → decode payload → (chain)

with a single Result failure channel. Built on Railway-Oriented
Programming: stages return Result[T], failures short-circuit.
"""

from todo_pipeline.api import TodoApi
from todo_pipeline.failure import ApiFailure, ErrorKind
from todo_pipeline.pipeline import Pipeline
from todo_pipeline.result import Failure, Result, Success
from todo_pipeline.subscription import Subscription, SubscriptionState

__all__ = [
    "ApiFailure",
    "ErrorKind",
    "Failure",
    "Pipeline",
    "Result",
    "Subscription",
    "SubscriptionState",
    "Success",
    "TodoApi",
]

__version__ = "0.1.0"
