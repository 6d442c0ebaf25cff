"""Request descriptors, batches, and response decoding."""

from pogoprofile.messaging.batch import BatchPlan, BatchResponses, standard_batch
from pogoprofile.messaging.decoder import JsonResponseDecoder, ResponseDecoder
from pogoprofile.messaging.dispatcher import Dispatcher
from pogoprofile.messaging.requests import RequestType, ServerRequest

__all__ = [
    "BatchPlan",
    "BatchResponses",
    "Dispatcher",
    "JsonResponseDecoder",
    "RequestType",
    "ResponseDecoder",
    "ServerRequest",
    "standard_batch",
]
